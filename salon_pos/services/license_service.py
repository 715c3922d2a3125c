"""License service - who may use the POS."""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from salon_pos.exceptions import BusinessLogicError, NotFoundError
from salon_pos.models import License

logger = logging.getLogger(__name__)

ACTIVE = 'active'


def get_active_license(session: Session, user_id: str) -> Optional[License]:
    return session.query(License).filter(
        License.user_id == user_id,
        License.status == ACTIVE
    ).order_by(License.created_at.desc()).first()


def has_active_license(session: Session, user_id: str) -> bool:
    return get_active_license(session, user_id) is not None


def activate_license(session: Session, user_id: str, license_key: str) -> License:
    """
    Bind a purchased license key to an account and activate it.

    Keys are delivered by email after the hosted payment completes; a key
    already bound to another account is rejected.
    """
    license_key = (license_key or '').strip()
    if not license_key:
        raise BusinessLogicError('License key is required')

    license = session.query(License).filter_by(license_key=license_key).first()
    if not license:
        raise NotFoundError('License key not found')
    if license.user_id and license.user_id != user_id:
        raise BusinessLogicError('License key is already in use')

    license.user_id = user_id
    license.status = ACTIVE
    session.commit()
    logger.info(f"License {license.id} activated for {user_id}")
    return license
