"""Settings service - shop settings (VAT) and staff management."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List

from flask import current_app
from sqlalchemy.orm import Session

from salon_pos.exceptions import BusinessLogicError, NotFoundError
from salon_pos.models import ShopSettings, Staff

logger = logging.getLogger(__name__)


def _default_vat_rate() -> Decimal:
    return Decimal(str(current_app.config.get('DEFAULT_VAT_RATE', '0.20')))


def get_settings(session: Session, user_id: str) -> ShopSettings:
    """
    Settings row for an account.

    When the account never saved settings, an unsaved instance carrying
    the defaults is returned (VAT on at the configured rate).
    """
    settings = session.query(ShopSettings).filter_by(user_id=user_id).first()
    if settings is None:
        settings = ShopSettings(
            user_id=user_id,
            shop_name='',
            vat_enabled=True,
            vat_rate=_default_vat_rate()
        )
    return settings


def vat_config(session: Session, user_id: str):
    """(vat_enabled, vat_rate) pair consumed by the POS totals."""
    settings = get_settings(session, user_id)
    rate = settings.vat_rate if settings.vat_rate is not None else _default_vat_rate()
    return bool(settings.vat_enabled), Decimal(str(rate))


def save_settings(session: Session, user_id: str, data: Dict[str, Any]) -> ShopSettings:
    """Create or update the settings row of an account."""
    settings = session.query(ShopSettings).filter_by(user_id=user_id).first()
    if settings is None:
        settings = ShopSettings(user_id=user_id, vat_rate=_default_vat_rate())
        session.add(settings)

    if 'shop_name' in data:
        settings.shop_name = (data.get('shop_name') or '').strip()
    if 'vat_enabled' in data:
        value = data.get('vat_enabled')
        if isinstance(value, str):
            value = value.strip().lower() in ('1', 'true', 'yes', 'on')
        settings.vat_enabled = bool(value)
    if 'vat_rate' in data:
        try:
            rate = Decimal(str(data.get('vat_rate')))
        except (InvalidOperation, ValueError):
            raise BusinessLogicError('VAT rate must be a number')
        if rate < 0 or rate >= 1:
            raise BusinessLogicError('VAT rate must be between 0 and 1')
        settings.vat_rate = rate

    session.commit()
    logger.info(f"Settings saved for {user_id}")
    return settings


def settings_to_dict(settings: ShopSettings) -> Dict[str, Any]:
    return {
        'shop_name': settings.shop_name or '',
        'vat_enabled': bool(settings.vat_enabled),
        'vat_rate': str(settings.vat_rate),
    }


# ============================================================================
# Staff
# ============================================================================

def list_staff(session: Session, user_id: str) -> List[Staff]:
    return session.query(Staff).filter_by(user_id=user_id).order_by(Staff.name).all()


def _clean_staff_name(name: Any) -> str:
    name = (name or '').strip()
    if not name:
        raise BusinessLogicError('Name is required')
    if len(name) > 120:
        raise BusinessLogicError('Name must be at most 120 characters')
    return name


def get_staff(session: Session, user_id: str, staff_id: int) -> Staff:
    member = session.query(Staff).filter_by(id=staff_id, user_id=user_id).first()
    if not member:
        raise NotFoundError('Staff member not found')
    return member


def create_staff(session: Session, user_id: str, name: str) -> Staff:
    member = Staff(user_id=user_id, name=_clean_staff_name(name))
    session.add(member)
    session.commit()
    return member


def rename_staff(session: Session, user_id: str, staff_id: int, name: str) -> Staff:
    member = get_staff(session, user_id, staff_id)
    member.name = _clean_staff_name(name)
    session.commit()
    return member


def delete_staff(session: Session, user_id: str, staff_id: int) -> None:
    member = get_staff(session, user_id, staff_id)
    session.delete(member)
    session.commit()
