"""Customer service."""
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from salon_pos.exceptions import BusinessLogicError, NotFoundError
from salon_pos.models import Customer


def list_customers(session: Session, user_id: str) -> List[Customer]:
    return session.query(Customer).filter_by(user_id=user_id).order_by(Customer.name).all()


def get_customer(session: Session, user_id: str, customer_id: int) -> Customer:
    customer = session.query(Customer).filter_by(id=customer_id, user_id=user_id).first()
    if not customer:
        raise NotFoundError('Customer not found')
    return customer


def create_customer(session: Session, user_id: str, data: Dict[str, Any]) -> Customer:
    name = (data.get('name') or '').strip()
    if not name:
        raise BusinessLogicError('Name is required')

    def _optional(key: str) -> Optional[str]:
        return (data.get(key) or '').strip() or None

    customer = Customer(user_id=user_id, name=name, phone=_optional('phone'), email=_optional('email'))
    session.add(customer)
    session.commit()
    return customer
