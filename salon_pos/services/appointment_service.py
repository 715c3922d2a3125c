"""
Appointment Service - booking services with staff (per account).
"""

import logging
import re
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session, joinedload

from salon_pos.exceptions import BusinessLogicError, NotFoundError
from salon_pos.models import Appointment, AppointmentStatus, Customer, Product, Staff

logger = logging.getLogger(__name__)

# Hourly calendar slots, 09:00 to 20:00
TIME_SLOTS = [f"{hour:02d}:00" for hour in range(9, 21)]

_TIME_RE = re.compile(r'^([01]\d|2[0-3]):[0-5]\d$')

REQUIRED_FIELDS = ('customer_id', 'staff_id', 'service_id', 'appointment_date', 'appointment_time')


def parse_date(value: Any) -> date:
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value), '%Y-%m-%d').date()
    except (TypeError, ValueError):
        raise BusinessLogicError(f'Invalid date: {value}')


def _parse_time(value: Any) -> str:
    value = str(value or '').strip()
    if not _TIME_RE.match(value):
        raise BusinessLogicError(f'Invalid time: {value}')
    return value


def parse_status(value: Any) -> AppointmentStatus:
    try:
        return AppointmentStatus(str(value).strip().lower())
    except ValueError:
        raise BusinessLogicError(f'Invalid status: {value}')


def _owned(session: Session, model, user_id: str, object_id: Any, label: str):
    """Load a row that must belong to the account."""
    try:
        object_id = int(object_id)
    except (TypeError, ValueError):
        raise BusinessLogicError(f'Invalid {label}')
    row = session.query(model).filter(model.id == object_id, model.user_id == user_id).first()
    if not row:
        raise NotFoundError(f'{label.capitalize()} not found')
    return row


def list_for_date(session: Session, user_id: str, day: date) -> List[Appointment]:
    """Appointments on a day ordered by time, with related rows loaded."""
    return session.query(Appointment).options(
        joinedload(Appointment.customer),
        joinedload(Appointment.staff),
        joinedload(Appointment.service)
    ).filter(
        Appointment.user_id == user_id,
        Appointment.appointment_date == day
    ).order_by(Appointment.appointment_time).all()


def appointment_at(appointments: List[Appointment], time: str, staff_id: Optional[int] = None) -> Optional[Appointment]:
    """First appointment in a slot, optionally for one staff member."""
    for appointment in appointments:
        if appointment.appointment_time == time and (not staff_id or appointment.staff_id == staff_id):
            return appointment
    return None


def get_appointment(session: Session, user_id: str, appointment_id: int) -> Appointment:
    appointment = session.query(Appointment).filter_by(id=appointment_id, user_id=user_id).first()
    if not appointment:
        raise NotFoundError('Appointment not found')
    return appointment


def _apply_fields(session: Session, user_id: str, appointment: Appointment, data: Dict[str, Any]) -> None:
    if 'customer_id' in data:
        appointment.customer_id = _owned(session, Customer, user_id, data['customer_id'], 'customer').id
    if 'staff_id' in data:
        appointment.staff_id = _owned(session, Staff, user_id, data['staff_id'], 'staff member').id
    if 'service_id' in data:
        appointment.service_id = _owned(session, Product, user_id, data['service_id'], 'service').id
    if 'appointment_date' in data:
        appointment.appointment_date = parse_date(data['appointment_date'])
    if 'appointment_time' in data:
        appointment.appointment_time = _parse_time(data['appointment_time'])
    if 'duration_minutes' in data:
        try:
            duration = int(data['duration_minutes'])
        except (TypeError, ValueError):
            raise BusinessLogicError('Duration must be a whole number of minutes')
        if duration <= 0:
            raise BusinessLogicError('Duration must be positive')
        appointment.duration_minutes = duration
    if 'notes' in data:
        appointment.notes = (data.get('notes') or '').strip() or None


def create_appointment(session: Session, user_id: str, data: Dict[str, Any]) -> Appointment:
    if any(not data.get(key) for key in REQUIRED_FIELDS):
        raise BusinessLogicError('Please fill in all required fields')

    appointment = Appointment(user_id=user_id, status=AppointmentStatus.SCHEDULED.value)
    _apply_fields(session, user_id, appointment, data)
    session.add(appointment)
    session.commit()
    logger.info(f"Appointment {appointment.id} booked for {appointment.appointment_date} {appointment.appointment_time}")
    return appointment


def update_appointment(session: Session, user_id: str, appointment_id: int, data: Dict[str, Any]) -> Appointment:
    appointment = get_appointment(session, user_id, appointment_id)
    _apply_fields(session, user_id, appointment, data)
    session.commit()
    return appointment


def set_status(session: Session, user_id: str, appointment_id: int, status: Any) -> Appointment:
    appointment = get_appointment(session, user_id, appointment_id)
    appointment.status = parse_status(status).value
    session.commit()
    return appointment


def delete_appointment(session: Session, user_id: str, appointment_id: int) -> None:
    appointment = get_appointment(session, user_id, appointment_id)
    session.delete(appointment)
    session.commit()
