"""Appointments blueprint - day calendar and bookings (JSON)."""
from datetime import date
from flask import Blueprint, request, jsonify, g, Response
from typing import Tuple

from salon_pos.database import get_session
from salon_pos.middleware import require_login
from salon_pos.services import appointment_service, catalog_service

appointments_bp = Blueprint('appointments', __name__, url_prefix='/appointments')


@appointments_bp.route('/', methods=['GET'])
@require_login
def day_view() -> Response:
    """
    Appointments for ?date=YYYY-MM-DD (today by default).

    `schedule` maps every time slot to the booking in it, for one staff
    member when ?staff_id= is given.
    """
    raw_date = request.args.get('date')
    day = appointment_service.parse_date(raw_date) if raw_date else date.today()
    staff_id = request.args.get('staff_id', type=int)
    appointments = appointment_service.list_for_date(get_session(), g.user_id, day)

    schedule = []
    for slot in appointment_service.TIME_SLOTS:
        booked = appointment_service.appointment_at(appointments, slot, staff_id)
        schedule.append({'time': slot, 'appointment_id': booked.id if booked else None})

    return jsonify({
        'status': 'ok',
        'date': day.isoformat(),
        'time_slots': appointment_service.TIME_SLOTS,
        'appointments': [a.to_dict() for a in appointments],
        'schedule': schedule,
    })


@appointments_bp.route('/', methods=['POST'])
@require_login
def create() -> Tuple[Response, int]:
    appointment = appointment_service.create_appointment(get_session(), g.user_id, request.get_json(silent=True) or {})
    return jsonify({'status': 'ok', 'appointment': appointment.to_dict()}), 201


@appointments_bp.route('/<int:appointment_id>', methods=['PUT', 'PATCH'])
@require_login
def update(appointment_id: int) -> Response:
    appointment = appointment_service.update_appointment(
        get_session(), g.user_id, appointment_id, request.get_json(silent=True) or {}
    )
    return jsonify({'status': 'ok', 'appointment': appointment.to_dict()})


@appointments_bp.route('/<int:appointment_id>/status', methods=['POST'])
@require_login
def change_status(appointment_id: int) -> Response:
    data = request.get_json(silent=True) or {}
    appointment = appointment_service.set_status(get_session(), g.user_id, appointment_id, data.get('status'))
    return jsonify({'status': 'ok', 'appointment': appointment.to_dict()})


@appointments_bp.route('/<int:appointment_id>', methods=['DELETE'])
@require_login
def delete(appointment_id: int) -> Response:
    appointment_service.delete_appointment(get_session(), g.user_id, appointment_id)
    return jsonify({'status': 'ok'})


@appointments_bp.route('/services', methods=['GET'])
@require_login
def services() -> Response:
    """Bookable services for the appointment form."""
    products = catalog_service.list_products(get_session(), g.user_id, services_only=True)
    return jsonify({'status': 'ok', 'services': [p.to_dict() for p in products]})
