"""
Settings blueprint - shop settings, staff and customers (JSON).
"""
from flask import Blueprint, request, jsonify, g, Response
from typing import Tuple

from salon_pos.database import get_session
from salon_pos.middleware import require_login
from salon_pos.services import customer_service, settings_service

settings_bp = Blueprint('settings', __name__, url_prefix='/settings')


@settings_bp.route('/', methods=['GET'])
@require_login
def show() -> Response:
    db_session = get_session()
    settings = settings_service.get_settings(db_session, g.user_id)
    return jsonify({
        'status': 'ok',
        'settings': settings_service.settings_to_dict(settings),
        'staff': [s.to_dict() for s in settings_service.list_staff(db_session, g.user_id)],
    })


@settings_bp.route('/', methods=['PUT', 'POST'])
@require_login
def save() -> Response:
    settings = settings_service.save_settings(get_session(), g.user_id, request.get_json(silent=True) or {})
    return jsonify({'status': 'ok', 'settings': settings_service.settings_to_dict(settings)})


# ============================================================================
# Staff
# ============================================================================

@settings_bp.route('/staff', methods=['POST'])
@require_login
def staff_create() -> Tuple[Response, int]:
    data = request.get_json(silent=True) or {}
    member = settings_service.create_staff(get_session(), g.user_id, data.get('name'))
    return jsonify({'status': 'ok', 'staff': member.to_dict()}), 201


@settings_bp.route('/staff/<int:staff_id>', methods=['PUT', 'PATCH'])
@require_login
def staff_rename(staff_id: int) -> Response:
    data = request.get_json(silent=True) or {}
    member = settings_service.rename_staff(get_session(), g.user_id, staff_id, data.get('name'))
    return jsonify({'status': 'ok', 'staff': member.to_dict()})


@settings_bp.route('/staff/<int:staff_id>', methods=['DELETE'])
@require_login
def staff_delete(staff_id: int) -> Response:
    settings_service.delete_staff(get_session(), g.user_id, staff_id)
    return jsonify({'status': 'ok'})


# ============================================================================
# Customers
# ============================================================================

@settings_bp.route('/customers', methods=['GET'])
@require_login
def customers_list() -> Response:
    customers = customer_service.list_customers(get_session(), g.user_id)
    return jsonify({'status': 'ok', 'customers': [c.to_dict() for c in customers]})


@settings_bp.route('/customers', methods=['POST'])
@require_login
def customers_create() -> Tuple[Response, int]:
    customer = customer_service.create_customer(get_session(), g.user_id, request.get_json(silent=True) or {})
    return jsonify({'status': 'ok', 'customer': customer.to_dict()}), 201
