"""License blueprint - activation of purchased keys (JSON)."""
from flask import Blueprint, request, jsonify, g, Response

from salon_pos.database import get_session
from salon_pos.middleware import require_login
from salon_pos.middleware.license_gate import clear_license_cache
from salon_pos.services import license_service

license_bp = Blueprint('license', __name__, url_prefix='/license')


@license_bp.route('/status', methods=['GET'])
@require_login
def status() -> Response:
    active = license_service.has_active_license(get_session(), g.user_id)
    return jsonify({'status': 'ok', 'active': active})


@license_bp.route('/activate', methods=['POST'])
@require_login
def activate() -> Response:
    data = request.get_json(silent=True) or {}
    license = license_service.activate_license(get_session(), g.user_id, data.get('license_key'))
    clear_license_cache(g.user_id)
    return jsonify({'status': 'ok', 'active': license.is_active})
