"""License gate middleware - blocks the POS if the account has no active license."""
import threading
import time
from flask import current_app, g, jsonify, request
from salon_pos.database import get_session
from salon_pos.exceptions import LicenseRequiredError
from salon_pos.services.license_service import has_active_license


# Simple in-memory cache (thread-safe)
_cache_lock = threading.Lock()
_license_cache = {}


def is_licensing_enabled():
    return current_app.config.get('LICENSING_ENABLED', True)


def is_public_route(path: str) -> bool:
    """Routes that never require a license."""
    public_prefixes = [
        '/health',
        '/metrics',
        '/static/',
        '/favicon.ico',
        '/license/',
    ]

    for prefix in public_prefixes:
        if path.startswith(prefix):
            return True

    return False


def get_cached_license_status(user_id: str) -> bool:
    """License status of an account, cached for LICENSE_CACHE_TTL seconds."""
    ttl = current_app.config.get('LICENSE_CACHE_TTL', 30)
    with _cache_lock:
        cache_entry = _license_cache.get(user_id)
        if cache_entry:
            cached_status, cached_at = cache_entry
            if time.time() - cached_at < ttl:
                return cached_status

    # Cache miss or expired
    status = has_active_license(get_session(), user_id)

    with _cache_lock:
        _license_cache[user_id] = (status, time.time())

    return status


def clear_license_cache(user_id: str = None):
    """Forget cached statuses (after an activation)."""
    with _cache_lock:
        if user_id is None:
            _license_cache.clear()
        else:
            _license_cache.pop(user_id, None)


def check_license_gate():
    """
    before_request hook: answer 402 for accounts without an active license.

    Anonymous requests pass through; require_login answers those.
    """
    if not is_licensing_enabled():
        return

    if is_public_route(request.path):
        return

    if not g.get('user_id'):
        return

    if not get_cached_license_status(g.user_id):
        error = LicenseRequiredError()
        return jsonify(error.to_dict()), error.status_code

    return
