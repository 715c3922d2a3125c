"""Middleware for the request user context."""
from functools import wraps
from flask import session, g

from salon_pos.exceptions import UnauthorizedError


def load_user_context():
    """
    Load the current account id into g.

    Authentication itself is handled upstream; this only reads the
    account id the login flow stored in the signed session cookie.
    """
    g.user_id = None

    user_id = session.get('user_id')
    if user_id:
        g.user_id = str(user_id)


def require_login(f):
    """
    Decorator: Require an account in the session.

    Raises UnauthorizedError, rendered as a 401 JSON response.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if g.get('user_id') is None:
            raise UnauthorizedError()
        return f(*args, **kwargs)
    return decorated_function
