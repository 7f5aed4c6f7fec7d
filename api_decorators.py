"""
Session key authentication decorators for the API.

Clients send their credentials on every request in headers:
    authusername: the username
    sessionkey:   the key returned by /auth/login
    mobile:       "true" for mobile clients (separate key and trust limit)
"""
import logging
from functools import wraps

from flask import request, jsonify, g

from models import User
from services.session_service import SessionService
from utils import parse_bool

logger = logging.getLogger(__name__)


def is_mobile_request():
    """Whether the current request comes from a mobile client."""
    return parse_bool(request.headers.get('mobile'))


def session_required(f):
    """Decorator requiring a valid session key.

    Sets g.current_user, g.current_user_id and g.mobile.
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        username = request.headers.get('authusername', '')
        sessionkey = request.headers.get('sessionkey', '')
        mobile = is_mobile_request()

        if not username or not sessionkey:
            return jsonify({'error': 'Missing authusername or sessionkey header'}), 401

        if not SessionService.check_session_key(username, sessionkey, mobile):
            logger.info(f"Rejected session key for user: {username}")
            return jsonify({'error': 'Invalid or expired session'}), 401

        user = User.query.filter_by(username=username).first()
        if not user:
            return jsonify({'error': 'User not found'}), 401

        g.current_user = user
        g.current_user_id = user.user_id
        g.mobile = mobile

        return f(*args, **kwargs)
    return decorated
