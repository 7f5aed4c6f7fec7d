"""
Session service.

Issues and validates the session keys clients send with every request.
Web and mobile clients each hold their own key and trust limit.
"""
import logging
import secrets

from flask import current_app

from extensions import db
from models import User
from utils import get_current_unix_timestamp

logger = logging.getLogger(__name__)


class SessionService:
    """Service for session key operations."""

    @staticmethod
    def _get_trust_limit_seconds(mobile):
        if mobile:
            return current_app.config['SESSION_TRUST_LIMIT_MOBILE']
        return current_app.config['SESSION_TRUST_LIMIT_WEB']

    @staticmethod
    def generate_new_session_key_for_user(username, mobile=False):
        """
        Generate a new session key for a user, replacing the previous one.

        Args:
            username (str): The user's username
            mobile (bool): Whether the key is for a mobile client

        Returns:
            dict: {'sessionkey': str, 'trustlimit': int}, or None if the
                  user does not exist
        """
        user = User.query.filter_by(username=username).first()
        if not user:
            return None

        sessionkey = secrets.token_urlsafe(32)
        trustlimit = get_current_unix_timestamp() + SessionService._get_trust_limit_seconds(mobile)

        if mobile:
            user.sessionkey_mobile = sessionkey
            user.trustlimit_mobile = trustlimit
        else:
            user.sessionkey = sessionkey
            user.trustlimit = trustlimit
        db.session.commit()

        return {'sessionkey': sessionkey, 'trustlimit': trustlimit}

    @staticmethod
    def check_session_key(username, sessionkey, mobile=False, renew=True):
        """
        Check whether a session key is valid for a user.

        A valid check extends the trust limit when renew is set.

        Args:
            username (str): The user's username
            sessionkey (str): Key presented by the client
            mobile (bool): Whether the client is a mobile client
            renew (bool): Extend the trust limit on success

        Returns:
            bool: True if the key matches and has not expired
        """
        if not username or not sessionkey:
            return False

        user = User.query.filter_by(username=username).first()
        if not user:
            return False

        stored_key = user.sessionkey_mobile if mobile else user.sessionkey
        trustlimit = user.trustlimit_mobile if mobile else user.trustlimit

        if not stored_key or not secrets.compare_digest(stored_key, sessionkey):
            return False

        now = get_current_unix_timestamp()
        if not trustlimit or trustlimit < now:
            logger.info(f"Expired session key for user: {username}")
            return False

        if renew:
            new_trustlimit = now + SessionService._get_trust_limit_seconds(mobile)
            if mobile:
                user.trustlimit_mobile = new_trustlimit
            else:
                user.trustlimit = new_trustlimit
            db.session.commit()

        return True

    @staticmethod
    def invalidate_session_key(username, mobile=False):
        """
        Invalidate the current session key of a user.

        Returns:
            bool: True if a user was found
        """
        user = User.query.filter_by(username=username).first()
        if not user:
            return False

        if mobile:
            user.sessionkey_mobile = None
            user.trustlimit_mobile = None
        else:
            user.sessionkey = None
            user.trustlimit = None
        db.session.commit()
        return True
