"""
User service.

Handles signup, login, password changes and per-user lookups.
"""
import logging

from sqlalchemy import or_

from extensions import db
from models import Account, Transaction, User
from api_errors import APIError
from services.account_service import AccountService
from services.category_service import CategoryService
from services.entity_service import EntityService
from services.session_service import SessionService
from services.tag_service import TagService
from utils import (
    convert_big_integer_to_float, get_month_and_year_from_timestamp,
    is_valid_email, validate_password_strength
)

logger = logging.getLogger(__name__)


class UserService:
    """Service for user operations."""

    @staticmethod
    def create_user(user):
        """
        Create a new user with a hashed password.

        Args:
            user (dict): username, email and password

        Returns:
            User: The created user

        Raises:
            APIError: 400 on invalid data, 409 if username or email is taken
        """
        username = user.get('username') or ''
        email = user.get('email') or ''
        password = user.get('password') or ''

        if not all(isinstance(value, str) for value in (username, email, password)):
            raise APIError.bad_request('Username, email and password must be strings')

        username = username.strip()
        email = email.strip().lower()

        if not username:
            raise APIError.bad_request('Username is required')
        if len(username) > 45:
            raise APIError.bad_request('Username is too long (max 45 characters)')
        if not email or not is_valid_email(email):
            raise APIError.bad_request('Please enter a valid email address')

        is_valid, error_msg = validate_password_strength(password)
        if not is_valid:
            raise APIError.bad_request(error_msg)

        if User.query.filter_by(username=username).first():
            raise APIError.conflict('Username already registered')
        if User.query.filter_by(email=email).first():
            raise APIError.conflict('Email already registered')

        new_user = User(username=username, email=email)
        new_user.set_password(password)
        db.session.add(new_user)
        db.session.commit()

        logger.info(f"New user registered: {username} (ID: {new_user.user_id})")
        return new_user

    @staticmethod
    def attempt_login(username, password, mobile=False):
        """
        Validate credentials and issue a new session key.

        Args:
            username (str): The username
            password (str): Plain text password
            mobile (bool): Whether the client is a mobile client

        Returns:
            dict: user_id, username, email, sessionkey, sessionkey_mobile,
                  last_update_timestamp and the user's accounts (each with a
                  'balance' in currency units)

        Raises:
            APIError: 401 if the user is unknown or the password is wrong
        """
        user = User.query.filter_by(username=username).first()
        if not user:
            logger.warning(f"Failed login attempt for unknown user: {username}")
            raise APIError.not_authorized('User Not Found')

        if not user.check_password(password):
            logger.warning(f"Failed login attempt for user: {username}")
            raise APIError.not_authorized('Wrong Credentials')

        SessionService.generate_new_session_key_for_user(username, mobile)
        user_accounts = AccountService.get_accounts_for_user(user.user_id)

        logger.info(f"Successful login for user: {username} (ID: {user.user_id})")

        return {
            'user_id': user.user_id,
            'username': user.username,
            'email': user.email,
            'sessionkey': user.sessionkey,
            'sessionkey_mobile': user.sessionkey_mobile,
            'last_update_timestamp': user.last_update_timestamp,
            'accounts': [
                {
                    **account.to_dict(),
                    'balance': convert_big_integer_to_float(account.current_balance or 0),
                }
                for account in user_accounts
            ],
        }

    @staticmethod
    def get_user_id_from_username(username):
        """
        Get a user's ID from their username.

        Raises:
            APIError: 404 if the user does not exist
        """
        row = db.session.query(User.user_id).filter(User.username == username).first()
        if not row:
            raise APIError.not_found('User not found')
        return row.user_id

    @staticmethod
    def setup_last_update_timestamp(user_id, timestamp):
        """Record when the user's data last changed."""
        user = User.query.get(user_id)
        if not user:
            raise APIError.not_found('User not found')
        user.last_update_timestamp = timestamp
        db.session.commit()
        return user

    @staticmethod
    def change_user_password(user_id, current_password, new_password, mobile=False):
        """
        Change a user's password after checking the current one.

        A new session key is issued for the client, so the previous key
        stops working.

        Returns:
            dict: The new session data {'sessionkey', 'trustlimit'}

        Raises:
            APIError: 401 on unknown user or wrong password, 400 on weak password
        """
        user = User.query.get(user_id)
        if not user:
            raise APIError.not_authorized('User Not Found')

        if not user.check_password(current_password):
            raise APIError.not_authorized('Wrong credentials')

        is_valid, error_msg = validate_password_strength(new_password)
        if not is_valid:
            raise APIError.bad_request(error_msg)

        user.set_password(new_password)
        db.session.commit()

        logger.info(f"Password changed for user: {user.username}")

        return SessionService.generate_new_session_key_for_user(user.username, mobile)

    @staticmethod
    def get_first_user_transaction_date(user_id):
        """
        Get the date of the user's oldest transaction.

        Returns:
            dict or None: {'date_timestamp', 'month', 'year'}
        """
        user_accounts = db.session.query(Account.account_id).filter(Account.users_user_id == user_id)
        row = db.session.query(Transaction.date_timestamp).filter(or_(
            Transaction.accounts_account_from_id.in_(user_accounts),
            Transaction.accounts_account_to_id.in_(user_accounts)
        )).order_by(Transaction.date_timestamp.asc()).first()

        if not row:
            return None

        month, year = get_month_and_year_from_timestamp(row.date_timestamp)
        return {
            'date_timestamp': row.date_timestamp,
            'month': month,
            'year': year,
        }

    @staticmethod
    def get_user_categories_entities_tags(user_id):
        """
        Get a compact listing of the user's categories, entities and tags.

        Returns:
            dict: {'categories': [...], 'entities': [...], 'tags': [...]}
        """
        categories = CategoryService.get_all_categories_for_user(
            user_id, ['category_id', 'name', 'type']
        )
        entities = EntityService.get_all_entities_for_user(user_id, ['entity_id', 'name'])
        tags = TagService.get_all_tags_for_user(user_id, ['tag_id', 'name', 'description'])

        return {
            'categories': categories,
            'entities': entities,
            'tags': tags,
        }

    @staticmethod
    def auto_populate_demo_data(user_id):
        """Replace the user's data with a generated demo data set."""
        from services.demo_data_service import DemoDataService
        return DemoDataService.create_mock_data(user_id)
