"""
Account service.

Handles account CRUD and balance bookkeeping.
"""
import logging

from sqlalchemy import or_

from extensions import db
from models import Account, Transaction, ACCOUNT_TYPES, STATUSES, STATUS_ACTIVE
from api_errors import APIError
from services.common import get_all_for_user, get_owned_or_404, require_name
from utils import get_current_unix_timestamp, convert_float_to_big_integer, parse_bool

logger = logging.getLogger(__name__)


class AccountService:
    """Service for account operations."""

    @staticmethod
    def get_accounts_for_user(user_id, select_attributes=None):
        """
        Get all accounts of a user.

        Args:
            user_id (int): The user ID
            select_attributes (list, optional): Columns to return as dicts

        Returns:
            list: Account instances or dicts
        """
        return get_all_for_user(Account, user_id, select_attributes, order_by=Account.name)

    @staticmethod
    def get_account(user_id, account_id):
        """Get an account owned by the user, or raise 404."""
        return get_owned_or_404(Account, Account.account_id, account_id, user_id, 'Account')

    @staticmethod
    def get_excluded_account_ids():
        """Get IDs of accounts whose transfers do not count towards budgets."""
        rows = db.session.query(Account.account_id).filter(
            Account.exclude_from_budgets.is_(True)
        ).all()
        return {row.account_id for row in rows}

    @staticmethod
    def _validate_type(account_type):
        if account_type not in ACCOUNT_TYPES:
            raise APIError.bad_request(
                f'Invalid account type. Must be one of: {", ".join(ACCOUNT_TYPES)}'
            )

    @staticmethod
    def _validate_status(status):
        if status not in STATUSES:
            raise APIError.bad_request(f'Invalid status. Must be one of: {", ".join(STATUSES)}')

    @staticmethod
    def _check_duplicate_name(user_id, name, exclude_account_id=None):
        query = Account.query.filter(
            Account.users_user_id == user_id,
            Account.name == name
        )
        if exclude_account_id is not None:
            query = query.filter(Account.account_id != exclude_account_id)
        if query.first():
            raise APIError.conflict('An account with this name already exists')

    @staticmethod
    def create_account(user_id, data):
        """
        Create a new account.

        Args:
            user_id (int): Owner's user ID
            data (dict): Account data containing:
                - name (str)
                - type (str): One of ACCOUNT_TYPES
                - description (str, optional)
                - exclude_from_budgets (bool, optional)
                - status (str, optional)
                - current_balance (float, optional): Opening balance
                - color_gradient (str, optional)

        Returns:
            Account: The created account
        """
        name = require_name(data, 'Account')
        account_type = data.get('type')
        AccountService._validate_type(account_type)

        status = data.get('status', STATUS_ACTIVE)
        AccountService._validate_status(status)

        AccountService._check_duplicate_name(user_id, name)

        try:
            balance = convert_float_to_big_integer(data.get('current_balance', 0))
        except ValueError:
            raise APIError.bad_request('Invalid balance')

        now = get_current_unix_timestamp()
        account = Account(
            users_user_id=user_id,
            name=name,
            type=account_type,
            description=data.get('description'),
            exclude_from_budgets=parse_bool(data.get('exclude_from_budgets')),
            status=status,
            current_balance=balance,
            color_gradient=data.get('color_gradient'),
            created_timestamp=now,
            updated_timestamp=now
        )
        db.session.add(account)
        db.session.commit()

        logger.info(f"Account {account.account_id} created for user {user_id}")
        return account

    @staticmethod
    def update_account(user_id, account_id, data):
        """
        Update an account. Only the fields present in data are changed.

        Raises:
            APIError: 404 if not owned, 409 on duplicate name
        """
        account = AccountService.get_account(user_id, account_id)

        if 'name' in data:
            name = require_name(data, 'Account')
            AccountService._check_duplicate_name(user_id, name, exclude_account_id=account_id)
            account.name = name

        if 'type' in data:
            AccountService._validate_type(data['type'])
            account.type = data['type']

        if 'status' in data:
            AccountService._validate_status(data['status'])
            account.status = data['status']

        if 'description' in data:
            account.description = data['description']

        if 'exclude_from_budgets' in data:
            account.exclude_from_budgets = parse_bool(data['exclude_from_budgets'])

        if 'color_gradient' in data:
            account.color_gradient = data['color_gradient']

        account.updated_timestamp = get_current_unix_timestamp()
        db.session.commit()
        return account

    @staticmethod
    def delete_account(user_id, account_id):
        """
        Delete an account that has no transactions.

        Raises:
            APIError: 404 if not owned, 409 if transactions reference it
        """
        account = AccountService.get_account(user_id, account_id)

        in_use = Transaction.query.filter(or_(
            Transaction.accounts_account_from_id == account_id,
            Transaction.accounts_account_to_id == account_id
        )).first()
        if in_use:
            raise APIError.conflict('Cannot delete an account that has transactions')

        db.session.delete(account)
        db.session.commit()

    @staticmethod
    def change_balance(account_id, delta):
        """
        Add delta (cents, may be negative) to an account's balance.

        Does not commit; callers commit as part of their own unit of work.
        """
        account = Account.query.get(account_id)
        if account:
            account.current_balance = (account.current_balance or 0) + delta
            account.updated_timestamp = get_current_unix_timestamp()
        return account
