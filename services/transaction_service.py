"""
Transaction service.

Handles transaction creation, deletion and listing, keeping account
balances in step.
"""
import logging

from sqlalchemy import or_

from extensions import db
from models import (
    Account, Category, Entity, Transaction,
    TRX_TYPES, TRX_TYPE_EXPENSE, TRX_TYPE_INCOME, TRX_TYPE_TRANSFER
)
from api_errors import APIError
from services.account_service import AccountService
from services.tag_service import TagService
from services.user_service import UserService
from utils import convert_float_to_big_integer, get_current_unix_timestamp, parse_bool

logger = logging.getLogger(__name__)


class TransactionService:
    """Service for transaction operations."""

    @staticmethod
    def _get_owned(model, pk_column, pk_value, user_id, label):
        if pk_value is None:
            return None
        row = model.query.filter(pk_column == pk_value, model.users_user_id == user_id).first()
        if not row:
            raise APIError.bad_request(f'Invalid {label} selected')
        return row

    @staticmethod
    def _balance_changes(transaction):
        """
        Balance deltas (cents) a transaction applies, as (account_id, delta) pairs.
        """
        changes = []
        if transaction.type in (TRX_TYPE_EXPENSE, TRX_TYPE_TRANSFER):
            changes.append((transaction.accounts_account_from_id, -transaction.amount))
        if transaction.type in (TRX_TYPE_INCOME, TRX_TYPE_TRANSFER):
            changes.append((transaction.accounts_account_to_id, transaction.amount))
        return changes

    @staticmethod
    def validate_accounts(trx_type, account_from_id, account_to_id):
        """
        Validate that the accounts required by a transaction type are present.

        Income needs a destination, expense an origin, transfer both
        (and they must differ).

        Raises:
            APIError: If validation fails
        """
        if trx_type not in TRX_TYPES:
            raise APIError.bad_request(f'Invalid transaction type. Must be one of: {", ".join(TRX_TYPES)}')

        if trx_type == TRX_TYPE_INCOME and not account_to_id:
            raise APIError.bad_request('Income transactions require a destination account')
        if trx_type == TRX_TYPE_EXPENSE and not account_from_id:
            raise APIError.bad_request('Expense transactions require an origin account')
        if trx_type == TRX_TYPE_TRANSFER:
            if not account_from_id or not account_to_id:
                raise APIError.bad_request('Transfers require both an origin and a destination account')
            if account_from_id == account_to_id:
                raise APIError.bad_request('Origin and destination accounts must be different')

    @staticmethod
    def create_transaction(user_id, data):
        """
        Create a new transaction with validation.

        Args:
            user_id (int): The user ID
            data (dict): Transaction data containing:
                - date_timestamp (int): Unix timestamp
                - amount (float/str): Positive amount in currency units
                - type (str): 'I', 'E' or 'T'
                - account_from_id (int, optional)
                - account_to_id (int, optional)
                - category_id (int, optional)
                - entity_id (int, optional)
                - description (str, optional)
                - is_essential (bool, optional)
                - tags (list of str, optional): Tag names, created if missing

        Returns:
            Transaction: The created transaction

        Raises:
            APIError: If validation fails
        """
        trx_type = data.get('type')
        account_from_id = data.get('account_from_id') if trx_type != TRX_TYPE_INCOME else None
        account_to_id = data.get('account_to_id') if trx_type != TRX_TYPE_EXPENSE else None
        TransactionService.validate_accounts(trx_type, account_from_id, account_to_id)

        try:
            amount = convert_float_to_big_integer(data.get('amount'))
        except ValueError:
            raise APIError.bad_request('Invalid amount')
        if amount <= 0:
            raise APIError.bad_request('Amount must be positive')

        try:
            date_timestamp = int(data.get('date_timestamp'))
        except (TypeError, ValueError):
            raise APIError.bad_request('Invalid date_timestamp')

        TransactionService._get_owned(Account, Account.account_id, account_from_id, user_id, 'origin account')
        TransactionService._get_owned(Account, Account.account_id, account_to_id, user_id, 'destination account')
        TransactionService._get_owned(
            Category, Category.category_id, data.get('category_id'), user_id, 'category'
        )
        TransactionService._get_owned(Entity, Entity.entity_id, data.get('entity_id'), user_id, 'entity')

        transaction = Transaction(
            date_timestamp=date_timestamp,
            amount=amount,
            type=trx_type,
            description=data.get('description'),
            entities_entity_id=data.get('entity_id'),
            accounts_account_from_id=account_from_id,
            accounts_account_to_id=account_to_id,
            categories_category_id=data.get('category_id'),
            is_essential=parse_bool(data.get('is_essential'))
        )
        transaction.tags = TagService.get_or_create_tags(user_id, data.get('tags'))
        db.session.add(transaction)

        for account_id, delta in TransactionService._balance_changes(transaction):
            AccountService.change_balance(account_id, delta)

        db.session.commit()
        UserService.setup_last_update_timestamp(user_id, get_current_unix_timestamp())

        logger.info(f"Transaction {transaction.transaction_id} created for user {user_id}")
        return transaction

    @staticmethod
    def _user_transactions_query(user_id):
        user_accounts = db.session.query(Account.account_id).filter(Account.users_user_id == user_id)
        return Transaction.query.filter(or_(
            Transaction.accounts_account_from_id.in_(user_accounts),
            Transaction.accounts_account_to_id.in_(user_accounts)
        ))

    @staticmethod
    def get_transaction(user_id, transaction_id):
        transaction = TransactionService._user_transactions_query(user_id).filter(
            Transaction.transaction_id == transaction_id
        ).first()
        if not transaction:
            raise APIError.not_found('Transaction not found')
        return transaction

    @staticmethod
    def get_transactions_for_user(user_id, limit=100, offset=0):
        """
        Get a page of the user's transactions, newest first.

        Returns:
            tuple: (list of Transaction, total count)
        """
        query = TransactionService._user_transactions_query(user_id)
        total = query.count()
        transactions = query.order_by(
            Transaction.date_timestamp.desc(),
            Transaction.transaction_id.desc()
        ).offset(offset).limit(limit).all()
        return transactions, total

    @staticmethod
    def delete_transaction(user_id, transaction_id):
        """
        Delete a transaction and revert its effect on account balances.

        Raises:
            APIError: If the transaction does not belong to the user
        """
        transaction = TransactionService.get_transaction(user_id, transaction_id)

        for account_id, delta in TransactionService._balance_changes(transaction):
            AccountService.change_balance(account_id, -delta)

        db.session.delete(transaction)
        db.session.commit()
        UserService.setup_last_update_timestamp(user_id, get_current_unix_timestamp())
