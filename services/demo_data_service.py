"""
Demo data service.

Replaces a user's data with a deterministic, realistic demo set so the
application can be explored without entering data by hand.
"""
import logging
import random
from datetime import date, datetime, timezone

from sqlalchemy import or_

from extensions import db
from models import (
    Account, Budget, BudgetHasCategories, Category, Entity, Tag, Transaction,
    TransactionHasTags, User,
    CATEGORY_TYPE_CREDIT, CATEGORY_TYPE_DEBIT, CATEGORY_TYPE_MIXED,
    TRX_TYPE_EXPENSE, TRX_TYPE_INCOME, TRX_TYPE_TRANSFER
)
from api_errors import APIError
from utils import convert_float_to_big_integer, get_current_unix_timestamp, get_unix_timestamp_from_date

logger = logging.getLogger(__name__)

DEMO_MONTHS = 6

# (name, type, opening balance, exclude_from_budgets, color)
DEMO_ACCOUNTS = [
    ('Main Checking', 'CHEAC', '2500.00', False, 'blue'),
    ('Savings', 'SAVAC', '10000.00', False, 'green'),
    ('Credit Card', 'CREAC', '0.00', False, 'red'),
    ('Brokerage', 'INVAC', '5000.00', True, 'purple'),
]

# (name, type, description, color)
DEMO_CATEGORIES = [
    ('Salary', CATEGORY_TYPE_CREDIT, 'Monthly salary', 'green'),
    ('Groceries', CATEGORY_TYPE_DEBIT, 'Supermarket shopping', 'orange'),
    ('Restaurants', CATEGORY_TYPE_DEBIT, 'Eating out', 'red'),
    ('Utilities', CATEGORY_TYPE_DEBIT, 'Electricity, water and internet', 'yellow'),
    ('Transportation', CATEGORY_TYPE_DEBIT, 'Fuel and public transport', 'blue'),
    ('Entertainment', CATEGORY_TYPE_DEBIT, 'Movies and events', 'pink'),
    ('Savings', CATEGORY_TYPE_MIXED, 'Money set aside', 'teal'),
]

DEMO_ENTITIES = ['Acme Corp', 'FreshMart', 'City Power', 'FuelStop', 'Starlight Cinema', 'Bistro 21']

DEMO_TAGS = [
    ('family', 'Family expenses'),
    ('work', 'Work related'),
    ('vacation', 'Trips and holidays'),
]

# (category, entity, account, type, min amount, max amount, occurrences per month, tag)
DEMO_TEMPLATES = [
    ('Salary', 'Acme Corp', 'Main Checking', TRX_TYPE_INCOME, 2800, 2800, 1, 'work'),
    ('Groceries', 'FreshMart', 'Main Checking', TRX_TYPE_EXPENSE, 35, 140, 4, 'family'),
    ('Restaurants', 'Bistro 21', 'Credit Card', TRX_TYPE_EXPENSE, 20, 90, 2, None),
    ('Utilities', 'City Power', 'Main Checking', TRX_TYPE_EXPENSE, 60, 120, 1, 'family'),
    ('Transportation', 'FuelStop', 'Credit Card', TRX_TYPE_EXPENSE, 30, 70, 2, None),
    ('Entertainment', 'Starlight Cinema', 'Credit Card', TRX_TYPE_EXPENSE, 15, 45, 1, 'vacation'),
]

# (category, from account, to account, amount)
DEMO_TRANSFERS = [
    ('Savings', 'Main Checking', 'Savings', 300),
    ('Savings', 'Main Checking', 'Brokerage', 200),
]

# category -> (planned credit, planned debit)
DEMO_BUDGET_PLAN = {
    'Salary': (2800, 0),
    'Groceries': (0, 400),
    'Restaurants': (0, 120),
    'Utilities': (0, 100),
    'Transportation': (0, 100),
    'Entertainment': (0, 50),
    'Savings': (300, 300),
}


class DemoDataService:
    """Service for generating demo data."""

    @staticmethod
    def clear_user_data(user_id):
        """
        Delete all accounts, categories, entities, tags, transactions and
        budgets of a user. Does not commit.
        """
        user_accounts = db.session.query(Account.account_id).filter(Account.users_user_id == user_id)
        user_categories = db.session.query(Category.category_id).filter(Category.users_user_id == user_id)

        transaction_ids = [
            row.transaction_id for row in db.session.query(Transaction.transaction_id).filter(or_(
                Transaction.accounts_account_from_id.in_(user_accounts),
                Transaction.accounts_account_to_id.in_(user_accounts),
                Transaction.categories_category_id.in_(user_categories)
            )).all()
        ]
        if transaction_ids:
            TransactionHasTags.query.filter(
                TransactionHasTags.transactions_transaction_id.in_(transaction_ids)
            ).delete(synchronize_session=False)
            Transaction.query.filter(
                Transaction.transaction_id.in_(transaction_ids)
            ).delete(synchronize_session=False)

        BudgetHasCategories.query.filter_by(budgets_users_user_id=user_id).delete(synchronize_session=False)
        Budget.query.filter_by(users_user_id=user_id).delete(synchronize_session=False)
        Category.query.filter_by(users_user_id=user_id).delete(synchronize_session=False)
        Entity.query.filter_by(users_user_id=user_id).delete(synchronize_session=False)
        Tag.query.filter_by(users_user_id=user_id).delete(synchronize_session=False)
        Account.query.filter_by(users_user_id=user_id).delete(synchronize_session=False)

    @staticmethod
    def _demo_months(today):
        """The (year, month) pairs covered by the demo, oldest first."""
        months = []
        for offset in range(DEMO_MONTHS - 1, -1, -1):
            index = today.year * 12 + (today.month - 1) - offset
            year, month = divmod(index, 12)
            months.append((year, month + 1))
        return months

    @staticmethod
    def create_mock_data(user_id, today=None):
        """
        Replace a user's data with the demo data set.

        Args:
            user_id (int): The user ID
            today (date, optional): Reference date, defaults to today (UTC)

        Returns:
            dict: Counts of created records
        """
        user = User.query.get(user_id)
        if not user:
            raise APIError.not_found('User not found')

        if today is None:
            today = datetime.now(timezone.utc).date()
        rng = random.Random(user_id)
        now = get_current_unix_timestamp()

        DemoDataService.clear_user_data(user_id)
        # Bulk deletes bypass the identity map; SQLite may hand out the same ids again
        db.session.expunge_all()
        user = User.query.get(user_id)

        accounts = {}
        for name, account_type, balance, excluded, color in DEMO_ACCOUNTS:
            account = Account(
                users_user_id=user_id,
                name=name,
                type=account_type,
                exclude_from_budgets=excluded,
                current_balance=convert_float_to_big_integer(balance),
                color_gradient=color,
                created_timestamp=now,
                updated_timestamp=now
            )
            db.session.add(account)
            accounts[name] = account

        categories = {}
        for name, category_type, description, color in DEMO_CATEGORIES:
            category = Category(
                users_user_id=user_id,
                name=name,
                type=category_type,
                description=description,
                color_gradient=color
            )
            db.session.add(category)
            categories[name] = category

        entities = {}
        for name in DEMO_ENTITIES:
            entity = Entity(users_user_id=user_id, name=name)
            db.session.add(entity)
            entities[name] = entity

        tags = {}
        for name, description in DEMO_TAGS:
            tag = Tag(users_user_id=user_id, name=name, description=description)
            db.session.add(tag)
            tags[name] = tag

        db.session.flush()

        transaction_count = 0
        for year, month in DemoDataService._demo_months(today):
            last_day = today.day if (year, month) == (today.year, today.month) else 28

            for category_name, entity_name, account_name, trx_type, low, high, times, tag in DEMO_TEMPLATES:
                for _ in range(times):
                    day = 1 if trx_type == TRX_TYPE_INCOME else rng.randint(1, last_day)
                    amount = convert_float_to_big_integer(f'{rng.uniform(low, high):.2f}')
                    account = accounts[account_name]
                    transaction = Transaction(
                        date_timestamp=get_unix_timestamp_from_date(date(year, month, day)),
                        amount=amount,
                        type=trx_type,
                        description=f'{category_name} - {entity_name}',
                        entities_entity_id=entities[entity_name].entity_id,
                        categories_category_id=categories[category_name].category_id,
                        is_essential=category_name in ('Groceries', 'Utilities')
                    )
                    if trx_type == TRX_TYPE_INCOME:
                        transaction.accounts_account_to_id = account.account_id
                        account.current_balance += amount
                    else:
                        transaction.accounts_account_from_id = account.account_id
                        account.current_balance -= amount
                    if tag:
                        transaction.tags = [tags[tag]]
                    db.session.add(transaction)
                    transaction_count += 1

            for category_name, from_name, to_name, value in DEMO_TRANSFERS:
                amount = convert_float_to_big_integer(value)
                account_from = accounts[from_name]
                account_to = accounts[to_name]
                db.session.add(Transaction(
                    date_timestamp=get_unix_timestamp_from_date(date(year, month, min(2, last_day))),
                    amount=amount,
                    type=TRX_TYPE_TRANSFER,
                    description=f'Transfer to {to_name}',
                    accounts_account_from_id=account_from.account_id,
                    accounts_account_to_id=account_to.account_id,
                    categories_category_id=categories[category_name].category_id
                ))
                account_from.current_balance -= amount
                account_to.current_balance += amount
                transaction_count += 1

        budget = Budget(
            users_user_id=user_id,
            month=today.month,
            year=today.year,
            observations='Demo budget',
            is_open=True,
            initial_balance=accounts['Main Checking'].current_balance
        )
        db.session.add(budget)
        db.session.flush()

        for category_name, (credit, debit) in DEMO_BUDGET_PLAN.items():
            db.session.add(BudgetHasCategories(
                budgets_budget_id=budget.budget_id,
                budgets_users_user_id=user_id,
                categories_category_id=categories[category_name].category_id,
                planned_amount_credit=convert_float_to_big_integer(credit),
                planned_amount_debit=convert_float_to_big_integer(debit),
                current_amount=0
            ))

        user.last_update_timestamp = now
        db.session.commit()

        logger.info(f"Demo data created for user {user_id}: {transaction_count} transactions")

        return {
            'accounts': len(accounts),
            'categories': len(categories),
            'entities': len(entities),
            'tags': len(tags),
            'transactions': transaction_count,
            'budgets': 1,
        }
