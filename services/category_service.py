"""
Category service.

Handles category CRUD and the per-category amount aggregations used by
budgets: sums over a period and monthly averages.

All amounts are in cents. A transaction counts as category credit when it
is an income, or a transfer into an account that is not excluded from
budgets. It counts as debit when it is an expense, or a transfer out of an
account that is not excluded from budgets.
"""
import logging

from sqlalchemy import and_, case, func, or_

from extensions import db
from models import (
    Account, BudgetHasCategories, Category, Transaction,
    CATEGORY_TYPES, CATEGORY_TYPE_MIXED, STATUSES, STATUS_ACTIVE,
    TRX_TYPE_EXPENSE, TRX_TYPE_INCOME, TRX_TYPE_TRANSFER
)
from api_errors import APIError
from services.common import get_all_for_user, get_owned_or_404, require_name
from utils import (
    get_first_day_of_month_n_months_ago, get_month_bounds, get_year_bounds,
    parse_bool, truncate_cents_to_float
)

logger = logging.getLogger(__name__)


def _excluded_accounts_query():
    return db.session.query(Account.account_id).filter(Account.exclude_from_budgets.is_(True))


def _credit_debit_sums(include_transfers=True):
    """Build the SUM(CASE ...) columns for category credit and debit."""
    if include_transfers:
        excluded = _excluded_accounts_query()
        credit_condition = or_(
            Transaction.type == TRX_TYPE_INCOME,
            and_(
                Transaction.type == TRX_TYPE_TRANSFER,
                Transaction.accounts_account_to_id.isnot(None),
                ~Transaction.accounts_account_to_id.in_(excluded)
            )
        )
        debit_condition = or_(
            Transaction.type == TRX_TYPE_EXPENSE,
            and_(
                Transaction.type == TRX_TYPE_TRANSFER,
                Transaction.accounts_account_from_id.isnot(None),
                ~Transaction.accounts_account_from_id.in_(excluded)
            )
        )
    else:
        credit_condition = Transaction.type == TRX_TYPE_INCOME
        debit_condition = Transaction.type == TRX_TYPE_EXPENSE

    return (
        func.coalesce(
            func.sum(case((credit_condition, Transaction.amount), else_=0)), 0
        ).label('category_balance_credit'),
        func.coalesce(
            func.sum(case((debit_condition, Transaction.amount), else_=0)), 0
        ).label('category_balance_debit'),
    )


def _transaction_month():
    # SQLite: 'YYYY-MM' of the UTC date
    return func.strftime('%Y-%m', Transaction.date_timestamp, 'unixepoch')


class CategoryService:
    """Service for category operations and aggregations."""

    # ========================================================================
    # CRUD
    # ========================================================================

    @staticmethod
    def get_all_categories_for_user(user_id, select_attributes=None):
        """
        Fetch all categories associated with a user.

        Args:
            user_id (int): The user ID
            select_attributes (list, optional): Category columns to return.
                None returns Category instances.

        Returns:
            list: Category instances, or dicts with the selected attributes
        """
        return get_all_for_user(Category, user_id, select_attributes, order_by=Category.name)

    @staticmethod
    def get_category(user_id, category_id):
        return get_owned_or_404(Category, Category.category_id, category_id, user_id, 'Category')

    @staticmethod
    def _check_duplicate_name(user_id, name, exclude_category_id=None):
        query = Category.query.filter(
            Category.users_user_id == user_id,
            Category.name == name
        )
        if exclude_category_id is not None:
            query = query.filter(Category.category_id != exclude_category_id)
        if query.first():
            raise APIError.conflict('A category with this name already exists')

    @staticmethod
    def _validate_choice(value, choices, label):
        if value not in choices:
            raise APIError.bad_request(f'Invalid {label}. Must be one of: {", ".join(choices)}')

    @staticmethod
    def create_category(user_id, category):
        """
        Create a new category.

        Args:
            user_id (int): Owner's user ID
            category (dict): name, and optionally type, description,
                color_gradient, status, exclude_from_budgets

        Returns:
            Category: The created category
        """
        name = require_name(category, 'Category')
        category_type = category.get('type') or CATEGORY_TYPE_MIXED
        status = category.get('status') or STATUS_ACTIVE
        CategoryService._validate_choice(category_type, CATEGORY_TYPES, 'category type')
        CategoryService._validate_choice(status, STATUSES, 'status')
        CategoryService._check_duplicate_name(user_id, name)

        new_category = Category(
            users_user_id=user_id,
            name=name,
            type=category_type,
            description=category.get('description'),
            color_gradient=category.get('color_gradient'),
            status=status,
            exclude_from_budgets=parse_bool(category.get('exclude_from_budgets'))
        )
        db.session.add(new_category)
        db.session.commit()
        return new_category

    @staticmethod
    def update_category(user_id, category_id, category):
        """
        Update a category. Only the fields present are changed.

        Raises:
            APIError: 404 if not owned, 409 on duplicate name
        """
        existing = CategoryService.get_category(user_id, category_id)

        if 'name' in category:
            name = require_name(category, 'Category')
            CategoryService._check_duplicate_name(user_id, name, exclude_category_id=category_id)
            existing.name = name

        if 'type' in category:
            CategoryService._validate_choice(category['type'], CATEGORY_TYPES, 'category type')
            existing.type = category['type']

        if 'status' in category:
            CategoryService._validate_choice(category['status'], STATUSES, 'status')
            existing.status = category['status']

        if 'description' in category:
            existing.description = category['description']

        if 'color_gradient' in category:
            existing.color_gradient = category['color_gradient']

        if 'exclude_from_budgets' in category:
            existing.exclude_from_budgets = parse_bool(category['exclude_from_budgets'])

        db.session.commit()
        return existing

    @staticmethod
    def delete_category(user_id, category_id):
        """
        Delete a category together with its budget links.

        Transactions of the category are kept without a category. Everything
        happens in a single database transaction.
        """
        category = CategoryService.get_category(user_id, category_id)

        BudgetHasCategories.query.filter_by(
            categories_category_id=category_id,
            budgets_users_user_id=user_id
        ).delete()
        Transaction.query.filter_by(categories_category_id=category_id).update(
            {'categories_category_id': None}
        )
        db.session.delete(category)
        db.session.commit()

        logger.info(f"Category {category_id} deleted for user {user_id}")

    @staticmethod
    def get_count_of_user_categories(user_id):
        return Category.query.filter_by(users_user_id=user_id).count()

    # ========================================================================
    # Aggregations
    # ========================================================================

    @staticmethod
    def get_amount_for_category_in_period(category_id, from_date, to_date, include_transfers=True):
        """
        Sum credit and debit of a category's transactions in a period.

        Args:
            category_id (int): The category ID
            from_date (int): Inclusive lower bound (unix timestamp)
            to_date (int): Exclusive upper bound (unix timestamp)
            include_transfers (bool): Count transfers from/to accounts that
                are not excluded from budgets

        Returns:
            dict: {'category_balance_credit': int, 'category_balance_debit': int}
        """
        row = db.session.query(
            *_credit_debit_sums(include_transfers)
        ).filter(
            Transaction.categories_category_id == category_id,
            Transaction.date_timestamp >= from_date,
            Transaction.date_timestamp < to_date
        ).one()

        return {
            'category_balance_credit': int(row.category_balance_credit),
            'category_balance_debit': int(row.category_balance_debit),
        }

    @staticmethod
    def get_amount_for_category_in_month(category_id, month, year, include_transfers=True):
        """Sum credit and debit of a category in a calendar month."""
        try:
            min_date, max_date = get_month_bounds(month, year)
        except ValueError as e:
            raise APIError.bad_request(str(e))
        return CategoryService.get_amount_for_category_in_period(
            category_id, min_date, max_date, include_transfers
        )

    @staticmethod
    def get_amount_for_category_in_year(category_id, year, include_transfers=True):
        """Sum credit and debit of a category in a calendar year."""
        try:
            min_date, max_date = get_year_bounds(year)
        except ValueError as e:
            raise APIError.bad_request(str(e))
        return CategoryService.get_amount_for_category_in_period(
            category_id, min_date, max_date, include_transfers
        )

    @staticmethod
    def _get_monthly_average(category_id, since=None):
        """
        Average the per-month credit and debit of a category.

        Only months that have at least one transaction are averaged, so the
        average is the total over the number of distinct transaction months.
        """
        query = db.session.query(
            *_credit_debit_sums(),
            func.count(func.distinct(_transaction_month())).label('months')
        ).filter(Transaction.categories_category_id == category_id)
        if since is not None:
            query = query.filter(Transaction.date_timestamp > since)

        row = query.one()
        if not row.months:
            return {'category_balance_credit': 0.0, 'category_balance_debit': 0.0}

        return {
            'category_balance_credit': int(row.category_balance_credit) / row.months,
            'category_balance_debit': int(row.category_balance_debit) / row.months,
        }

    @staticmethod
    def get_average_amount_for_category_in_last_12_months(category_id):
        """
        Average monthly credit and debit of a category over the last 12 months.

        Counts transactions dated after the first day of the month twelve
        months ago.
        """
        since = get_first_day_of_month_n_months_ago(12)
        return CategoryService._get_monthly_average(category_id, since=since)

    @staticmethod
    def get_average_amount_for_category_in_lifetime(category_id):
        """Average monthly credit and debit of a category over all time."""
        return CategoryService._get_monthly_average(category_id)

    @staticmethod
    def get_all_categories_for_budget(user_id, budget_id):
        """
        Get all active categories of a user with their amounts in a budget.

        Categories without a link to the budget get zero amounts.

        Returns:
            list: dicts with the category columns plus budgets_budget_id,
                  planned_amount_credit, planned_amount_debit and
                  current_amount (currency units, truncated to 2 decimals)
        """
        rows = db.session.query(Category, BudgetHasCategories).outerjoin(
            BudgetHasCategories,
            and_(
                BudgetHasCategories.categories_category_id == Category.category_id,
                BudgetHasCategories.budgets_budget_id == budget_id,
                BudgetHasCategories.budgets_users_user_id == user_id
            )
        ).filter(
            Category.users_user_id == user_id,
            Category.status == STATUS_ACTIVE
        ).order_by(Category.name).all()

        result = []
        for category, link in rows:
            result.append({
                'users_user_id': category.users_user_id,
                'category_id': category.category_id,
                'name': category.name,
                'status': category.status,
                'type': category.type,
                'description': category.description,
                'color_gradient': category.color_gradient,
                'budgets_budget_id': link.budgets_budget_id if link else None,
                'exclude_from_budgets': category.exclude_from_budgets,
                'planned_amount_credit': truncate_cents_to_float(link.planned_amount_credit if link else 0),
                'planned_amount_debit': truncate_cents_to_float(link.planned_amount_debit if link else 0),
                'current_amount': truncate_cents_to_float(link.current_amount if link else 0),
            })
        return result
