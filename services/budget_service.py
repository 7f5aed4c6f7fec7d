"""
Budget service.

Handles monthly budgets, the planned amounts of each category within a
budget, and snapshotting realised amounts when a budget is closed.
"""
import logging

from sqlalchemy import func

from extensions import db
from models import Budget, BudgetHasCategories, Category
from api_errors import APIError
from services.category_service import CategoryService
from services.common import get_owned_or_404
from utils import (
    convert_big_integer_to_float, convert_float_to_big_integer, parse_bool, validate_year
)

logger = logging.getLogger(__name__)


class BudgetService:
    """Service for budget operations."""

    @staticmethod
    def get_budget_model(user_id, budget_id):
        return get_owned_or_404(Budget, Budget.budget_id, budget_id, user_id, 'Budget')

    @staticmethod
    def _parse_amount(value, label):
        try:
            amount = convert_float_to_big_integer(value or 0)
        except ValueError:
            raise APIError.bad_request(f'Invalid {label}')
        if amount < 0:
            raise APIError.bad_request(f'{label} cannot be negative')
        return amount

    @staticmethod
    def get_budgets_for_user(user_id):
        """
        Get all budgets of a user, newest first, with planned totals.

        Returns:
            list: Budget dicts with planned_credit_total and planned_debit_total
                  in currency units
        """
        totals = dict(
            (row.budgets_budget_id, row)
            for row in db.session.query(
                BudgetHasCategories.budgets_budget_id,
                func.coalesce(func.sum(BudgetHasCategories.planned_amount_credit), 0).label('credit'),
                func.coalesce(func.sum(BudgetHasCategories.planned_amount_debit), 0).label('debit'),
            ).filter(
                BudgetHasCategories.budgets_users_user_id == user_id
            ).group_by(BudgetHasCategories.budgets_budget_id).all()
        )

        budgets = Budget.query.filter_by(users_user_id=user_id).order_by(
            Budget.year.desc(), Budget.month.desc()
        ).all()

        result = []
        for budget in budgets:
            total = totals.get(budget.budget_id)
            budget_dict = budget.to_dict()
            budget_dict['planned_credit_total'] = convert_big_integer_to_float(total.credit if total else 0)
            budget_dict['planned_debit_total'] = convert_big_integer_to_float(total.debit if total else 0)
            result.append(budget_dict)
        return result

    @staticmethod
    def create_budget(user_id, data):
        """
        Create a budget for a month.

        Args:
            user_id (int): Owner's user ID
            data (dict):
                - month (int), year (int)
                - observations (str, optional)
                - initial_balance (float, optional)
                - categories (list, optional): [{'category_id',
                  'planned_amount_credit', 'planned_amount_debit'}]

        Returns:
            Budget: The created budget

        Raises:
            APIError: 400 on invalid data, 409 if the month already has a budget
        """
        try:
            month = int(data.get('month'))
            year = int(data.get('year'))
        except (TypeError, ValueError):
            raise APIError.bad_request('Month and year are required')
        if month < 1 or month > 12:
            raise APIError.bad_request('Month must be between 1 and 12')
        try:
            validate_year(year)
        except ValueError as e:
            raise APIError.bad_request(str(e))

        existing = Budget.query.filter_by(users_user_id=user_id, month=month, year=year).first()
        if existing:
            raise APIError.conflict(f'A budget for {year}-{month:02d} already exists')

        initial_balance = None
        if data.get('initial_balance') is not None:
            try:
                initial_balance = convert_float_to_big_integer(data['initial_balance'])
            except ValueError:
                raise APIError.bad_request('Invalid initial balance')

        budget = Budget(
            users_user_id=user_id,
            month=month,
            year=year,
            observations=data.get('observations'),
            is_open=True,
            initial_balance=initial_balance
        )
        db.session.add(budget)
        db.session.flush()  # Get the ID

        for cat_values in data.get('categories') or []:
            BudgetService._set_category_amounts(
                user_id,
                budget,
                cat_values.get('category_id'),
                cat_values.get('planned_amount_credit'),
                cat_values.get('planned_amount_debit')
            )

        db.session.commit()
        logger.info(f"Budget {budget.budget_id} ({year}-{month:02d}) created for user {user_id}")
        return budget

    @staticmethod
    def _set_category_amounts(user_id, budget, category_id, planned_credit, planned_debit):
        category = Category.query.filter_by(category_id=category_id, users_user_id=user_id).first()
        if not category:
            raise APIError.bad_request('Invalid category selected')

        link = BudgetHasCategories.query.filter_by(
            budgets_budget_id=budget.budget_id,
            categories_category_id=category_id
        ).first()
        if not link:
            link = BudgetHasCategories(
                budgets_budget_id=budget.budget_id,
                budgets_users_user_id=user_id,
                categories_category_id=category_id,
                current_amount=0
            )
            db.session.add(link)

        link.planned_amount_credit = BudgetService._parse_amount(planned_credit, 'Planned credit')
        link.planned_amount_debit = BudgetService._parse_amount(planned_debit, 'Planned debit')
        return link

    @staticmethod
    def update_budget_category(user_id, budget_id, category_id, planned_credit, planned_debit):
        """Set the planned credit/debit of a category within a budget."""
        budget = BudgetService.get_budget_model(user_id, budget_id)
        link = BudgetService._set_category_amounts(
            user_id, budget, category_id, planned_credit, planned_debit
        )
        db.session.commit()
        return link

    @staticmethod
    def get_budget(user_id, budget_id):
        """
        Get a budget with all active categories and their amounts.

        Open budgets report live credit/debit sums for the budget's month.
        Closed budgets report the snapshot taken when they were closed.

        Returns:
            dict: Budget fields plus 'categories'
        """
        budget = BudgetService.get_budget_model(user_id, budget_id)
        categories = CategoryService.get_all_categories_for_budget(user_id, budget_id)

        for category in categories:
            if budget.is_open:
                amounts = CategoryService.get_amount_for_category_in_month(
                    category['category_id'], budget.month, budget.year
                )
                category['current_amount_credit'] = convert_big_integer_to_float(
                    amounts['category_balance_credit']
                )
                category['current_amount_debit'] = convert_big_integer_to_float(
                    amounts['category_balance_debit']
                )
            else:
                current = category['current_amount']
                category['current_amount_credit'] = current if current > 0 else 0.0
                category['current_amount_debit'] = -current if current < 0 else 0.0

        budget_dict = budget.to_dict()
        budget_dict['initial_balance'] = (
            convert_big_integer_to_float(budget.initial_balance)
            if budget.initial_balance is not None else None
        )
        budget_dict['categories'] = categories
        return budget_dict

    @staticmethod
    def set_budget_status(user_id, budget_id, is_open):
        """
        Open or close a budget.

        Closing stores each linked category's net balance for the month
        (credit minus debit, in cents) in current_amount.
        """
        budget = BudgetService.get_budget_model(user_id, budget_id)
        is_open = parse_bool(is_open)

        if not is_open and budget.is_open:
            for link in budget.categories:
                amounts = CategoryService.get_amount_for_category_in_month(
                    link.categories_category_id, budget.month, budget.year
                )
                link.current_amount = (
                    amounts['category_balance_credit'] - amounts['category_balance_debit']
                )

        budget.is_open = is_open
        db.session.commit()
        return budget

    @staticmethod
    def delete_budget(user_id, budget_id):
        """Delete a budget and its category links in one unit of work."""
        budget = BudgetService.get_budget_model(user_id, budget_id)

        # Category links go with the budget (delete-orphan cascade)
        db.session.delete(budget)
        db.session.commit()
