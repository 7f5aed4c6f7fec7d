"""
Service layer for the personal finance API.

Services encapsulate business logic separate from route handlers.
"""
from services.session_service import SessionService
from services.account_service import AccountService
from services.category_service import CategoryService
from services.entity_service import EntityService
from services.tag_service import TagService
from services.user_service import UserService
from services.transaction_service import TransactionService
from services.budget_service import BudgetService
from services.demo_data_service import DemoDataService

__all__ = [
    'SessionService',
    'AccountService',
    'CategoryService',
    'EntityService',
    'TagService',
    'UserService',
    'TransactionService',
    'BudgetService',
    'DemoDataService',
]
