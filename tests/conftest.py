"""
Shared pytest fixtures for the personal finance API tests.
"""
import pytest
import os
import sys

# Select the testing config (in-memory SQLite, no rate limits) before app import
os.environ['TESTING'] = '1'

# Add project root and tests directory to path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
tests_dir = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, project_root)
sys.path.insert(0, tests_dir)

# Centralized test user credentials
TEST_USERS = {
    'alice': {
        'username': 'test_alice',
        'email': 'test_alice@example.com',
        'password': 'TestPass123!',
    },
    'bob': {
        'username': 'test_bob',
        'email': 'test_bob@example.com',
        'password': 'TestPass123!',
    },
}


# ============================================================================
# Flask App Fixtures
# ============================================================================

@pytest.fixture(scope='session')
def app():
    """Create Flask app for testing."""
    from app import app as flask_app
    flask_app.config['TESTING'] = True
    return flask_app


@pytest.fixture(scope='session')
def db(app):
    """Get database instance."""
    from extensions import db as _db
    with app.app_context():
        _db.create_all()
    return _db


@pytest.fixture
def app_context(app):
    """Provide app context for database operations."""
    with app.app_context():
        yield


@pytest.fixture
def api_client(app):
    """Create test client for API tests."""
    return app.test_client()


@pytest.fixture
def clean_test_data(app, db):
    """Empty every table before and after each test."""
    def _cleanup():
        with app.app_context():
            for table in reversed(db.metadata.sorted_tables):
                db.session.execute(table.delete())
            db.session.commit()

    # Clean before test
    _cleanup()

    yield

    # Clean after test
    _cleanup()


# ============================================================================
# User Helper Fixtures
# ============================================================================

@pytest.fixture
def create_user(app, db, clean_test_data):
    """Factory fixture to create a test user directly in the database."""
    def _create(user_key: str):
        from models import User

        user_data = TEST_USERS[user_key]
        with app.app_context():
            user = User(username=user_data['username'], email=user_data['email'])
            user.set_password(user_data['password'])
            db.session.add(user)
            db.session.commit()

            return {
                'id': user.user_id,
                'username': user.username,
                'email': user.email,
                'password': user_data['password'],
            }

    return _create


@pytest.fixture
def alice(create_user):
    return create_user('alice')


@pytest.fixture
def bob(create_user):
    return create_user('bob')


@pytest.fixture
def session_headers(app):
    """Factory fixture returning API headers with a fresh session key."""
    def _headers(user: dict, mobile: bool = False):
        from services.session_service import SessionService

        with app.app_context():
            session = SessionService.generate_new_session_key_for_user(user['username'], mobile)

        headers = {
            'authusername': user['username'],
            'sessionkey': session['sessionkey'],
        }
        if mobile:
            headers['mobile'] = 'true'
        return headers

    return _headers


@pytest.fixture
def alice_headers(alice, session_headers):
    return session_headers(alice)


@pytest.fixture
def bob_headers(bob, session_headers):
    return session_headers(bob)


# ============================================================================
# Finance Data Helpers
# ============================================================================

@pytest.fixture
def make_account(app, db):
    """Factory fixture to create an account for a user."""
    def _make(user_id, name, account_type='CHEAC', balance=0, exclude_from_budgets=False):
        from models import Account

        with app.app_context():
            account = Account(
                users_user_id=user_id,
                name=name,
                type=account_type,
                current_balance=balance,
                exclude_from_budgets=exclude_from_budgets,
                created_timestamp=0,
                updated_timestamp=0
            )
            db.session.add(account)
            db.session.commit()
            return account.account_id

    return _make


@pytest.fixture
def make_category(app, db):
    """Factory fixture to create a category for a user."""
    def _make(user_id, name, category_type='M', status='Active'):
        from models import Category

        with app.app_context():
            category = Category(users_user_id=user_id, name=name, type=category_type, status=status)
            db.session.add(category)
            db.session.commit()
            return category.category_id

    return _make


@pytest.fixture
def make_transaction(app, db):
    """Factory fixture to insert a transaction row (amount in cents).

    Balances are not touched; use TransactionService for that.
    """
    def _make(amount, trx_type, date_timestamp, category_id=None,
              account_from_id=None, account_to_id=None, entity_id=None):
        from models import Transaction

        with app.app_context():
            transaction = Transaction(
                date_timestamp=date_timestamp,
                amount=amount,
                type=trx_type,
                categories_category_id=category_id,
                accounts_account_from_id=account_from_id,
                accounts_account_to_id=account_to_id,
                entities_entity_id=entity_id
            )
            db.session.add(transaction)
            db.session.commit()
            return transaction.transaction_id

    return _make
