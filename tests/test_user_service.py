"""
Tests for user signup, login, password changes and per-user lookups.
"""
import pytest
from datetime import date


pytestmark = pytest.mark.unit


class TestCreateUser:

    def test_create_user_hashes_password(self, app, clean_test_data):
        from services.user_service import UserService

        with app.app_context():
            user = UserService.create_user({
                'username': 'carol',
                'email': 'Carol@Example.com',
                'password': 'Secure123'
            })

            assert user.user_id is not None
            assert user.email == 'carol@example.com'
            assert user.password != 'Secure123'
            assert user.check_password('Secure123')

    def test_duplicate_username_conflicts(self, app, alice):
        from api_errors import APIError
        from services.user_service import UserService

        with app.app_context():
            with pytest.raises(APIError) as exc_info:
                UserService.create_user({
                    'username': alice['username'],
                    'email': 'other@example.com',
                    'password': 'Secure123'
                })
            assert exc_info.value.status_code == 409

    def test_duplicate_email_conflicts(self, app, alice):
        from api_errors import APIError
        from services.user_service import UserService

        with app.app_context():
            with pytest.raises(APIError) as exc_info:
                UserService.create_user({
                    'username': 'someone_else',
                    'email': alice['email'],
                    'password': 'Secure123'
                })
            assert exc_info.value.status_code == 409

    @pytest.mark.parametrize('payload', [
        {'username': '', 'email': 'a@example.com', 'password': 'Secure123'},
        {'username': 'dave', 'email': 'not-an-email', 'password': 'Secure123'},
        {'username': 'dave', 'email': 'dave@example.com', 'password': 'weak'},
        {'username': 'x' * 46, 'email': 'dave@example.com', 'password': 'Secure123'},
    ])
    def test_invalid_payload_rejected(self, app, clean_test_data, payload):
        from api_errors import APIError
        from services.user_service import UserService

        with app.app_context():
            with pytest.raises(APIError) as exc_info:
                UserService.create_user(payload)
            assert exc_info.value.status_code == 400


class TestAttemptLogin:

    def test_login_returns_session_and_accounts(self, app, alice, make_account):
        from services.user_service import UserService

        make_account(alice['id'], 'Wallet', account_type='WALLET', balance=1050)

        with app.app_context():
            result = UserService.attempt_login(alice['username'], alice['password'])

            assert result['user_id'] == alice['id']
            assert result['username'] == alice['username']
            assert result['sessionkey']
            assert result['sessionkey_mobile'] is None
            assert len(result['accounts']) == 1
            assert result['accounts'][0]['name'] == 'Wallet'
            assert result['accounts'][0]['balance'] == 10.5

    def test_mobile_login_sets_mobile_key(self, app, alice):
        from services.user_service import UserService

        with app.app_context():
            result = UserService.attempt_login(alice['username'], alice['password'], mobile=True)
            assert result['sessionkey_mobile']
            assert result['sessionkey'] is None

    def test_unknown_user(self, app, clean_test_data):
        from api_errors import APIError
        from services.user_service import UserService

        with app.app_context():
            with pytest.raises(APIError) as exc_info:
                UserService.attempt_login('nobody', 'Secure123')
            assert exc_info.value.status_code == 401
            assert exc_info.value.message == 'User Not Found'

    def test_wrong_password(self, app, alice):
        from api_errors import APIError
        from services.user_service import UserService

        with app.app_context():
            with pytest.raises(APIError) as exc_info:
                UserService.attempt_login(alice['username'], 'WrongPass123')
            assert exc_info.value.status_code == 401
            assert exc_info.value.message == 'Wrong Credentials'


class TestChangePassword:

    def test_change_password_issues_new_key(self, app, alice):
        from models import User
        from services.session_service import SessionService
        from services.user_service import UserService

        with app.app_context():
            old = SessionService.generate_new_session_key_for_user(alice['username'])
            new = UserService.change_user_password(alice['id'], alice['password'], 'NewSecure456')

            assert new['sessionkey'] != old['sessionkey']
            assert not SessionService.check_session_key(alice['username'], old['sessionkey'])
            assert User.query.get(alice['id']).check_password('NewSecure456')

    def test_wrong_current_password(self, app, alice):
        from api_errors import APIError
        from services.user_service import UserService

        with app.app_context():
            with pytest.raises(APIError) as exc_info:
                UserService.change_user_password(alice['id'], 'WrongPass123', 'NewSecure456')
            assert exc_info.value.status_code == 401

    def test_weak_new_password(self, app, alice):
        from api_errors import APIError
        from services.user_service import UserService

        with app.app_context():
            with pytest.raises(APIError) as exc_info:
                UserService.change_user_password(alice['id'], alice['password'], 'weak')
            assert exc_info.value.status_code == 400


class TestUserLookups:

    def test_get_user_id_from_username(self, app, alice):
        from api_errors import APIError
        from services.user_service import UserService

        with app.app_context():
            assert UserService.get_user_id_from_username(alice['username']) == alice['id']

            with pytest.raises(APIError) as exc_info:
                UserService.get_user_id_from_username('nobody')
            assert exc_info.value.status_code == 404

    def test_setup_last_update_timestamp(self, app, alice):
        from models import User
        from services.user_service import UserService

        with app.app_context():
            UserService.setup_last_update_timestamp(alice['id'], 1700000000)
            assert User.query.get(alice['id']).last_update_timestamp == 1700000000

    def test_first_transaction_date(self, app, alice, make_account, make_transaction):
        from services.user_service import UserService
        from utils import get_unix_timestamp_from_date

        account_id = make_account(alice['id'], 'Checking')
        march = get_unix_timestamp_from_date(date(2023, 3, 10))
        make_transaction(500, 'E', get_unix_timestamp_from_date(date(2024, 1, 5)), account_from_id=account_id)
        make_transaction(700, 'I', march, account_to_id=account_id)

        with app.app_context():
            first = UserService.get_first_user_transaction_date(alice['id'])
            assert first == {'date_timestamp': march, 'month': 3, 'year': 2023}

    def test_first_transaction_date_ignores_other_users(self, app, alice, bob, make_account, make_transaction):
        from services.user_service import UserService

        bob_account = make_account(bob['id'], 'Bob Checking')
        make_transaction(500, 'E', 1000, account_from_id=bob_account)

        with app.app_context():
            assert UserService.get_first_user_transaction_date(alice['id']) is None

    def test_categories_entities_tags(self, app, alice, bob, make_category):
        from models import Entity, Tag
        from extensions import db
        from services.user_service import UserService

        make_category(alice['id'], 'Groceries', category_type='D')
        make_category(bob['id'], 'Bob Only')
        with app.app_context():
            db.session.add(Entity(users_user_id=alice['id'], name='FreshMart'))
            db.session.add(Tag(users_user_id=alice['id'], name='family', description='Family'))
            db.session.commit()

            result = UserService.get_user_categories_entities_tags(alice['id'])

            assert [c['name'] for c in result['categories']] == ['Groceries']
            assert set(result['categories'][0].keys()) == {'category_id', 'name', 'type'}
            assert [e['name'] for e in result['entities']] == ['FreshMart']
            assert result['tags'][0]['description'] == 'Family'
