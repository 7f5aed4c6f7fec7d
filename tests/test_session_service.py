"""
Tests for session key issuing, checking and renewal.
"""
import pytest
from unittest.mock import patch


pytestmark = pytest.mark.unit


class TestGenerateSessionKey:

    def test_generates_web_key(self, app, alice):
        from models import User
        from services.session_service import SessionService

        with app.app_context():
            session = SessionService.generate_new_session_key_for_user(alice['username'])
            user = User.query.get(alice['id'])

            assert session['sessionkey'] == user.sessionkey
            assert session['trustlimit'] == user.trustlimit
            assert user.sessionkey_mobile is None

    def test_generates_mobile_key_separately(self, app, alice):
        from models import User
        from services.session_service import SessionService

        with app.app_context():
            web = SessionService.generate_new_session_key_for_user(alice['username'], mobile=False)
            mobile = SessionService.generate_new_session_key_for_user(alice['username'], mobile=True)
            user = User.query.get(alice['id'])

            assert web['sessionkey'] != mobile['sessionkey']
            assert user.sessionkey == web['sessionkey']
            assert user.sessionkey_mobile == mobile['sessionkey']
            # Mobile sessions are trusted for longer
            assert mobile['trustlimit'] > web['trustlimit']

    def test_new_key_replaces_previous(self, app, alice):
        from services.session_service import SessionService

        with app.app_context():
            first = SessionService.generate_new_session_key_for_user(alice['username'])
            second = SessionService.generate_new_session_key_for_user(alice['username'])

            assert first['sessionkey'] != second['sessionkey']
            assert not SessionService.check_session_key(alice['username'], first['sessionkey'])
            assert SessionService.check_session_key(alice['username'], second['sessionkey'])

    def test_unknown_user_returns_none(self, app, clean_test_data):
        from services.session_service import SessionService

        with app.app_context():
            assert SessionService.generate_new_session_key_for_user('nobody') is None


class TestCheckSessionKey:

    def test_wrong_key_rejected(self, app, alice):
        from services.session_service import SessionService

        with app.app_context():
            SessionService.generate_new_session_key_for_user(alice['username'])
            assert not SessionService.check_session_key(alice['username'], 'not-the-key')

    def test_web_key_not_valid_for_mobile(self, app, alice):
        from services.session_service import SessionService

        with app.app_context():
            session = SessionService.generate_new_session_key_for_user(alice['username'])
            assert not SessionService.check_session_key(alice['username'], session['sessionkey'], mobile=True)

    def test_expired_key_rejected(self, app, alice):
        from services.session_service import SessionService

        with app.app_context():
            session = SessionService.generate_new_session_key_for_user(alice['username'])

            with patch('services.session_service.get_current_unix_timestamp',
                       return_value=session['trustlimit'] + 1):
                assert not SessionService.check_session_key(alice['username'], session['sessionkey'])

    def test_valid_check_renews_trust_limit(self, app, alice):
        from models import User
        from services.session_service import SessionService

        with app.app_context():
            session = SessionService.generate_new_session_key_for_user(alice['username'])
            later = session['trustlimit'] - 10

            with patch('services.session_service.get_current_unix_timestamp', return_value=later):
                assert SessionService.check_session_key(alice['username'], session['sessionkey'])

            user = User.query.get(alice['id'])
            assert user.trustlimit == later + app.config['SESSION_TRUST_LIMIT_WEB']

    def test_check_without_renew_keeps_trust_limit(self, app, alice):
        from models import User
        from services.session_service import SessionService

        with app.app_context():
            session = SessionService.generate_new_session_key_for_user(alice['username'])

            with patch('services.session_service.get_current_unix_timestamp',
                       return_value=session['trustlimit'] - 10):
                assert SessionService.check_session_key(
                    alice['username'], session['sessionkey'], renew=False
                )

            user = User.query.get(alice['id'])
            assert user.trustlimit == session['trustlimit']

    def test_missing_values_rejected(self, app, alice):
        from services.session_service import SessionService

        with app.app_context():
            assert not SessionService.check_session_key('', 'key')
            assert not SessionService.check_session_key(alice['username'], '')
            # No key issued yet
            assert not SessionService.check_session_key(alice['username'], 'anything')


class TestInvalidateSessionKey:

    def test_invalidate_web_keeps_mobile(self, app, alice):
        from services.session_service import SessionService

        with app.app_context():
            web = SessionService.generate_new_session_key_for_user(alice['username'])
            mobile = SessionService.generate_new_session_key_for_user(alice['username'], mobile=True)

            assert SessionService.invalidate_session_key(alice['username'])

            assert not SessionService.check_session_key(alice['username'], web['sessionkey'])
            assert SessionService.check_session_key(alice['username'], mobile['sessionkey'], mobile=True)

    def test_invalidate_unknown_user(self, app, clean_test_data):
        from services.session_service import SessionService

        with app.app_context():
            assert not SessionService.invalidate_session_key('nobody')
