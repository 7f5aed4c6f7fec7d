"""
Tests for the flask CLI commands.
"""
import pytest


pytestmark = pytest.mark.unit


def test_init_db(app, clean_test_data):
    result = app.test_cli_runner().invoke(args=['init-db'])

    assert result.exit_code == 0
    assert 'Database initialized' in result.output


def test_seed_demo(app, alice):
    from models import Account

    result = app.test_cli_runner().invoke(args=['seed-demo', '--username', alice['username']])

    assert result.exit_code == 0
    assert 'transactions: 78' in result.output
    with app.app_context():
        assert Account.query.filter_by(users_user_id=alice['id']).count() == 4


def test_seed_demo_unknown_user(app, clean_test_data):
    result = app.test_cli_runner().invoke(args=['seed-demo', '--username', 'ghost'])

    assert result.exit_code != 0
    assert 'User not found' in result.output
