"""
Tests for API v1 budget endpoints.

Tests:
- GET /api/v1/budgets - List budgets
- POST /api/v1/budgets - Create budget
- GET /api/v1/budgets/<id> - Budget with categories
- PUT /api/v1/budgets/<id>/status - Close/reopen budget
- PUT /api/v1/budgets/<id>/categories/<category_id> - Planned amounts
- DELETE /api/v1/budgets/<id> - Delete budget
"""
import pytest
from datetime import date


pytestmark = pytest.mark.api


@pytest.fixture
def budget_data(alice, make_account, make_category, make_transaction):
    from utils import get_unix_timestamp_from_date

    checking = make_account(alice['id'], 'Checking')
    groceries = make_category(alice['id'], 'Groceries', category_type='D')
    make_transaction(8025, 'E', get_unix_timestamp_from_date(date(2024, 6, 10)),
                     category_id=groceries, account_from_id=checking)
    return {'checking': checking, 'groceries': groceries}


def create_budget(api_client, headers, groceries):
    return api_client.post('/api/v1/budgets', json={
        'month': 6,
        'year': 2024,
        'categories': [{'category_id': groceries, 'planned_amount_debit': 300}]
    }, headers=headers)


class TestBudgetEndpoints:

    def test_create_budget(self, api_client, alice_headers, budget_data):
        response = create_budget(api_client, alice_headers, budget_data['groceries'])

        assert response.status_code == 201
        budget = response.get_json()['budget']
        assert (budget['month'], budget['year']) == (6, 2024)
        assert budget['is_open'] is True
        groceries = budget['categories'][0]
        assert groceries['planned_amount_debit'] == 300.0
        assert groceries['current_amount_debit'] == 80.25

    def test_duplicate_month(self, api_client, alice_headers, budget_data):
        create_budget(api_client, alice_headers, budget_data['groceries'])
        response = create_budget(api_client, alice_headers, budget_data['groceries'])
        assert response.status_code == 409

    def test_list_budgets(self, api_client, alice_headers, budget_data):
        create_budget(api_client, alice_headers, budget_data['groceries'])

        response = api_client.get('/api/v1/budgets', headers=alice_headers)

        budgets = response.get_json()['budgets']
        assert len(budgets) == 1
        assert budgets[0]['planned_debit_total'] == 300.0

    def test_close_budget(self, api_client, alice_headers, budget_data):
        budget_id = create_budget(api_client, alice_headers, budget_data['groceries']).get_json()['budget']['budget_id']

        response = api_client.put(f'/api/v1/budgets/{budget_id}/status', json={'is_open': False},
                                  headers=alice_headers)

        assert response.status_code == 200
        budget = response.get_json()['budget']
        assert budget['is_open'] is False
        assert budget['categories'][0]['current_amount'] == -80.25
        assert budget['categories'][0]['current_amount_debit'] == 80.25

    def test_year_out_of_range_not_stored(self, api_client, alice_headers, budget_data):
        response = api_client.post('/api/v1/budgets', json={
            'month': 12,
            'year': 9999,
            'categories': [{'category_id': budget_data['groceries'], 'planned_amount_debit': 10}]
        }, headers=alice_headers)

        assert response.status_code == 400
        assert 'Year must be between' in response.get_json()['error']
        assert api_client.get('/api/v1/budgets', headers=alice_headers).get_json()['budgets'] == []

    def test_status_requires_flag(self, api_client, alice_headers, budget_data):
        budget_id = create_budget(api_client, alice_headers, budget_data['groceries']).get_json()['budget']['budget_id']

        response = api_client.put(f'/api/v1/budgets/{budget_id}/status', json={}, headers=alice_headers)
        assert response.status_code == 400

    def test_update_planned_amounts(self, api_client, alice_headers, budget_data):
        budget_id = create_budget(api_client, alice_headers, budget_data['groceries']).get_json()['budget']['budget_id']

        response = api_client.put(
            f"/api/v1/budgets/{budget_id}/categories/{budget_data['groceries']}",
            json={'planned_amount_credit': 0, 'planned_amount_debit': 350.5},
            headers=alice_headers
        )

        assert response.status_code == 200
        assert response.get_json()['budget_category']['planned_amount_debit'] == 350.5

    def test_delete_budget(self, api_client, alice_headers, budget_data):
        budget_id = create_budget(api_client, alice_headers, budget_data['groceries']).get_json()['budget']['budget_id']

        assert api_client.delete(f'/api/v1/budgets/{budget_id}', headers=alice_headers).status_code == 200
        assert api_client.get(f'/api/v1/budgets/{budget_id}', headers=alice_headers).status_code == 404

    def test_other_user_cannot_read_budget(self, api_client, alice_headers, bob_headers, budget_data):
        budget_id = create_budget(api_client, alice_headers, budget_data['groceries']).get_json()['budget']['budget_id']

        response = api_client.get(f'/api/v1/budgets/{budget_id}', headers=bob_headers)
        assert response.status_code == 404
