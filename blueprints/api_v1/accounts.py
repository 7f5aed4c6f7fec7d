"""
Account API routes.

Endpoints:
- GET /api/v1/accounts - List accounts
- POST /api/v1/accounts - Create account
- PUT /api/v1/accounts/<id> - Update account
- DELETE /api/v1/accounts/<id> - Delete account (only without transactions)
"""
from flask import request, jsonify, g

from api_decorators import session_required
from services.account_service import AccountService
from utils import convert_big_integer_to_float
from blueprints.api_v1 import api_v1_bp


def _account_to_dict(account):
    """Account dict with the balance in currency units."""
    return {
        **account.to_dict(),
        'balance': convert_big_integer_to_float(account.current_balance),
    }


@api_v1_bp.route('/accounts', methods=['GET'])
@session_required
def api_get_accounts():
    """Get all accounts of the current user.

    Returns:
        {"accounts": [...]}
    """
    accounts = AccountService.get_accounts_for_user(g.current_user_id)
    return jsonify({'accounts': [_account_to_dict(a) for a in accounts]})


@api_v1_bp.route('/accounts', methods=['POST'])
@session_required
def api_create_account():
    """Create a new account.

    Request body:
        {
            "name": "Main Checking",
            "type": "CHEAC",
            "description": "...",          // optional
            "exclude_from_budgets": false, // optional
            "status": "Active",            // optional
            "current_balance": 100.00,     // optional
            "color_gradient": "blue"       // optional
        }

    Returns:
        {"account": {...}}
    """
    data = request.get_json(silent=True)

    if not data:
        return jsonify({'error': 'Request body required'}), 400

    account = AccountService.create_account(g.current_user_id, data)
    return jsonify({'account': _account_to_dict(account)}), 201


@api_v1_bp.route('/accounts/<int:account_id>', methods=['PUT'])
@session_required
def api_update_account(account_id):
    """Update an account. All fields optional.

    Returns:
        {"account": {...}}
    """
    data = request.get_json(silent=True) or {}
    account = AccountService.update_account(g.current_user_id, account_id, data)
    return jsonify({'account': _account_to_dict(account)})


@api_v1_bp.route('/accounts/<int:account_id>', methods=['DELETE'])
@session_required
def api_delete_account(account_id):
    """Delete an account.

    Returns:
        {"success": true}
    """
    AccountService.delete_account(g.current_user_id, account_id)
    return jsonify({'success': True})
