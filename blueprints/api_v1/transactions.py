"""
Transaction API routes.

Endpoints:
- GET /api/v1/transactions - List transactions (paginated)
- POST /api/v1/transactions - Create transaction
- GET /api/v1/transactions/<id> - Get single transaction
- DELETE /api/v1/transactions/<id> - Delete transaction
"""
from flask import request, jsonify, g

from api_decorators import session_required
from services.transaction_service import TransactionService
from utils import convert_big_integer_to_float
from blueprints.api_v1 import api_v1_bp

MAX_PAGE_SIZE = 500


def _transaction_to_dict(transaction):
    """Transaction dict with the amount in currency units."""
    return {
        **transaction.to_dict(),
        'amount': convert_big_integer_to_float(transaction.amount),
    }


@api_v1_bp.route('/transactions', methods=['GET'])
@session_required
def api_list_transactions():
    """List the current user's transactions, newest first.

    Query Parameters:
        limit (int): Max number of results (default 100)
        offset (int): Offset for pagination (default 0)

    Returns:
        {
            "transactions": [...],
            "count": 50,
            "total": 150
        }
    """
    limit = request.args.get('limit', 100, type=int)
    offset = request.args.get('offset', 0, type=int)

    if limit < 1 or offset < 0:
        return jsonify({'error': 'Invalid pagination parameters'}), 400
    limit = min(limit, MAX_PAGE_SIZE)

    transactions, total = TransactionService.get_transactions_for_user(
        g.current_user_id, limit=limit, offset=offset
    )

    return jsonify({
        'transactions': [_transaction_to_dict(t) for t in transactions],
        'count': len(transactions),
        'total': total
    })


@api_v1_bp.route('/transactions', methods=['POST'])
@session_required
def api_create_transaction():
    """Create a new transaction.

    Request body:
        {
            "date_timestamp": 1705276800,
            "amount": 85.50,
            "type": "E",               // I, E or T
            "account_from_id": 1,      // required for E and T
            "account_to_id": 2,        // required for I and T
            "category_id": 3,          // optional
            "entity_id": 4,            // optional
            "description": "Weekly groceries",  // optional
            "is_essential": true,      // optional
            "tags": ["food"]           // optional
        }

    Returns:
        {"transaction": {...}}
    """
    data = request.get_json(silent=True)

    if not data:
        return jsonify({'error': 'Request body required'}), 400

    transaction = TransactionService.create_transaction(g.current_user_id, data)
    return jsonify({'transaction': _transaction_to_dict(transaction)}), 201


@api_v1_bp.route('/transactions/<int:transaction_id>', methods=['GET'])
@session_required
def api_get_transaction(transaction_id):
    """Get a single transaction.

    Returns:
        {"transaction": {...}}
    """
    transaction = TransactionService.get_transaction(g.current_user_id, transaction_id)
    return jsonify({'transaction': _transaction_to_dict(transaction)})


@api_v1_bp.route('/transactions/<int:transaction_id>', methods=['DELETE'])
@session_required
def api_delete_transaction(transaction_id):
    """Delete a transaction, reverting its effect on account balances.

    Returns:
        {"success": true}
    """
    TransactionService.delete_transaction(g.current_user_id, transaction_id)
    return jsonify({'success': True})
