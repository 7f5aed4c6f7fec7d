"""
Budget API routes.

Endpoints:
- GET /api/v1/budgets - List budgets with planned totals
- POST /api/v1/budgets - Create budget for a month
- GET /api/v1/budgets/<id> - Budget with per-category planned and current amounts
- DELETE /api/v1/budgets/<id> - Delete budget
- PUT /api/v1/budgets/<id>/status - Open or close budget
- PUT /api/v1/budgets/<id>/categories/<category_id> - Set planned amounts for a category
"""
from flask import request, jsonify, g

from api_decorators import session_required
from services.budget_service import BudgetService
from utils import convert_big_integer_to_float
from blueprints.api_v1 import api_v1_bp


@api_v1_bp.route('/budgets', methods=['GET'])
@session_required
def api_get_budgets():
    """Get all budgets of the current user, newest first.

    Returns:
        {"budgets": [{..., "planned_credit_total": 0.0, "planned_debit_total": 0.0}]}
    """
    return jsonify({'budgets': BudgetService.get_budgets_for_user(g.current_user_id)})


@api_v1_bp.route('/budgets', methods=['POST'])
@session_required
def api_create_budget():
    """Create a budget.

    Request body:
        {
            "month": 1,
            "year": 2024,
            "observations": "...",     // optional
            "initial_balance": 1000.0, // optional
            "categories": [            // optional
                {"category_id": 1, "planned_amount_credit": 0, "planned_amount_debit": 300}
            ]
        }

    Returns:
        {"budget": {...}}
    """
    data = request.get_json(silent=True)

    if not data:
        return jsonify({'error': 'Request body required'}), 400

    budget = BudgetService.create_budget(g.current_user_id, data)
    return jsonify({'budget': BudgetService.get_budget(g.current_user_id, budget.budget_id)}), 201


@api_v1_bp.route('/budgets/<int:budget_id>', methods=['GET'])
@session_required
def api_get_budget(budget_id):
    """Get a budget with its categories.

    Returns:
        {"budget": {..., "categories": [...]}}
    """
    return jsonify({'budget': BudgetService.get_budget(g.current_user_id, budget_id)})


@api_v1_bp.route('/budgets/<int:budget_id>', methods=['DELETE'])
@session_required
def api_delete_budget(budget_id):
    BudgetService.delete_budget(g.current_user_id, budget_id)
    return jsonify({'success': True})


@api_v1_bp.route('/budgets/<int:budget_id>/status', methods=['PUT'])
@session_required
def api_set_budget_status(budget_id):
    """Open or close a budget. Closing snapshots each category's net amount.

    Request body:
        {"is_open": false}
    """
    data = request.get_json(silent=True) or {}

    if 'is_open' not in data:
        return jsonify({'error': 'is_open is required'}), 400

    BudgetService.set_budget_status(g.current_user_id, budget_id, data['is_open'])
    return jsonify({'budget': BudgetService.get_budget(g.current_user_id, budget_id)})


@api_v1_bp.route('/budgets/<int:budget_id>/categories/<int:category_id>', methods=['PUT'])
@session_required
def api_update_budget_category(budget_id, category_id):
    """Set the planned amounts of a category in a budget.

    Request body:
        {"planned_amount_credit": 0, "planned_amount_debit": 250.5}

    Returns:
        {"budget_category": {...}}
    """
    data = request.get_json(silent=True) or {}

    link = BudgetService.update_budget_category(
        g.current_user_id,
        budget_id,
        category_id,
        data.get('planned_amount_credit'),
        data.get('planned_amount_debit')
    )
    return jsonify({'budget_category': {
        'budget_id': link.budgets_budget_id,
        'category_id': link.categories_category_id,
        'planned_amount_credit': convert_big_integer_to_float(link.planned_amount_credit),
        'planned_amount_debit': convert_big_integer_to_float(link.planned_amount_debit),
    }})
