"""
Category API routes.

Endpoints:
- GET /api/v1/categories - List categories
- POST /api/v1/categories - Create category
- PUT /api/v1/categories/<id> - Update category
- DELETE /api/v1/categories/<id> - Delete category
- GET /api/v1/categories/<id>/amounts - Credit/debit in a month, year or period
- GET /api/v1/categories/<id>/averages - Monthly averages (last 12 months, lifetime)
"""
from flask import request, jsonify, g

from api_decorators import session_required
from services.category_service import CategoryService
from utils import convert_big_integer_to_float, parse_bool
from blueprints.api_v1 import api_v1_bp


def _amounts_to_dict(amounts):
    """Convert aggregated cents to currency units."""
    return {
        'category_balance_credit': convert_big_integer_to_float(amounts['category_balance_credit']),
        'category_balance_debit': convert_big_integer_to_float(amounts['category_balance_debit']),
    }


@api_v1_bp.route('/categories', methods=['GET'])
@session_required
def api_get_categories():
    """Get all categories of the current user.

    Returns:
        {"categories": [...]}
    """
    categories = CategoryService.get_all_categories_for_user(g.current_user_id)
    return jsonify({'categories': [c.to_dict() for c in categories]})


@api_v1_bp.route('/categories', methods=['POST'])
@session_required
def api_create_category():
    """Create a new category.

    Request body:
        {
            "name": "Groceries",
            "type": "D",                  // optional, C/D/M
            "description": "...",         // optional
            "color_gradient": "orange",   // optional
            "status": "Active",           // optional
            "exclude_from_budgets": false // optional
        }

    Returns:
        {"category": {...}}
    """
    data = request.get_json(silent=True) or {}
    category = CategoryService.create_category(g.current_user_id, data)
    return jsonify({'category': category.to_dict()}), 201


@api_v1_bp.route('/categories/<int:category_id>', methods=['PUT'])
@session_required
def api_update_category(category_id):
    """Update a category. All fields optional.

    Returns:
        {"category": {...}}
    """
    data = request.get_json(silent=True) or {}
    category = CategoryService.update_category(g.current_user_id, category_id, data)
    return jsonify({'category': category.to_dict()})


@api_v1_bp.route('/categories/<int:category_id>', methods=['DELETE'])
@session_required
def api_delete_category(category_id):
    """Delete a category and its budget links.

    Returns:
        {"success": true}
    """
    CategoryService.delete_category(g.current_user_id, category_id)
    return jsonify({'success': True})


@api_v1_bp.route('/categories/<int:category_id>/amounts', methods=['GET'])
@session_required
def api_get_category_amounts(category_id):
    """Get a category's credit and debit in a month, a year or a period.

    Query params (one of):
        month & year
        year
        from & to (unix timestamps, to exclusive)
    Optional:
        include_transfers (default true)

    Returns:
        {"category_balance_credit": 12.34, "category_balance_debit": 56.78}
    """
    CategoryService.get_category(g.current_user_id, category_id)

    include_transfers = parse_bool(request.args.get('include_transfers'), default=True)
    month = request.args.get('month', type=int)
    year = request.args.get('year', type=int)
    from_date = request.args.get('from', type=int)
    to_date = request.args.get('to', type=int)

    if month is not None and year is not None:
        if month < 1 or month > 12:
            return jsonify({'error': 'Month must be between 1 and 12'}), 400
        amounts = CategoryService.get_amount_for_category_in_month(
            category_id, month, year, include_transfers
        )
    elif year is not None:
        amounts = CategoryService.get_amount_for_category_in_year(category_id, year, include_transfers)
    elif from_date is not None and to_date is not None:
        amounts = CategoryService.get_amount_for_category_in_period(
            category_id, from_date, to_date, include_transfers
        )
    else:
        return jsonify({'error': 'Provide month and year, year, or from and to'}), 400

    return jsonify(_amounts_to_dict(amounts))


@api_v1_bp.route('/categories/<int:category_id>/averages', methods=['GET'])
@session_required
def api_get_category_averages(category_id):
    """Get a category's average monthly credit and debit.

    Returns:
        {
            "last_12_months": {"category_balance_credit": ..., "category_balance_debit": ...},
            "lifetime": {...}
        }
    """
    CategoryService.get_category(g.current_user_id, category_id)

    return jsonify({
        'last_12_months': _amounts_to_dict(
            CategoryService.get_average_amount_for_category_in_last_12_months(category_id)
        ),
        'lifetime': _amounts_to_dict(
            CategoryService.get_average_amount_for_category_in_lifetime(category_id)
        ),
    })
