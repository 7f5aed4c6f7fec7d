"""
Authentication and user API routes.

Endpoints:
- POST /api/v1/auth/register - Register new user
- POST /api/v1/auth/login - Login and get a session key
- POST /api/v1/auth/check-session - Validate (and renew) the session key
- POST /api/v1/auth/logout - Invalidate the session key
- PUT /api/v1/user/password - Change password
- GET /api/v1/user/categories-entities-tags - Compact listing for pickers
- GET /api/v1/user/first-transaction-date - Date of the oldest transaction
- POST /api/v1/user/demo-data - Replace user data with demo data
"""
import logging

from flask import current_app, request, jsonify, g

from extensions import limiter
from api_decorators import session_required, is_mobile_request
from services.session_service import SessionService
from services.user_service import UserService
from blueprints.api_v1 import api_v1_bp

logger = logging.getLogger(__name__)


@api_v1_bp.route('/auth/register', methods=['POST'])
@limiter.limit('10 per hour')
def api_register():
    """Register a new user account.

    Request body:
        {
            "username": "alice",
            "email": "alice@example.com",
            "password": "Secure123"
        }

    Returns:
        {"user": {...}}
    """
    if not current_app.config.get('ENABLE_USER_SIGNUP', True):
        return jsonify({'error': 'Signups are disabled'}), 403

    data = request.get_json(silent=True)

    if not data:
        return jsonify({'error': 'Request body required'}), 400

    user = UserService.create_user(data)

    return jsonify({'user': user.to_dict()}), 201


@api_v1_bp.route('/auth/login', methods=['POST'])
@limiter.limit('20 per minute')
def api_login():
    """Login and get a session key.

    Headers:
        mobile: "true" to get a mobile session key

    Request body:
        {
            "username": "alice",
            "password": "Secure123"
        }

    Returns:
        {
            "user_id": 1,
            "username": "alice",
            "email": "...",
            "sessionkey": "...",
            "sessionkey_mobile": "...",
            "last_update_timestamp": 0,
            "accounts": [...]
        }
    """
    data = request.get_json(silent=True)

    if not data:
        return jsonify({'error': 'Request body required'}), 400

    username = data.get('username') or ''
    password = data.get('password') or ''

    if not isinstance(username, str) or not isinstance(password, str):
        return jsonify({'error': 'Username and password must be strings'}), 400

    username = username.strip()
    if not username or not password:
        return jsonify({'error': 'Username and password required'}), 400

    return jsonify(UserService.attempt_login(username, password, is_mobile_request()))


@api_v1_bp.route('/auth/check-session', methods=['POST'])
@session_required
def api_check_session():
    """Validate the session key. A valid check renews its trust limit.

    Returns:
        {"valid": true}
    """
    return jsonify({'valid': True})


@api_v1_bp.route('/auth/logout', methods=['POST'])
@session_required
def api_logout():
    """Invalidate the current session key.

    Returns:
        {"success": true}
    """
    SessionService.invalidate_session_key(g.current_user.username, g.mobile)
    return jsonify({'success': True})


@api_v1_bp.route('/user/password', methods=['PUT'])
@session_required
def api_change_password():
    """Change user's password.

    Request body:
        {
            "current_password": "OldPass123",
            "new_password": "NewPass456"
        }

    Returns:
        {"sessionkey": "...", "trustlimit": 1700000000}
    """
    data = request.get_json(silent=True)

    if not data:
        return jsonify({'error': 'Request body required'}), 400

    current_password = data.get('current_password', '')
    new_password = data.get('new_password', '')

    if not current_password or not new_password:
        return jsonify({'error': 'Current and new password required'}), 400
    if not isinstance(current_password, str) or not isinstance(new_password, str):
        return jsonify({'error': 'Passwords must be strings'}), 400

    session_data = UserService.change_user_password(
        g.current_user_id, current_password, new_password, g.mobile
    )
    return jsonify(session_data)


@api_v1_bp.route('/user/categories-entities-tags', methods=['GET'])
@session_required
def api_get_categories_entities_tags():
    """Get the user's categories, entities and tags.

    Returns:
        {"categories": [...], "entities": [...], "tags": [...]}
    """
    return jsonify(UserService.get_user_categories_entities_tags(g.current_user_id))


@api_v1_bp.route('/user/first-transaction-date', methods=['GET'])
@session_required
def api_get_first_transaction_date():
    """Get the date of the user's oldest transaction.

    Returns:
        {"first_transaction": {"date_timestamp": ..., "month": ..., "year": ...}}
        (null when the user has no transactions)
    """
    return jsonify({
        'first_transaction': UserService.get_first_user_transaction_date(g.current_user_id)
    })


@api_v1_bp.route('/user/demo-data', methods=['POST'])
@session_required
def api_populate_demo_data():
    """Replace all of the user's data with demo data.

    Returns:
        {"created": {"accounts": 4, ...}}
    """
    created = UserService.auto_populate_demo_data(g.current_user_id)
    logger.info(f"Demo data populated for user ID: {g.current_user_id}")
    return jsonify({'created': created}), 201
