"""
API v1 Blueprint.

Provides the REST API endpoints, authenticated with session keys.
"""
import logging

from flask import Blueprint, jsonify
from sqlalchemy.exc import SQLAlchemyError

from api_errors import APIError
from extensions import db

logger = logging.getLogger(__name__)

api_v1_bp = Blueprint('api_v1', __name__, url_prefix='/api/v1')


@api_v1_bp.errorhandler(APIError)
def handle_api_error(error):
    """Render service errors as {"error": message}."""
    db.session.rollback()
    return jsonify(error.to_dict()), error.status_code


@api_v1_bp.errorhandler(SQLAlchemyError)
def handle_database_error(error):
    """Roll back the session and hide database details from clients."""
    db.session.rollback()
    logger.exception(f"Database error: {error}")
    return jsonify({'error': 'Database error'}), 500


# Import routes to register them with the blueprint
from blueprints.api_v1 import auth  # noqa: F401, E402
from blueprints.api_v1 import categories  # noqa: F401, E402
from blueprints.api_v1 import accounts  # noqa: F401, E402
from blueprints.api_v1 import entities  # noqa: F401, E402
from blueprints.api_v1 import tags  # noqa: F401, E402
from blueprints.api_v1 import transactions  # noqa: F401, E402
from blueprints.api_v1 import budgets  # noqa: F401, E402
