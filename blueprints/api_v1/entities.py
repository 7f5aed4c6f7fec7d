"""
Entity API routes.

Endpoints:
- GET /api/v1/entities - List entities
- POST /api/v1/entities - Create entity
- PUT /api/v1/entities/<id> - Rename entity
- DELETE /api/v1/entities/<id> - Delete entity
"""
from flask import request, jsonify, g

from api_decorators import session_required
from services.entity_service import EntityService
from blueprints.api_v1 import api_v1_bp


@api_v1_bp.route('/entities', methods=['GET'])
@session_required
def api_get_entities():
    """Get all entities of the current user."""
    entities = EntityService.get_all_entities_for_user(g.current_user_id)
    return jsonify({'entities': [e.to_dict() for e in entities]})


@api_v1_bp.route('/entities', methods=['POST'])
@session_required
def api_create_entity():
    """Create a new entity.

    Request body:
        {"name": "FreshMart"}
    """
    data = request.get_json(silent=True) or {}
    entity = EntityService.create_entity(g.current_user_id, data)
    return jsonify({'entity': entity.to_dict()}), 201


@api_v1_bp.route('/entities/<int:entity_id>', methods=['PUT'])
@session_required
def api_update_entity(entity_id):
    data = request.get_json(silent=True) or {}
    entity = EntityService.update_entity(g.current_user_id, entity_id, data)
    return jsonify({'entity': entity.to_dict()})


@api_v1_bp.route('/entities/<int:entity_id>', methods=['DELETE'])
@session_required
def api_delete_entity(entity_id):
    EntityService.delete_entity(g.current_user_id, entity_id)
    return jsonify({'success': True})
