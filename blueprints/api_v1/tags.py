"""
Tag API routes.

Endpoints:
- GET /api/v1/tags - List tags
- POST /api/v1/tags - Create tag
- PUT /api/v1/tags/<id> - Update tag
- DELETE /api/v1/tags/<id> - Delete tag (and its links to transactions)
"""
from flask import request, jsonify, g

from api_decorators import session_required
from services.tag_service import TagService
from blueprints.api_v1 import api_v1_bp


@api_v1_bp.route('/tags', methods=['GET'])
@session_required
def api_get_tags():
    """Get all tags of the current user."""
    tags = TagService.get_all_tags_for_user(g.current_user_id)
    return jsonify({'tags': [t.to_dict() for t in tags]})


@api_v1_bp.route('/tags', methods=['POST'])
@session_required
def api_create_tag():
    """Create a new tag.

    Request body:
        {"name": "vacation", "description": "Trips"}
    """
    data = request.get_json(silent=True) or {}
    tag = TagService.create_tag(g.current_user_id, data)
    return jsonify({'tag': tag.to_dict()}), 201


@api_v1_bp.route('/tags/<int:tag_id>', methods=['PUT'])
@session_required
def api_update_tag(tag_id):
    data = request.get_json(silent=True) or {}
    tag = TagService.update_tag(g.current_user_id, tag_id, data)
    return jsonify({'tag': tag.to_dict()})


@api_v1_bp.route('/tags/<int:tag_id>', methods=['DELETE'])
@session_required
def api_delete_tag(tag_id):
    TagService.delete_tag(g.current_user_id, tag_id)
    return jsonify({'success': True})
