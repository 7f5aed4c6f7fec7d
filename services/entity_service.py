"""
Entity service.

Handles CRUD for transaction counterparties.
"""
from extensions import db
from models import Entity, Transaction
from api_errors import APIError
from services.common import get_all_for_user, get_owned_or_404, require_name


class EntityService:
    """Service for entity operations."""

    @staticmethod
    def get_all_entities_for_user(user_id, select_attributes=None):
        """
        Get all entities of a user.

        Args:
            user_id (int): The user ID
            select_attributes (list, optional): Columns to return as dicts

        Returns:
            list: Entity instances or dicts
        """
        return get_all_for_user(Entity, user_id, select_attributes, order_by=Entity.name)

    @staticmethod
    def get_entity(user_id, entity_id):
        return get_owned_or_404(Entity, Entity.entity_id, entity_id, user_id, 'Entity')

    @staticmethod
    def _check_duplicate_name(user_id, name, exclude_entity_id=None):
        query = Entity.query.filter(Entity.users_user_id == user_id, Entity.name == name)
        if exclude_entity_id is not None:
            query = query.filter(Entity.entity_id != exclude_entity_id)
        if query.first():
            raise APIError.conflict('An entity with this name already exists')

    @staticmethod
    def create_entity(user_id, data):
        """Create a new entity. Names are unique per user."""
        name = require_name(data, 'Entity')
        EntityService._check_duplicate_name(user_id, name)

        entity = Entity(users_user_id=user_id, name=name)
        db.session.add(entity)
        db.session.commit()
        return entity

    @staticmethod
    def update_entity(user_id, entity_id, data):
        """Rename an entity."""
        entity = EntityService.get_entity(user_id, entity_id)
        name = require_name(data, 'Entity')
        EntityService._check_duplicate_name(user_id, name, exclude_entity_id=entity_id)

        entity.name = name
        db.session.commit()
        return entity

    @staticmethod
    def delete_entity(user_id, entity_id):
        """Delete an entity. Its transactions are kept without an entity."""
        entity = EntityService.get_entity(user_id, entity_id)

        Transaction.query.filter_by(entities_entity_id=entity_id).update(
            {'entities_entity_id': None}
        )
        db.session.delete(entity)
        db.session.commit()
