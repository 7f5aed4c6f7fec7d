"""
Tag service.

Handles CRUD for tags and resolving tag names for transactions.
"""
from extensions import db
from models import Tag, TransactionHasTags
from api_errors import APIError
from services.common import get_all_for_user, get_owned_or_404, require_name


class TagService:
    """Service for tag operations."""

    @staticmethod
    def get_all_tags_for_user(user_id, select_attributes=None):
        """
        Get all tags of a user.

        Args:
            user_id (int): The user ID
            select_attributes (list, optional): Columns to return as dicts

        Returns:
            list: Tag instances or dicts
        """
        return get_all_for_user(Tag, user_id, select_attributes, order_by=Tag.name)

    @staticmethod
    def get_tag(user_id, tag_id):
        return get_owned_or_404(Tag, Tag.tag_id, tag_id, user_id, 'Tag')

    @staticmethod
    def _check_duplicate_name(user_id, name, exclude_tag_id=None):
        query = Tag.query.filter(Tag.users_user_id == user_id, Tag.name == name)
        if exclude_tag_id is not None:
            query = query.filter(Tag.tag_id != exclude_tag_id)
        if query.first():
            raise APIError.conflict('A tag with this name already exists')

    @staticmethod
    def create_tag(user_id, data):
        """Create a new tag. Names are unique per user."""
        name = require_name(data, 'Tag')
        TagService._check_duplicate_name(user_id, name)

        tag = Tag(users_user_id=user_id, name=name, description=data.get('description'))
        db.session.add(tag)
        db.session.commit()
        return tag

    @staticmethod
    def update_tag(user_id, tag_id, data):
        """Update a tag's name and/or description."""
        tag = TagService.get_tag(user_id, tag_id)

        if 'name' in data:
            name = require_name(data, 'Tag')
            TagService._check_duplicate_name(user_id, name, exclude_tag_id=tag_id)
            tag.name = name

        if 'description' in data:
            tag.description = data['description']

        db.session.commit()
        return tag

    @staticmethod
    def delete_tag(user_id, tag_id):
        """Delete a tag and its links to transactions in one unit of work."""
        tag = TagService.get_tag(user_id, tag_id)

        TransactionHasTags.query.filter_by(tags_tag_id=tag_id).delete()
        db.session.delete(tag)
        db.session.commit()

    @staticmethod
    def get_or_create_tags(user_id, names):
        """
        Resolve tag names to Tag instances, creating missing ones.

        Does not commit.

        Args:
            user_id (int): Owner's user ID
            names (list): Tag names; blanks and duplicates are ignored

        Returns:
            list: Tag instances in the order first seen

        Raises:
            APIError: 400 if names is not a list of strings
        """
        if names is None:
            return []
        if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
            raise APIError.bad_request('Tags must be a list of names')

        tags = []
        seen = set()
        for raw_name in names:
            name = raw_name.strip()
            if not name or name in seen:
                continue
            seen.add(name)

            tag = Tag.query.filter_by(users_user_id=user_id, name=name).first()
            if not tag:
                tag = Tag(users_user_id=user_id, name=name)
                db.session.add(tag)
            tags.append(tag)
        return tags
