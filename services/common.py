"""
Query helpers shared by the per-user CRUD services.
"""
from extensions import db
from api_errors import APIError


def get_all_for_user(model, user_id, select_attributes=None, order_by=None):
    """
    Fetch all rows of a user-owned model.

    Args:
        model: Model class with a users_user_id column
        user_id (int): Owner's user ID
        select_attributes (list, optional): Column names to return. When
            given, rows are returned as dicts with only those keys.
        order_by: Optional ORDER BY clause

    Returns:
        list: Model instances, or dicts when select_attributes is set

    Raises:
        APIError: If an attribute is not a column of the model
    """
    if select_attributes:
        columns = []
        for name in select_attributes:
            if name not in model.__table__.columns.keys():
                raise APIError.bad_request(f'Unknown attribute: {name}')
            columns.append(getattr(model, name))
        query = db.session.query(*columns).filter(model.users_user_id == user_id)
        if order_by is not None:
            query = query.order_by(order_by)
        return [row._asdict() for row in query.all()]

    query = model.query.filter_by(users_user_id=user_id)
    if order_by is not None:
        query = query.order_by(order_by)
    return query.all()


def get_owned_or_404(model, pk_column, pk_value, user_id, label):
    """Fetch a row by primary key that must belong to the user."""
    row = model.query.filter(
        pk_column == pk_value,
        model.users_user_id == user_id
    ).first()
    if not row:
        raise APIError.not_found(f'{label} not found')
    return row


def require_name(data, label, max_length=255):
    """Validate and return the stripped 'name' field of a payload."""
    name = data.get('name') or ''
    if not isinstance(name, str):
        raise APIError.bad_request(f'{label} name must be a string')
    name = name.strip()
    if not name:
        raise APIError.bad_request(f'{label} name is required')
    if len(name) > max_length:
        raise APIError.bad_request(f'{label} name must be {max_length} characters or less')
    return name
