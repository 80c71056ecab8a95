from flask_jwt_extended import get_jwt_identity

from billsplit.extensions import get_store


def current_user():
    """The User behind the request's access token."""
    return get_store().users.get(get_jwt_identity())
