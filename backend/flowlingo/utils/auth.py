"""Authentication helpers built on Flask-JWT-Extended."""

from functools import wraps

from flask import current_app
from flask_jwt_extended import create_access_token, get_jwt_identity

from flowlingo import db
from flowlingo.models.user import User
from flowlingo.utils.response import forbidden, unauthorized


def issue_token(user: User) -> str:
    """Access token for a user; the identity is the user id as a string."""
    return create_access_token(identity=str(user.id))


def current_user_id() -> int:
    """Id of the authenticated user. Call inside ``@jwt_required()``."""
    return int(get_jwt_identity())


def current_user() -> User | None:
    return db.session.get(User, current_user_id())


def debug_only(fn):
    """
    Decorator for development helpers such as refilling hearts.

    Returns 403 unless the app runs with DEBUG enabled.
    """

    @wraps(fn)
    def wrapper(*args, **kwargs):
        if not current_app.config.get("DEBUG"):
            return forbidden("Only available in development")
        return fn(*args, **kwargs)

    return wrapper


def register_jwt_handlers(jwt):
    """Answer JWT failures with the standard error envelope."""

    @jwt.unauthorized_loader
    def missing_token(reason):
        return unauthorized("Authentication required")

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return unauthorized("Invalid token")

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return unauthorized("Token has expired")

    @jwt.revoked_token_loader
    def revoked_token(jwt_header, jwt_payload):
        return unauthorized("Token has been revoked")
