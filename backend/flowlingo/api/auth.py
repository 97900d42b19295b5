"""Authentication API endpoints."""

import logging

from flask import current_app
from flask_jwt_extended import (jwt_required, set_access_cookies,
                                unset_jwt_cookies)

from flowlingo import db
from flowlingo.api import api_bp
from flowlingo.extensions import limiter
from flowlingo.models import User
from flowlingo.schemas import GoogleAuthRequest, LoginRequest, SignupRequest, parse_body
from flowlingo.utils import (conflict, error_response, success_response,
                             unauthorized)
from flowlingo.utils.auth import current_user, issue_token
from flowlingo.utils.google_auth import (GoogleAuthError,
                                         GoogleUnavailableError,
                                         verify_google_token)

logger = logging.getLogger(__name__)


def _new_user(**fields) -> User:
    max_hearts = current_app.config["MAX_HEARTS"]
    return User(hearts=max_hearts, max_hearts=max_hearts, **fields)


def _login_response(user: User, is_new_user: bool, status_code: int = 200):
    """Token in the body and in the ``access_token_cookie`` cookie."""
    token = issue_token(user)
    response, status = success_response(
        {"user": user.to_dict(), "token": token, "is_new_user": is_new_user},
        status_code=status_code,
    )
    set_access_cookies(response, token)
    return response, status


@api_bp.route("/auth/signup", methods=["POST"])
@limiter.limit("10 per minute")
def signup():
    """
    Create an account with email and password.

    Request body:
    {
        "email": "learner@example.com",
        "password": "secret123",
        "username": "learner"  // optional, defaults to the email name
    }
    """
    body, error = parse_body(SignupRequest)
    if error:
        return error

    if User.query.filter_by(email=body.email).first():
        return conflict("An account with this email already exists")

    user = _new_user(
        email=body.email,
        username=body.username or body.email.split("@")[0],
        auth_method="email",
    )
    user.set_password(body.password)
    db.session.add(user)
    db.session.commit()

    logger.info(f"New user signed up: {user.id}")
    return _login_response(user, is_new_user=True, status_code=201)


@api_bp.route("/auth/login", methods=["POST"])
@limiter.limit("10 per minute")
def login():
    """Sign in with email and password."""
    body, error = parse_body(LoginRequest)
    if error:
        return error

    user = User.query.filter_by(email=body.email).first()
    if not user or not user.check_password(body.password):
        return unauthorized("Invalid email or password")

    return _login_response(user, is_new_user=False)


@api_bp.route("/auth/google", methods=["POST"])
@limiter.limit("10 per minute")
def google_login():
    """
    Sign in with a Google ID token.

    Links the Google account to an existing user with the same email, or
    creates a new user.
    """
    body, error = parse_body(GoogleAuthRequest)
    if error:
        return error

    try:
        profile = verify_google_token(body.credential)
    except GoogleUnavailableError:
        return error_response(
            "GOOGLE_UNAVAILABLE", "Could not reach Google", status_code=503
        )
    except GoogleAuthError as e:
        return unauthorized(str(e))

    user = User.query.filter_by(google_id=profile["google_id"]).first()
    if not user:
        user = User.query.filter_by(email=profile["email"]).first()

    is_new_user = user is None
    if is_new_user:
        user = _new_user(
            email=profile["email"],
            username=profile["name"],
            auth_method="google",
        )
        db.session.add(user)

    user.google_id = profile["google_id"]
    user.email_verified = user.email_verified or profile["email_verified"]
    if profile["picture"]:
        user.profile_picture = profile["picture"]
    db.session.commit()

    logger.info(f"Google sign-in for user {user.id} (new={is_new_user})")
    return _login_response(user, is_new_user=is_new_user)


@api_bp.route("/auth/logout", methods=["POST"])
def logout():
    """Clear the auth cookie."""
    response, status = success_response(message="Logged out")
    unset_jwt_cookies(response)
    return response, status


@api_bp.route("/auth/me", methods=["GET"])
@jwt_required()
def get_current_user():
    """Get current authenticated user."""
    user = current_user()
    if not user:
        return unauthorized("User not found")

    return success_response({"user": user.to_dict()})
