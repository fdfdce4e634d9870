"""
Authentication and account endpoints.

Sessions are handled by Flask-Login; login also returns a JWT that API
clients send back as ``Authorization: Bearer <token>`` (or the
``access_token`` cookie).
"""

import logging

from flask import Blueprint, current_app, make_response
from flask_login import login_user, logout_user

from simplestore.controllers.controller_helpers import current_user_id
from simplestore.core.api_utils import api_response, get_json_body
from simplestore.core.auth_decorators import MANAGERS, has_role, is_authenticated, require_login
from simplestore.core.limiter_config import LOGIN_LIMIT, READ_LIMIT, WRITE_LIMIT, limiter
from simplestore.core.security import create_user_token
from simplestore.db.session import SessionLocal
from simplestore.repositories.user_repository import UserRepository
from simplestore.schemas.dtos import (
    LanguageRequest,
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    entity_to_dict,
)
from simplestore.services.user_service import UserService

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/api")


def _set_token_cookie(response, token: str):
    secure_flag = current_app.config.get("SESSION_COOKIE_SECURE", False)
    response.set_cookie(
        "access_token", token, httponly=True, secure=secure_flag, samesite="Lax"
    )
    return response


@auth_bp.route("/register", methods=["POST"])
@limiter.limit(LOGIN_LIMIT)
def register():
    """Create an account.

    Self-registration always yields a cashier; an authenticated admin/owner
    may pick the role and stays signed in as themselves.
    """
    request_dto = RegisterRequest.from_dict(get_json_body())
    created_by_manager = has_role(*MANAGERS)
    role = request_dto.role if created_by_manager and request_dto.role else "cashier"

    db = SessionLocal()
    try:
        repo = UserRepository(db)
        user = UserService(repo).register(request_dto, role=role)
        if not is_authenticated():
            login_user(repo.get_db_by_username(user.username))
        return api_response(True, "User registered", entity_to_dict(user), 201)
    finally:
        db.close()


@auth_bp.route("/login", methods=["POST"])
@limiter.limit(LOGIN_LIMIT)
def login():
    """Expected JSON: {"username": str, "password": str}."""
    request_dto = LoginRequest.from_dict(get_json_body())
    db = SessionLocal()
    try:
        repo = UserRepository(db)
        user = UserService(repo).authenticate(request_dto.username, request_dto.password)
        if not user:
            logger.warning(
                "Failed login attempt",
                extra={"context": {"username": request_dto.username}},
            )
            return api_response(False, "Invalid username or password", None, 401)

        login_user(repo.get_db_by_username(user.username))
        token = create_user_token(user.id, user.username, user.role)
        data = entity_to_dict(user)
        data["token"] = token
        logger.info("User logged in", extra={"context": {"user_id": user.id}})
        response = make_response(api_response(True, "Login successful", data))
        return _set_token_cookie(response, token)
    finally:
        db.close()


@auth_bp.route("/logout", methods=["POST"])
@limiter.limit(WRITE_LIMIT)
def logout():
    logout_user()
    response = make_response(api_response(True, "Logged out"))
    secure_flag = current_app.config.get("SESSION_COOKIE_SECURE", False)
    response.set_cookie(
        "access_token", "", expires=0, httponly=True, secure=secure_flag, samesite="Lax"
    )
    return response


@auth_bp.route("/user", methods=["GET"])
@limiter.limit(READ_LIMIT)
@require_login
def get_current_user():
    db = SessionLocal()
    try:
        user = UserService(UserRepository(db)).get_user(current_user_id())
        return api_response(True, "Current user", entity_to_dict(user))
    finally:
        db.close()


@auth_bp.route("/user/profile", methods=["PATCH", "PUT"])
@limiter.limit(WRITE_LIMIT)
@require_login
def update_profile():
    request_dto = ProfileUpdateRequest.from_dict(get_json_body())
    db = SessionLocal()
    try:
        user = UserService(UserRepository(db)).update_profile(
            current_user_id(), request_dto
        )
        return api_response(True, "Profile updated", entity_to_dict(user))
    finally:
        db.close()


@auth_bp.route("/user/language", methods=["PATCH", "PUT"])
@limiter.limit(WRITE_LIMIT)
@require_login
def update_language():
    request_dto = LanguageRequest.from_dict(get_json_body())
    db = SessionLocal()
    try:
        user = UserService(UserRepository(db)).set_language(
            current_user_id(), request_dto.language
        )
        return api_response(True, "Language updated", entity_to_dict(user))
    finally:
        db.close()
