"""
Common API utilities for consistent response formatting across all controllers.
"""

import logging
from functools import wraps
from typing import Any, Optional

from flask import Flask, abort, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

from simplestore.core.exceptions import SimpleStoreError
from simplestore.core.validation import ValidationError

logger = logging.getLogger(__name__)


def api_response(
    success: bool, message: str, data: Optional[Any] = None, status_code: int = 200
) -> tuple:
    """
    Standardized API response format for all endpoints.

    Args:
        success: Whether the operation was successful
        message: Human-readable message about the operation
        data: Optional data payload
        status_code: HTTP status code

    Returns:
        Tuple of (json_response, status_code)
    """
    response = {"success": success, "message": message}

    if data is not None:
        response["data"] = data

    return jsonify(response), status_code


def get_json_body() -> dict:
    """Return the request JSON object, raising ValidationError otherwise."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def verify_health_token() -> bool:
    """
    Verify the health check token from request headers.

    Returns:
        bool: True if token is valid, False otherwise
    """
    token = request.headers.get("X-Health-Token")
    expected = current_app.config.get("HEALTH_CHECK_TOKEN")
    if not expected:
        return False
    return bool(token and token == expected)


def health_endpoint_decorator(f):
    """Decorator for internal monitoring endpoints that require the health token."""

    @wraps(f)
    def wrapper(*args, **kwargs):
        if verify_health_token():
            return f(*args, **kwargs)
        abort(401)

    return wrapper


def register_error_handlers(app: Flask) -> None:
    """Map domain and validation exceptions to JSON error responses."""

    @app.errorhandler(ValidationError)
    def handle_validation_error(error: ValidationError):
        return api_response(False, error.message, None, 400)

    @app.errorhandler(SimpleStoreError)
    def handle_domain_error(error: SimpleStoreError):
        if error.status_code >= 500:
            logger.error(
                "Domain error",
                extra={"context": {"error": error.message, "path": request.path}},
            )
        return api_response(False, error.message, None, error.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        if not request.path.startswith("/api"):
            return error
        return api_response(
            False, error.description or error.name, None, error.code or 500
        )

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        logger.error(
            "Unhandled exception",
            extra={"context": {"path": request.path, "method": request.method}},
            exc_info=True,
        )
        return api_response(False, "Internal server error", None, 500)
