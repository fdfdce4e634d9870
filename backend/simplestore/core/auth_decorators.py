"""
Authentication and role-authorization helpers for the JSON API.

Users authenticate either with the Flask-Login session cookie (browser SPA)
or with an ``Authorization: Bearer <jwt>`` header (API clients); both are
resolved by the login manager configured in ``create_app``, so the
decorators below only look at ``current_user``.

Roles:
    admin, owner      full access, including deletes and reports
    cashier           sales, customers and returns
    warehouse         products, vendors, purchase orders and returns

Examples:
    @products_bp.route("/<int:product_id>", methods=["DELETE"])
    @require_roles(ADMIN, OWNER)
    def delete_product(product_id):
        ...

    @products_bp.route("/", methods=["GET"])
    @require_login
    def list_products():
        ...
"""

from functools import wraps

from flask import jsonify
from flask_login import current_user

ADMIN = "admin"
OWNER = "owner"
CASHIER = "cashier"
WAREHOUSE = "warehouse"

MANAGERS = (ADMIN, OWNER)


def _unauthorized():
    return jsonify({"success": False, "message": "Unauthorized"}), 401


def _forbidden():
    return jsonify({"success": False, "message": "Forbidden"}), 403


def is_authenticated() -> bool:
    return bool(current_user and getattr(current_user, "is_authenticated", False))


def has_role(*roles: str) -> bool:
    return is_authenticated() and getattr(current_user, "role", None) in roles


def require_login(f):
    """Require an authenticated user of any role.

    Returns 401 JSON instead of redirecting, since every caller is an API client.
    """

    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not is_authenticated():
            return _unauthorized()
        return f(*args, **kwargs)

    return decorated_function


def require_roles(*roles: str):
    """Require an authenticated user whose role is one of ``roles``.

    Returns:
        - 401 if not authenticated
        - 403 if authenticated with a role outside ``roles``
    """

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not is_authenticated():
                return _unauthorized()
            if getattr(current_user, "role", None) not in roles:
                return _forbidden()
            return f(*args, **kwargs)

        return decorated_function

    return decorator
