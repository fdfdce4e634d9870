"""
CSRF protection configuration.

A single CSRFProtect instance is initialized in create_app(). The JSON API
blueprints authenticate with the session cookie or a Bearer token and are
exempted as a whole when they are registered:

    from simplestore.core.csrf_config import csrf

    csrf.exempt(products_bp)
"""

from flask_wtf.csrf import CSRFProtect

# Global CSRF instance - initialized in create_app()
csrf = CSRFProtect()
