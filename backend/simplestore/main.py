import logging
import os
import re
import sys
from typing import Dict, Union

import click
from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_login import LoginManager

# Only load from .env when DATABASE_URL is not already defined by the environment
if not os.getenv("DATABASE_URL"):
    load_dotenv()

from simplestore.core.config import (  # noqa: E402
    HEALTH_CHECK_TOKEN,
    get_limiter_storage_uri,
    get_log_json,
    get_log_level,
    get_log_to_file,
    get_rate_limit_enabled,
    get_sql_echo,
    log_app_config,
    log_email_config,
    log_timezone_config,
)
from simplestore.core.logging_config import setup_logging  # noqa: E402

logger = logging.getLogger(__name__)

WEAK_SECRETS = ("dev-secret-change-me", "dev-jwt-secret-change-me", "secret123")


def _is_test_mode(app: Flask) -> bool:
    """Check if we're running in test mode (pytest/CI)."""
    testing_val = os.getenv("TESTING", "").lower().strip()
    if testing_val in ("true", "1", "yes"):
        return True
    if "pytest" in sys.modules or os.getenv("PYTEST_CURRENT_TEST"):
        return True
    return bool(app.config.get("TESTING"))


def _init_sentry(env: str) -> None:
    sentry_dsn = os.getenv("SENTRY_DSN")
    if not sentry_dsn:
        logger.info(
            "Sentry not initialized (SENTRY_DSN not set)",
            extra={"context": {"environment": env}},
        )
        return

    import sentry_sdk
    from sentry_sdk.integrations.flask import FlaskIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=sentry_dsn,
        environment=env,
        release=os.getenv("GIT_SHA", "unknown"),
        integrations=[FlaskIntegration(), SqlalchemyIntegration()],
        traces_sample_rate=0.1,
        profiles_sample_rate=0.1,
        send_default_pii=False,
    )
    logger.info(
        "Sentry initialized",
        extra={"context": {"environment": env, "traces_sample_rate": 0.1}},
    )


def _init_metrics(app: Flask, env: str, testing: bool) -> None:
    """Expose /metrics for Prometheus scraping."""
    from prometheus_client import CollectorRegistry
    from prometheus_flask_exporter import PrometheusMetrics

    # Each test app gets its own registry so repeated create_app() calls
    # do not register the same collectors twice.
    registry = CollectorRegistry() if testing else None
    if registry is not None:
        metrics = PrometheusMetrics(app, registry=registry)
    else:
        metrics = PrometheusMetrics(app)
    try:
        metrics.info(
            "app_info",
            "Application information",
            version=os.getenv("GIT_SHA", "unknown"),
            environment=env,
        )
    except ValueError as e:
        logger.debug(
            "app_info metric already registered",
            extra={"context": {"error": str(e)}},
        )
    logger.info(
        "Prometheus metrics initialized",
        extra={"context": {"metrics_endpoint": "/metrics"}},
    )


def _init_security(app: Flask, is_production: bool) -> None:
    from simplestore.core.csrf_config import csrf

    if is_production:
        secret_key = app.config["SECRET_KEY"]
        if secret_key in WEAK_SECRETS or len(secret_key) < 32:
            raise ValueError(
                "Production deployment requires strong SECRET_KEY (min 32 chars). "
                "Set FLASK_SECRET_KEY environment variable."
            )

    app.config.setdefault("SESSION_COOKIE_SECURE", is_production)
    app.config.setdefault("SESSION_COOKIE_HTTPONLY", True)
    app.config.setdefault("SESSION_COOKIE_SAMESITE", "Lax")
    app.config.setdefault("REMEMBER_COOKIE_SECURE", is_production)
    app.config.setdefault("REMEMBER_COOKIE_HTTPONLY", True)

    app.config["WTF_CSRF_TIME_LIMIT"] = None
    app.config["WTF_CSRF_SSL_STRICT"] = is_production
    app.config["WTF_CSRF_ENABLED"] = True
    app.config["WTF_CSRF_CHECK_DEFAULT"] = False
    csrf.init_app(app)

    if is_production:
        from flask_talisman import Talisman

        Talisman(
            app,
            content_security_policy={
                "default-src": ["'self'"],
                "object-src": ["'none'"],
                "img-src": ["'self'", "data:"],
            },
            force_https=True,
            strict_transport_security=True,
            strict_transport_security_max_age=63072000,
            strict_transport_security_include_subdomains=True,
            frame_options="DENY",
            referrer_policy="no-referrer",
        )


def _init_login(app: Flask) -> None:
    from simplestore.core.security import get_user_from_token
    from simplestore.db.base import User
    from simplestore.db.session import SessionLocal

    login_manager = LoginManager()
    login_manager.init_app(app)

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({"success": False, "message": "Unauthorized"}), 401

    @login_manager.user_loader
    def load_user(user_id):
        with SessionLocal() as db:
            user = db.get(User, int(user_id))
            if user and user.is_active:
                return user
        return None

    @login_manager.request_loader
    def load_user_from_request(request):
        """Load a user from ``Authorization: Bearer`` or the access_token cookie."""
        token = None
        auth_header = request.headers.get("Authorization", "")
        if auth_header.startswith("Bearer "):
            token = auth_header.split(" ", 1)[1].strip()
        if not token:
            token = request.cookies.get("access_token")
        if not token:
            return None

        claims = get_user_from_token(token)
        if not claims:
            return None
        return load_user(claims["user_id"])


def _register_blueprints(app: Flask) -> None:
    from simplestore.controllers.auth_controller import auth_bp
    from simplestore.controllers.categories_controller import categories_bp
    from simplestore.controllers.contacts_controller import customers_bp, vendors_bp
    from simplestore.controllers.dashboard_controller import dashboard_bp
    from simplestore.controllers.export_controller import export_bp
    from simplestore.controllers.orders_controller import (
        purchase_orders_bp,
        returns_bp,
        sales_orders_bp,
    )
    from simplestore.controllers.products_controller import products_bp
    from simplestore.controllers.reports_controller import reports_bp
    from simplestore.controllers.settings_controller import settings_bp
    from simplestore.core.csrf_config import csrf

    blueprints = (
        auth_bp,
        categories_bp,
        products_bp,
        customers_bp,
        vendors_bp,
        purchase_orders_bp,
        sales_orders_bp,
        returns_bp,
        reports_bp,
        dashboard_bp,
        export_bp,
        settings_bp,
    )
    for bp in blueprints:
        # JSON API: authenticated by session cookie or bearer token
        csrf.exempt(bp)
        app.register_blueprint(bp)
    logger.info(
        "Blueprints registered",
        extra={"context": {"blueprints": [bp.name for bp in blueprints]}},
    )


def _register_monitoring_routes(app: Flask) -> None:
    from simplestore.core.api_utils import health_endpoint_decorator
    from simplestore.db.session import check_database_connection, get_engine

    @app.route("/health")
    def health_check():
        db_status = check_database_connection()
        return jsonify(
            {
                "status": "healthy" if db_status else "unhealthy",
                "database": "connected" if db_status else "disconnected",
            }
        ), (200 if db_status else 503)

    @app.route("/pool-metrics")
    @health_endpoint_decorator
    def pool_metrics():
        """Connection pool statistics parsed from ``pool.status()``."""
        try:
            status_str = get_engine().pool.status()
        except Exception as e:
            logger.error(
                "Failed to retrieve pool metrics",
                extra={"context": {"error": str(e)}},
            )
            return jsonify({"status": "error", "message": str(e)}), 500

        pool_stats: Dict[str, Union[str, int, float]] = {
            "status": "healthy",
            "pool_status": status_str,
        }
        patterns = {
            "pool_size": r"Pool size:\s*(\d+)",
            "connections_in_pool": r"Connections in pool:\s*(\d+)",
            "overflow": r"Current Overflow:\s*(-?\d+)",
            "checked_out": r"Current Checked out connections:\s*(\d+)",
        }
        for key, pattern in patterns.items():
            match = re.search(pattern, status_str)
            if match:
                pool_stats[key] = int(match.group(1))

        size = pool_stats.get("pool_size")
        checked_out = pool_stats.get("checked_out")
        if isinstance(size, int) and isinstance(checked_out, int):
            pool_stats["utilization_percent"] = (
                round(checked_out / size * 100, 2) if size > 0 else 0.0
            )
        return jsonify(pool_stats), 200


def _register_cli(app: Flask) -> None:
    from simplestore.core.security import hash_password
    from simplestore.db.session import SessionLocal, create_tables
    from simplestore.repositories.user_repository import UserRepository
    from simplestore.schemas.dtos import RegisterRequest
    from simplestore.services.user_service import UserService

    @app.cli.command("create-db")
    def create_db_command():
        """Create all database tables."""
        create_tables()
        click.echo("Database tables created")

    @app.cli.command("create-user")
    @click.argument("username")
    @click.argument("password")
    @click.option(
        "--role",
        type=click.Choice(["admin", "owner", "cashier", "warehouse"]),
        default="admin",
        show_default=True,
    )
    @click.option("--email", default=None)
    @click.option("--full-name", default=None, help="Defaults to the username.")
    def create_user_command(username, password, role, email, full_name):
        """Create a staff account."""
        request_dto = RegisterRequest.from_dict(
            {
                "username": username,
                "password": password,
                "fullName": full_name or username,
                "email": email,
            }
        )
        db = SessionLocal()
        try:
            user = UserService(UserRepository(db)).register(request_dto, role=role)
        finally:
            db.close()
        click.echo(f"Created user {user.username} (id={user.id}, role={user.role})")

    @app.cli.command("hash-password")
    @click.argument("password")
    def hash_password_command(password):
        """Print the bcrypt hash of PASSWORD."""
        click.echo(hash_password(password))


def create_app() -> Flask:
    env = os.getenv("FLASK_ENV", "development")
    is_production = env == "production"

    app = Flask(__name__)
    if os.getenv("TESTING", "").lower() in ("true", "1", "yes"):
        app.config["TESTING"] = True
    testing = _is_test_mode(app)

    setup_logging(
        app,
        log_level=get_log_level(),
        enable_sql_echo=get_sql_echo(),
        log_to_file=get_log_to_file() and not testing,
        use_json_format=get_log_json(),
    )
    log_timezone_config()
    log_email_config()
    log_app_config()

    _init_sentry(env)
    _init_metrics(app, env, testing)

    app.config["SECRET_KEY"] = os.getenv("FLASK_SECRET_KEY", "dev-secret-change-me")
    app.config["HEALTH_CHECK_TOKEN"] = HEALTH_CHECK_TOKEN
    app.config["JSON_SORT_KEYS"] = False

    from simplestore.core.limiter_config import limiter

    app.config["RATELIMIT_STORAGE_URI"] = get_limiter_storage_uri()
    limiter.init_app(app)
    if testing and not get_rate_limit_enabled():
        limiter.enabled = False
        logger.info(
            "Rate limiting disabled for testing", extra={"context": {"test_mode": True}}
        )

    _init_security(app, is_production)
    _init_login(app)

    from simplestore.core.api_utils import register_error_handlers

    register_error_handlers(app)
    _register_blueprints(app)
    _register_monitoring_routes(app)
    _register_cli(app)

    try:
        from simplestore.db.session import create_tables

        create_tables()
    except Exception as e:
        logger.warning(
            "Failed to auto-create tables",
            extra={"context": {"error": str(e)}},
            exc_info=True,
        )

    logger.info(
        "Application created",
        extra={"context": {"environment": env, "testing": testing}},
    )
    return app
