"""
Central pytest configuration for the SimpleStore test suite.

Environment variables are set before any application module is imported so
the lazy engine, the limiter and the password context pick up test values.
Fixtures live in ``tests/fixtures`` and markers in ``tests/config``.
"""

import os

# Test database configuration (set early so the lazy engine uses it)
TEST_DATABASE_URL = "sqlite:///:memory:"
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["TESTING"] = "true"
os.environ["RATE_LIMIT_ENABLED"] = "0"
os.environ["BCRYPT_ROUNDS"] = "4"  # Fast hashing for tests
os.environ["LOG_TO_FILE"] = "false"
os.environ.setdefault("FLASK_SECRET_KEY", "test-secret-key")
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret")
# Notifications must never reach a real server from the test suite
os.environ.pop("SMTP_HOST", None)

from tests.config.markers import *  # noqa: E402,F401,F403
from tests.fixtures.app_fixtures import *  # noqa: E402,F401,F403
from tests.fixtures.data_fixtures import *  # noqa: E402,F401,F403
