"""
Flask application, database and authentication fixtures.

Each test gets freshly dropped and recreated tables on the shared in-memory
SQLite database. Sessions opened by fixtures commit and close before the
test client issues requests, since every session shares one connection.
"""

import pytest

from simplestore.core.security import create_user_token, hash_password
from simplestore.db.base import User
from simplestore.db.session import SessionLocal, create_tables, drop_tables

DEFAULT_PASSWORD = "secret123"


@pytest.fixture
def database():
    """Drop and recreate every table around a test."""
    drop_tables()
    create_tables()
    yield
    drop_tables()


@pytest.fixture
def db_session(database):
    """A session on the test database, closed after the test."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def app(database):
    """Create a Flask application configured for testing."""
    from simplestore.main import create_app

    app = create_app()
    app.config.update({"TESTING": True})
    return app


@pytest.fixture
def client(app):
    """Anonymous test client."""
    return app.test_client()


def create_user(
    username: str,
    role: str = "cashier",
    password: str = DEFAULT_PASSWORD,
    email: str = None,
    full_name: str = None,
    active: bool = True,
) -> User:
    """Insert a user directly and return the (detached) row."""
    db = SessionLocal()
    try:
        user = User(
            username=username,
            password_hash=hash_password(password),
            email=email,
            full_name=full_name or username.title(),
            role=role,
            active_flag=active,
        )
        db.add(user)
        db.commit()
        return user
    finally:
        db.close()


def login(client, username: str, password: str = DEFAULT_PASSWORD):
    response = client.post(
        "/api/login", json={"username": username, "password": password}
    )
    assert response.status_code == 200, response.get_json()
    return response


@pytest.fixture
def user_factory(app):
    """Create users on demand: ``user_factory("bob", role="owner")``."""
    return create_user


@pytest.fixture
def login_as(app):
    """Return a logged-in test client for a new user with ``role``."""

    def _login_as(role: str, username: str = None, **kwargs):
        username = username or f"{role}_user"
        create_user(username, role=role, **kwargs)
        test_client = app.test_client()
        login(test_client, username)
        return test_client

    return _login_as


@pytest.fixture
def admin_client(login_as):
    return login_as("admin", email="admin@example.com")


@pytest.fixture
def owner_client(login_as):
    return login_as("owner", email="owner@example.com")


@pytest.fixture
def cashier_client(login_as):
    return login_as("cashier")


@pytest.fixture
def warehouse_client(login_as):
    return login_as("warehouse")


@pytest.fixture
def bearer_headers(app):
    """Authorization header for an admin user, without a session cookie."""
    user = create_user("api_admin", role="admin")
    token = create_user_token(user.id, user.username, user.role)
    return {"Authorization": f"Bearer {token}"}
