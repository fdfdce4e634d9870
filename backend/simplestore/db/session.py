import logging
import os

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine.url import make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from simplestore.core.config import get_database_url

logger = logging.getLogger(__name__)

# Create Base class for models
Base = declarative_base()

# Internal lazy globals
_engine = None
_SessionLocal = None
_database_url = None


def _enable_sqlite_foreign_keys(engine) -> None:
    # SQLite ignores FOREIGN KEY constraints unless enabled per connection
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def _build_engine(database_url: str):
    try:
        url = make_url(database_url)
        drivername = url.drivername
    except Exception:
        drivername = ""

    if drivername.startswith("postgresql") or drivername.startswith("postgres"):
        return create_engine(
            database_url,
            pool_size=10,
            max_overflow=20,
            pool_pre_ping=True,  # Detects and refreshes stale connections
            pool_recycle=3600,
            connect_args={
                "application_name": "simplestore",  # Visible in pg_stat_activity
                "connect_timeout": 10,
            },
            echo=False,  # SQL logging is controlled by logging_config
        )

    if drivername.startswith("sqlite"):
        if ":memory:" in database_url or database_url.rstrip("/") == "sqlite:":
            # One shared in-memory database per process so DDL persists
            # across sessions (tests create tables, then open new sessions).
            engine = create_engine(
                database_url,
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            engine = create_engine(
                database_url, echo=False, connect_args={"check_same_thread": False}
            )
        _enable_sqlite_foreign_keys(engine)
        return engine

    return create_engine(database_url, echo=False)


def get_engine():
    """Return a cached SQLAlchemy engine, creating it from DATABASE_URL on
    first call. This allows tests to set DATABASE_URL before the engine is
    constructed."""
    global _engine, _SessionLocal, _database_url
    database_url = os.getenv("DATABASE_URL") or get_database_url()
    if _engine is None or _database_url != database_url:
        if _engine is not None:
            _engine.dispose()
        _engine = _build_engine(database_url)
        _SessionLocal = None
        _database_url = database_url
        logger.info(
            "Database engine created",
            extra={"context": {"dialect": _engine.dialect.name}},
        )
    return _engine


def get_sessionmaker():
    """Return a cached sessionmaker bound to the lazy engine."""
    global _SessionLocal
    engine = get_engine()
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
        )
    return _SessionLocal


def SessionLocal():
    """Return a new Session bound to the current engine.

    Controllers open one session per request:

        db = SessionLocal()
        try:
            ...
        finally:
            db.close()
    """
    return get_sessionmaker()()


def create_tables():
    """Create all tables in database using the lazy engine."""
    # Import models so Base.metadata is populated
    from simplestore.db import base  # noqa: F401

    Base.metadata.create_all(bind=get_engine())


def drop_tables():
    from simplestore.db import base  # noqa: F401

    Base.metadata.drop_all(bind=get_engine())


def check_database_connection() -> bool:
    """Return True when a trivial query succeeds."""
    try:
        with get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(
            "Database connection check failed", extra={"context": {"error": str(e)}}
        )
        return False
