"""
SQLAlchemy engine and session setup.

Engines are built here and handed to a ConnectionProvider
(see claimcalc.services.storage.connection). Nothing in the app holds a
module-level session; every store call opens its own scope:

    factory = get_connection_provider().session_factory()
    with factory.begin() as session:
        ...
"""

from typing import Any

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from claimcalc.settings import settings


def build_engine(database_url: str, **overrides: Any) -> Engine:
    """
    Create an engine with bounded waits on every path that can block.

    PostgreSQL gets a connect timeout and a server-side statement timeout;
    an in-memory SQLite URL gets a single shared connection so every session
    sees the same database.
    """
    kwargs: dict[str, Any] = {"echo": settings.is_development}

    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in database_url or database_url.rstrip("/") == "sqlite:":
            kwargs["poolclass"] = StaticPool
    else:
        # pool_pre_ping=True: validates connections before use
        kwargs.update(
            pool_pre_ping=True,
            pool_size=5,
            max_overflow=10,
            pool_timeout=settings.db_pool_timeout_seconds,
        )
        if database_url.startswith("postgresql"):
            kwargs["connect_args"] = {
                "connect_timeout": settings.db_connect_timeout_seconds,
                "options": f"-c statement_timeout={settings.db_statement_timeout_ms}",
            }

    kwargs.update(overrides)
    return create_engine(database_url, **kwargs)


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        class_=Session,
    )


# ── Health check helper ─────────────────────────────────────────────────────
def check_db_connection(engine: Engine) -> bool:
    """Return True if the database is reachable. Used by /health endpoint."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
