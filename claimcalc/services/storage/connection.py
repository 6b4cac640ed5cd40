"""
ConnectionProvider abstract interface.
Swap static credentials for short-lived access tokens by changing
DATABASE_AUTH_MODE — the store never sees how a connection is authenticated.
"""

import abc
import logging
from pathlib import Path
from typing import Any, Callable, Optional

from sqlalchemy import Engine, event
from sqlalchemy.orm import Session, sessionmaker

from claimcalc.database import build_engine, build_session_factory

logger = logging.getLogger(__name__)

TokenSource = Callable[[], str]


class ConnectionProvider(abc.ABC):
    """Hands out authenticated sessions for one database."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self._session_factory = build_session_factory(engine)

    def session_factory(self) -> sessionmaker[Session]:
        return self._session_factory

    def dispose(self) -> None:
        self.engine.dispose()

    @property
    @abc.abstractmethod
    def auth_mode(self) -> str:
        """Short label for logs and the health endpoint."""


class StaticCredentialProvider(ConnectionProvider):
    """Credentials (if any) are embedded in the database URL."""

    auth_mode = "static"

    def __init__(self, database_url: str, **engine_kwargs: Any):
        super().__init__(build_engine(database_url, **engine_kwargs))


class AccessTokenProvider(ConnectionProvider):
    """
    Fetches a fresh access token for every new DBAPI connection and passes it
    as the connection password. How the token is issued (managed identity,
    workload identity file, vault agent) is up to `token_source`.
    """

    auth_mode = "token"

    def __init__(self, database_url: str, token_source: TokenSource, **engine_kwargs: Any):
        super().__init__(build_engine(database_url, **engine_kwargs))
        self.token_source = token_source
        event.listen(self.engine, "do_connect", self._provide_token)

    def _provide_token(self, dialect, conn_rec, cargs, cparams) -> None:
        try:
            token = self.token_source()
        except Exception as exc:
            raise ConnectionError("Failed to obtain database access token") from exc
        cparams["password"] = token


def token_file_source(path: str) -> TokenSource:
    """Token source that re-reads `path` on every call."""
    token_path = Path(path)

    def read_token() -> str:
        token = token_path.read_text(encoding="utf-8").strip()
        if not token:
            raise ValueError(f"Access token file {path!r} is empty")
        return token

    return read_token


# ── Factory ───────────────────────────────────────────────────────────────────

_provider: Optional[ConnectionProvider] = None


def get_connection_provider() -> ConnectionProvider:
    """Lazy singleton — returns the configured connection provider."""
    global _provider
    if _provider is None:
        _provider = create_connection_provider()
        logger.info("Database connection provider ready [auth=%s]", _provider.auth_mode)
    return _provider


def create_connection_provider() -> ConnectionProvider:
    from claimcalc.settings import settings

    if settings.database_auth_mode == "static":
        return StaticCredentialProvider(settings.database_url)
    elif settings.database_auth_mode == "token":
        if not settings.database_token_file:
            raise ValueError("DATABASE_TOKEN_FILE must be set when DATABASE_AUTH_MODE=token")
        return AccessTokenProvider(
            settings.database_url, token_file_source(settings.database_token_file)
        )
    else:
        raise ValueError(f"Unknown database auth mode: {settings.database_auth_mode!r}")


def reset_connection_provider() -> None:
    """Dispose the cached provider (used on shutdown and in tests)."""
    global _provider
    if _provider is not None:
        _provider.dispose()
        _provider = None
