"""
Alembic migration environment.

Online migrations connect through the same ConnectionProvider as the app,
so DATABASE_URL / DATABASE_AUTH_MODE (static credentials or access token)
apply to migrations too. Offline mode only needs the URL.
"""

from logging.config import fileConfig

from alembic import context

# Load app models so Alembic can detect changes via autogenerate
import claimcalc.models  # noqa: F401 — side-effect: registers all models with Base.metadata
from claimcalc.models.base import Base
from claimcalc.services.storage.connection import create_connection_provider
from claimcalc.settings import settings

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Emit SQL scripts without a live DB connection."""
    context.configure(
        url=settings.database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations against a live DB connection."""
    provider = create_connection_provider()
    try:
        with provider.engine.connect() as connection:
            context.configure(
                connection=connection,
                target_metadata=target_metadata,
                compare_type=True,
            )
            with context.begin_transaction():
                context.run_migrations()
    finally:
        provider.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
