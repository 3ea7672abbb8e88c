"""Alembic environment.

Uses the application's DATABASE_URL (or an explicit override set by
``app.db.migrations``) and the metadata of ``app.db.models``.
"""

from __future__ import annotations

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from app.core.config import settings
from app.db import models  # noqa: F401  registers tables on Base.metadata
from app.db.session import Base, _to_sync_url

config = context.config

if config.config_file_name is not None and not config.attributes.get("database_url_override"):
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def get_url() -> str:
    return _to_sync_url(config.attributes.get("database_url_override") or settings.DATABASE_URL)


def run_migrations_offline() -> None:
    """Emit SQL without a live connection."""
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = create_engine(get_url(), poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
