"""Alembic migration environment."""

from __future__ import annotations

import asyncio
from logging.config import fileConfig

from alembic import context
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncEngine

from when_works.core.config import get_settings
from when_works.infrastructure.database.session import get_engine

config = context.config

# Only configure logging when invoked through the alembic CLI; the server
# owns logging when it runs migrations itself.
if config.config_file_name is not None and "connection" not in config.attributes:
    fileConfig(config.config_file_name)

# No ORM models yet; revisions are written by hand.
target_metadata = None


def _get_sqlalchemy_url() -> str:
    url = get_settings().database_url
    if url.startswith("sqlite+aiosqlite"):
        return url.replace("sqlite+aiosqlite", "sqlite")
    return url


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""

    context.configure(
        url=_get_sqlalchemy_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def _run_migrations_online(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata)

    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    """Run migrations in 'online' mode using the project's async engine."""

    connectable: AsyncEngine = get_engine()

    async with connectable.connect() as connection:
        await connection.run_sync(_run_migrations_online)


def run_migrations() -> None:
    if context.is_offline_mode():
        run_migrations_offline()
        return

    connection = config.attributes.get("connection")
    if connection is not None:
        # Called from the server's startup with a live connection.
        _run_migrations_online(connection)
    else:
        asyncio.run(run_migrations_online())


run_migrations()
