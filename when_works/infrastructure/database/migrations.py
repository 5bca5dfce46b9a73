"""Database bootstrap: connectivity check and alembic upgrades."""

from __future__ import annotations

import logging
from pathlib import Path

from alembic import command
from alembic.config import Config
from alembic.util import CommandError
from sqlalchemy import text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)


class DatabaseBootstrapError(RuntimeError):
    """Raised when the database cannot be reached or migrated at startup."""


def build_alembic_config(migrations_path: Path) -> Config:
    config = Config()
    config.set_main_option("script_location", str(migrations_path))
    return config


def _upgrade(connection: Connection, config: Config) -> None:
    config.attributes["connection"] = connection
    command.upgrade(config, "head")


async def connect_database(engine: AsyncEngine) -> None:
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as exc:
        raise DatabaseBootstrapError(f"failed to connect to database: {exc}") from exc
    logger.info("connected to database")


async def run_migrations(engine: AsyncEngine, migrations_path: Path) -> None:
    """Apply every pending alembic revision on a live connection."""
    if not migrations_path.is_dir():
        raise DatabaseBootstrapError(f"migrations directory not found: {migrations_path}")

    config = build_alembic_config(migrations_path)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(_upgrade, config)
    except (SQLAlchemyError, CommandError) as exc:
        raise DatabaseBootstrapError(f"failed to run migrations: {exc}") from exc
    logger.info("database migrations applied")

