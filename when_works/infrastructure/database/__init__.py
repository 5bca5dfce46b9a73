"""Database infrastructure helpers (engine, sessions, migrations)."""

from .migrations import DatabaseBootstrapError, connect_database, run_migrations
from .session import dispose_engine, get_engine, get_session

__all__ = [
    "DatabaseBootstrapError",
    "connect_database",
    "dispose_engine",
    "get_engine",
    "get_session",
    "run_migrations",
]
