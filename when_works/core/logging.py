"""Process-wide logging setup."""

from __future__ import annotations

import logging

from when_works.core.config import Settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

# Loggers that only follow the configured level when tracing.
_NOISY_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "alembic", "uvicorn.access")


def resolve_level(name: str) -> int:
    return _LEVELS.get(name.lower(), logging.INFO)


def configure_logging(settings: Settings) -> None:
    """Configure root handlers and the ``when_works`` logger hierarchy.

    The configured level applies to this package only. Third-party loggers
    stay at WARNING unless ``log_level`` is ``trace``.
    """
    level = resolve_level(settings.log_level)
    logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT, force=True)
    logging.getLogger("when_works").setLevel(level)

    tracing = settings.log_level == "trace"
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if tracing else logging.WARNING)
