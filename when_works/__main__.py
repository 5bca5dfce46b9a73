"""Command-line entry point: ``python -m when_works`` / ``when-works``."""

from __future__ import annotations

import asyncio
import logging
import sys
import tomllib

import uvicorn
from pydantic import ValidationError

from when_works.core.config import Settings, get_settings
from when_works.core.logging import configure_logging
from when_works.main import create_app

logger = logging.getLogger("when_works")


async def serve(settings: Settings) -> int:
    config = uvicorn.Config(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
        timeout_graceful_shutdown=max(1, round(settings.shutdown_timeout.total_seconds())),
    )
    server = uvicorn.Server(config)
    logger.info("starting web server link=http://localhost:%d", settings.port)
    await server.serve()
    # Lifespan startup failures (database, migrations) return without starting.
    return 0 if server.started else 1


def main() -> int:
    try:
        settings = get_settings()
    except (ValidationError, tomllib.TOMLDecodeError) as exc:
        print(f"Failed to load configuration: {exc}", file=sys.stderr)
        return 1

    configure_logging(settings)
    return asyncio.run(serve(settings))


if __name__ == "__main__":
    sys.exit(main())
