"""Health and status endpoints."""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from when_works import __commit__, __version__
from when_works.infrastructure.database import get_session
from when_works.schemas import HealthResponse, StatusResponse

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health() -> HealthResponse:
    return HealthResponse(timestamp=datetime.now(timezone.utc).isoformat())


@router.get("/status", response_model=StatusResponse, summary="Application status")
async def status(session: AsyncSession = Depends(get_session)) -> StatusResponse:
    try:
        await session.execute(text("SELECT 1"))
        database = "connected"
    except SQLAlchemyError as exc:
        logger.warning("Status database check failed: %s", exc)
        database = "unavailable"

    return StatusResponse(
        version=__version__,
        commit=__commit__,
        database=database,
    )
