"""Request tracing and timeout middleware."""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from datetime import timedelta
from http import HTTPStatus

import anyio
from fastapi import status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

CallNext = Callable[[Request], Awaitable[Response]]


def _format_status(code: int) -> str:
    try:
        reason = HTTPStatus(code).phrase
    except ValueError:
        reason = "??"
    return f"{code} {reason}"


def _format_latency(seconds: float) -> str:
    if seconds < 1:
        return f"{seconds * 1000:.2f}ms"
    return f"{seconds:.2f}s"


class RequestTracingMiddleware(BaseHTTPMiddleware):
    """Log one line per response with its status and latency.

    Responses slower than ``slow_threshold`` are logged at WARNING, the rest
    at DEBUG. Server errors and unhandled exceptions are logged as failures.
    """

    def __init__(self, app: ASGIApp, slow_threshold: timedelta) -> None:
        super().__init__(app)
        self.slow_threshold = slow_threshold.total_seconds()

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.warning(
                "Request failed: %s %s error=%r latency=%s",
                request.method,
                request.url.path,
                exc,
                _format_latency(time.perf_counter() - started),
            )
            raise

        latency = time.perf_counter() - started
        if response.status_code >= 500:
            logger.warning(
                "Request failed: %s %s status=%s latency=%s",
                request.method,
                request.url.path,
                _format_status(response.status_code),
                _format_latency(latency),
            )
        else:
            level = logging.WARNING if latency > self.slow_threshold else logging.DEBUG
            logger.log(
                level,
                "Response: %s %s status=%s latency=%s",
                request.method,
                request.url.path,
                _format_status(response.status_code),
                _format_latency(latency),
            )
        return response


class RequestTimeoutMiddleware(BaseHTTPMiddleware):
    """Answer ``408 Request Timeout`` when a handler runs past ``timeout``."""

    def __init__(self, app: ASGIApp, timeout: timedelta) -> None:
        super().__init__(app)
        self.timeout = timeout.total_seconds()

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        with anyio.move_on_after(self.timeout):
            return await call_next(request)
        logger.debug("Request timed out: %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_408_REQUEST_TIMEOUT,
            content={"detail": "Request timed out"},
        )


__all__ = ["RequestTimeoutMiddleware", "RequestTracingMiddleware"]
