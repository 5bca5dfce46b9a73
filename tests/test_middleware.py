"""Tests for request tracing and request timeouts."""

import logging
from datetime import timedelta

import anyio
from fastapi import FastAPI
from fastapi.testclient import TestClient

from when_works.web.middleware import RequestTimeoutMiddleware, RequestTracingMiddleware


def build_app(timeout=timedelta(seconds=5), slow_threshold=timedelta(seconds=5)) -> FastAPI:
    app = FastAPI()

    @app.get("/fast")
    async def fast():
        return {"ok": True}

    @app.get("/slow")
    async def slow():
        await anyio.sleep(0.3)
        return {"ok": True}

    @app.get("/boom")
    async def boom():
        raise RuntimeError("boom")

    app.add_middleware(RequestTimeoutMiddleware, timeout=timeout)
    app.add_middleware(RequestTracingMiddleware, slow_threshold=slow_threshold)
    return app


class TestRequestTimeout:
    def test_fast_request_passes_through(self):
        client = TestClient(build_app(timeout=timedelta(seconds=1)))
        assert client.get("/fast").json() == {"ok": True}

    def test_slow_request_times_out(self):
        client = TestClient(build_app(timeout=timedelta(milliseconds=50)))

        response = client.get("/slow")

        assert response.status_code == 408
        assert response.json() == {"detail": "Request timed out"}


class TestRequestTracing:
    def test_fast_response_logs_at_debug(self, caplog):
        client = TestClient(build_app())
        with caplog.at_level(logging.DEBUG, logger="when_works.web.middleware"):
            client.get("/fast")

        records = [r for r in caplog.records if r.name == "when_works.web.middleware"]
        assert records[-1].levelno == logging.DEBUG
        assert "200 OK" in records[-1].getMessage()

    def test_slow_response_logs_warning(self, caplog):
        client = TestClient(build_app(slow_threshold=timedelta(milliseconds=10)))
        with caplog.at_level(logging.DEBUG, logger="when_works.web.middleware"):
            client.get("/slow")

        records = [r for r in caplog.records if r.name == "when_works.web.middleware"]
        assert records[-1].levelno == logging.WARNING
        assert "/slow" in records[-1].getMessage()

    def test_unhandled_exception_is_logged_as_failure(self, caplog):
        client = TestClient(build_app(), raise_server_exceptions=False)
        with caplog.at_level(logging.DEBUG, logger="when_works.web.middleware"):
            response = client.get("/boom")

        assert response.status_code == 500
        messages = [r.getMessage() for r in caplog.records if r.name == "when_works.web.middleware"]
        assert any(message.startswith("Request failed") for message in messages)
