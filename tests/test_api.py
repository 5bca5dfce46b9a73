"""Tests for the /api route group and routing modes."""

from datetime import datetime

from fastapi.testclient import TestClient

from tests.conftest import INDEX_HTML, make_settings
from when_works import __commit__, __version__
from when_works.core.container import ApplicationContainer
from when_works.main import create_app


class TestHealth:
    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert datetime.fromisoformat(body["timestamp"]).tzinfo is not None


class TestStatus:
    def test_status_reports_build_and_database(self, client):
        response = client.get("/api/status")

        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "version": __version__,
            "commit": __commit__,
            "database": "connected",
        }


class TestRoutingModes:
    def test_development_allows_any_origin(self, asset_store):
        container = ApplicationContainer(settings=make_settings(environment="development"), asset_store=asset_store)
        with TestClient(create_app(container=container)) as client:
            response = client.get("/api/health", headers={"Origin": "http://localhost:3000"})

        assert response.headers["access-control-allow-origin"] == "*"

    def test_development_has_no_spa_fallback(self, asset_store):
        container = ApplicationContainer(settings=make_settings(environment="development"), asset_store=asset_store)
        with TestClient(create_app(container=container)) as client:
            assert client.get("/dashboard/42").status_code == 404
            assert client.get("/index.html").status_code == 404

    def test_production_has_no_cors(self, client):
        response = client.get("/api/health", headers={"Origin": "http://evil.example"})
        assert "access-control-allow-origin" not in response.headers

    def test_custom_api_prefix(self, asset_store):
        settings = make_settings(api_prefix="internal/")
        container = ApplicationContainer(settings=settings, asset_store=asset_store)
        with TestClient(create_app(container=container)) as client:
            assert client.get("/internal/health").status_code == 200
            assert client.get("/internal/nope").status_code == 404
            assert client.get("/api/health").content == INDEX_HTML
