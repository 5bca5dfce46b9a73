# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# Sets the required environment before when_works.core.config is imported and
# provides an in-memory asset bundle, a fresh metadata cache per test and an
# application wired against an in-memory SQLite database.
# =============================================================================

import os
from pathlib import Path

os.environ.setdefault("DATABASE__URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SESSION_SECRET", "test-session-secret-value")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient

from when_works.core.config import Settings
from when_works.core.container import ApplicationContainer
from when_works.main import create_app
from when_works.web.assets import AssetMetadataCache, AssetStore

MIGRATIONS_DIR = Path(__file__).resolve().parents[1] / "migrations"

INDEX_HTML = b"<!doctype html><html><body><div id=\"root\"></div></body></html>"


def make_settings(**overrides) -> Settings:
    values = {
        "environment": "production",
        "session_secret": "test-session-secret-value",
        "database": {
            "url": "sqlite+aiosqlite:///:memory:",
            "migrations_dir": MIGRATIONS_DIR,
        },
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def asset_files() -> dict[str, bytes]:
    return {
        "index.html": INDEX_HTML,
        "assets/app.a1b2.js": b"console.log('when-works');",
        "assets/app.c3d4.css": b"body { margin: 0; }",
        "styles/main.css": b"h1 { color: red; }",
        "favicon.ico": b"\x00\x00\x01\x00",
        "robots.txt": b"User-agent: *\nDisallow:\n",
        "LICENSE": b"MIT",
    }


@pytest.fixture
def asset_store(asset_files) -> AssetStore:
    return AssetStore(asset_files)


@pytest.fixture
def metadata_cache() -> AssetMetadataCache:
    return AssetMetadataCache()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def container(settings, asset_store, metadata_cache) -> ApplicationContainer:
    return ApplicationContainer(
        settings=settings,
        asset_store=asset_store,
        metadata_cache=metadata_cache,
    )


@pytest.fixture
def client(container):
    app = create_app(container=container)
    with TestClient(app) as test_client:
        yield test_client
