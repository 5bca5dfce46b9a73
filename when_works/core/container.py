"""Simple dependency container for wiring core services."""

from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncEngine

from when_works.core.config import Settings
from when_works.infrastructure.database import (
    connect_database,
    dispose_engine,
    get_engine,
    run_migrations,
)
from when_works.web.assets import AssetMetadataCache, AssetStore
from when_works.web.spa import SpaAssetHandler


@dataclass(slots=True)
class ApplicationContainer:
    """Process-lifetime services, built once at startup and shared by handlers."""

    settings: Settings
    asset_store: AssetStore | None = None
    metadata_cache: AssetMetadataCache = field(default_factory=AssetMetadataCache)
    _spa_handler: SpaAssetHandler | None = field(default=None, init=False)

    def init_assets(self) -> None:
        if self.asset_store is None:
            self.asset_store = AssetStore.from_directory(self.settings.web_dist_path)

    @property
    def spa_handler(self) -> SpaAssetHandler:
        if self._spa_handler is None:
            self.init_assets()
            assert self.asset_store is not None  # for mypy
            self._spa_handler = SpaAssetHandler(self.asset_store, self.metadata_cache)
        return self._spa_handler

    async def init_infrastructure(self) -> AsyncEngine:
        """Connect to the database and apply pending migrations."""
        engine = get_engine(self.settings)
        await connect_database(engine)
        if self.settings.database.run_migrations:
            await run_migrations(engine, self.settings.migrations_path)
        return engine

    async def shutdown(self) -> None:
        await dispose_engine()


__all__ = ["ApplicationContainer"]
