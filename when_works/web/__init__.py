"""Static SPA delivery: asset store, metadata cache, caching policy and routing."""

from .assets import AssetHash, AssetMetadata, AssetMetadataCache, AssetStore
from .caching import cache_control_for
from .spa import AssetNotFoundError, EntryDocumentMissingError, SpaAssetHandler, create_spa_router

__all__ = [
    "AssetHash",
    "AssetMetadata",
    "AssetMetadataCache",
    "AssetNotFoundError",
    "AssetStore",
    "EntryDocumentMissingError",
    "SpaAssetHandler",
    "cache_control_for",
    "create_spa_router",
]
