"""Asset delivery with conditional requests and SPA fallback routing."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import Response

from when_works.web.assets import AssetMetadataCache, AssetStore
from when_works.web.caching import ENTRY_DOCUMENT_PATH, FINGERPRINTED_PREFIX, cache_control_for

logger = logging.getLogger(__name__)

FALLBACK_MEDIA_TYPE = "application/octet-stream"
ENTRY_DOCUMENT_MEDIA_TYPE = "text/html; charset=utf-8"


class AssetError(Exception):
    """Base class for asset resolution failures."""


class AssetNotFoundError(AssetError):
    """Raised for a miss inside the fingerprinted asset namespace."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Asset not found: {path}")
        self.path = path


class EntryDocumentMissingError(AssetError):
    """Raised when the SPA entry document is not packaged."""

    def __init__(self) -> None:
        super().__init__(f"{ENTRY_DOCUMENT_PATH} is missing from the asset store")


class SpaAssetHandler:
    """Resolves request paths against the asset store.

    Hits are served with ``ETag``/``Cache-Control`` headers (or ``304`` when
    ``If-None-Match`` carries the current ETag). Misses under ``assets/``
    raise :class:`AssetNotFoundError`; any other miss is answered with
    ``index.html`` so client-side routing can take over.
    """

    def __init__(self, store: AssetStore, cache: AssetMetadataCache) -> None:
        self.store = store
        self.cache = cache

    def respond(self, request_path: str, if_none_match: str | None = None) -> Response:
        path = request_path[1:] if request_path.startswith("/") else request_path

        data = self.store.get(path)
        if data is not None:
            return self._serve(path, data, if_none_match)

        if path.startswith(FINGERPRINTED_PREFIX):
            raise AssetNotFoundError(path)

        entry = self.store.get(ENTRY_DOCUMENT_PATH)
        if entry is None:
            raise EntryDocumentMissingError()
        return self._serve(
            ENTRY_DOCUMENT_PATH,
            entry,
            if_none_match,
            media_type=ENTRY_DOCUMENT_MEDIA_TYPE,
        )

    def _serve(
        self,
        path: str,
        data: bytes,
        if_none_match: str | None,
        media_type: str | None = None,
    ) -> Response:
        metadata = self.cache.get_or_compute(path, data)
        headers = {
            "ETag": metadata.etag,
            "Cache-Control": cache_control_for(path),
        }

        if if_none_match is not None and metadata.etag_matches(if_none_match):
            return Response(status_code=status.HTTP_304_NOT_MODIFIED, headers=headers)

        return Response(
            content=data,
            media_type=media_type or metadata.mime_type or FALLBACK_MEDIA_TYPE,
            headers=headers,
        )


def get_spa_handler(request: Request) -> SpaAssetHandler:
    return request.app.state.container.spa_handler


def create_spa_router(api_prefix: str) -> APIRouter:
    """Catch-all router; include it after every other route group."""
    router = APIRouter()
    reserved = api_prefix.strip("/")

    @router.api_route("/{full_path:path}", methods=["GET", "HEAD"], include_in_schema=False)
    async def serve_spa(
        full_path: str,
        request: Request,
        handler: SpaAssetHandler = Depends(get_spa_handler),
    ) -> Response:
        if full_path == reserved or full_path.startswith(f"{reserved}/"):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")

        try:
            response = handler.respond(request.url.path, request.headers.get("if-none-match"))
        except AssetNotFoundError as exc:
            logger.debug("%s", exc)
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Asset not found") from exc
        except EntryDocumentMissingError as exc:
            logger.error("%s", exc)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to load index.html",
            ) from exc

        if request.method == "HEAD":
            # Keep the GET representation's headers, Content-Length included.
            response.body = b""
        return response

    return router


__all__ = [
    "AssetError",
    "AssetNotFoundError",
    "EntryDocumentMissingError",
    "SpaAssetHandler",
    "create_spa_router",
    "get_spa_handler",
]
