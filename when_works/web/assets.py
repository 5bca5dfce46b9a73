"""Packaged SPA assets and their memoized HTTP metadata."""

from __future__ import annotations

import hashlib
import logging
import mimetypes
import threading
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from types import MappingProxyType

logger = logging.getLogger(__name__)

# Build output types, pinned so the host's /etc/mime.types cannot change them.
SPA_MEDIA_TYPES = {
    ".js": "text/javascript",
    ".mjs": "text/javascript",
    ".css": "text/css",
    ".html": "text/html",
    ".json": "application/json",
    ".map": "application/json",
    ".webmanifest": "application/manifest+json",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".wasm": "application/wasm",
}


def guess_media_type(path: str) -> str | None:
    suffix = PurePosixPath(path).suffix.lower()
    if suffix in SPA_MEDIA_TYPES:
        return SPA_MEDIA_TYPES[suffix]
    media_type, _encoding = mimetypes.guess_type(path, strict=False)
    return media_type


class AssetStore:
    """Immutable ``path -> bytes`` mapping loaded once at startup.

    Paths are relative, slash-separated and carry no leading slash.
    """

    def __init__(self, files: Mapping[str, bytes] | None = None) -> None:
        self._files: Mapping[str, bytes] = MappingProxyType(dict(files or {}))

    @classmethod
    def from_directory(cls, root: Path) -> "AssetStore":
        if not root.is_dir():
            logger.warning("Asset directory %s does not exist; serving no assets", root)
            return cls()

        files: dict[str, bytes] = {}
        for file_path in sorted(root.rglob("*")):
            if not file_path.is_file():
                continue
            files[file_path.relative_to(root).as_posix()] = file_path.read_bytes()

        logger.info("Loaded %d assets from %s", len(files), root)
        return cls(files)

    def get(self, path: str) -> bytes | None:
        return self._files.get(path)

    def paths(self) -> Iterator[str]:
        return iter(self._files)

    def __contains__(self, path: object) -> bool:
        return path in self._files

    def __len__(self) -> int:
        return len(self._files)


@dataclass(frozen=True, slots=True)
class AssetHash:
    """64-bit content fingerprint of an asset."""

    value: int

    @classmethod
    def of(cls, data: bytes) -> "AssetHash":
        digest = hashlib.blake2b(data, digest_size=8).digest()
        return cls(int.from_bytes(digest, "big"))

    def quoted(self) -> str:
        """ETag form: the decimal hash wrapped in double quotes."""
        return f'"{self.value}"'


@dataclass(frozen=True, slots=True)
class AssetMetadata:
    mime_type: str | None
    hash: AssetHash

    @property
    def etag(self) -> str:
        return self.hash.quoted()

    def etag_matches(self, etag: str) -> bool:
        return etag == self.etag

    @classmethod
    def compute(cls, path: str, data: bytes) -> "AssetMetadata":
        return cls(mime_type=guess_media_type(path), hash=AssetHash.of(data))


class AssetMetadataCache:
    """Per-path memo of :class:`AssetMetadata`.

    Entries are never recomputed or evicted. Lookups of populated paths are
    lock-free; only the first store for a path takes the lock, and the first
    stored value wins if two requests compute the same path concurrently.
    """

    def __init__(self, lock: threading.Lock | None = None) -> None:
        self._entries: dict[str, AssetMetadata] = {}
        self._lock = lock or threading.Lock()
        self._computations = 0

    def get_or_compute(self, path: str, data: bytes) -> AssetMetadata:
        cached = self._entries.get(path)
        if cached is not None:
            return cached

        metadata = AssetMetadata.compute(path, data)
        with self._lock:
            self._computations += 1
            stored = self._entries.setdefault(path, metadata)
        if stored is metadata:
            logger.debug("Cached metadata for %s (etag %s)", path, metadata.etag)
        return stored

    def get(self, path: str) -> AssetMetadata | None:
        return self._entries.get(path)

    @property
    def computations(self) -> int:
        """Number of metadata computations performed so far."""
        return self._computations

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["AssetHash", "AssetMetadata", "AssetMetadataCache", "AssetStore", "guess_media_type"]
