"""Cache-Control policy for served assets."""

from __future__ import annotations

from pathlib import PurePosixPath

IMMUTABLE = "public, max-age=31536000, immutable"
ENTRY_DOCUMENT = "public, max-age=300"
STYLES_SCRIPTS = "public, max-age=86400"
IMAGES = "public, max-age=2592000"
DEFAULT = "public, max-age=3600"

FINGERPRINTED_PREFIX = "assets/"
ENTRY_DOCUMENT_PATH = "index.html"

_BY_EXTENSION = {
    "css": STYLES_SCRIPTS,
    "js": STYLES_SCRIPTS,
    "png": IMAGES,
    "jpg": IMAGES,
    "jpeg": IMAGES,
    "gif": IMAGES,
    "svg": IMAGES,
    "ico": IMAGES,
}


def file_extension(path: str) -> str | None:
    suffix = PurePosixPath(path).suffix
    return suffix[1:].lower() if suffix else None


def cache_control_for(path: str) -> str:
    """Pick the ``Cache-Control`` directive for an asset path.

    Anything under ``assets/`` is immutable and ``index.html`` gets a short
    lifetime. Other paths are keyed on their extension.
    """
    if path.startswith(FINGERPRINTED_PREFIX):
        return IMMUTABLE
    if path == ENTRY_DOCUMENT_PATH:
        return ENTRY_DOCUMENT
    extension = file_extension(path)
    if extension is None:
        return DEFAULT
    return _BY_EXTENSION.get(extension, DEFAULT)


__all__ = ["cache_control_for", "file_extension"]
