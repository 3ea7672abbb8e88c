"""Shared dependencies for FastAPI routes and worker activities."""

from __future__ import annotations

from typing import TYPE_CHECKING

from app.core.config import settings
from app.services.document_text import DocumentTextCache

if TYPE_CHECKING:
    from app.storage.minio_impl import MinioStorage

_storage: "MinioStorage | None" = None
_text_cache = DocumentTextCache(settings.TEXT_CACHE_MAX_ENTRIES)


def get_storage() -> "MinioStorage":
    """Storage singleton, built on first use so imports never touch MinIO."""
    global _storage
    if _storage is None:
        from app.storage.factory import build_storage

        _storage = build_storage()
    return _storage


def get_text_cache() -> DocumentTextCache:
    """Process-wide bounded text cache, keyed by storage locator."""
    return _text_cache


__all__ = ["get_storage", "get_text_cache"]
