"""Build the storage backend from settings."""

from __future__ import annotations

from urllib.parse import urlparse

from minio import Minio

from app.core.config import Settings, settings as default_settings
from app.storage.minio_impl import MinioStorage


def _normalize_endpoint(endpoint: str) -> tuple[str, bool]:
    """Split an endpoint URL into (host:port, secure)."""
    if "://" not in endpoint:
        endpoint = f"http://{endpoint}"
    parsed = urlparse(endpoint)
    host = parsed.netloc or parsed.path.rstrip("/")
    return host, parsed.scheme == "https"


def build_minio_client(settings: Settings = default_settings) -> Minio:
    host, secure = _normalize_endpoint(settings.S3_ENDPOINT)
    return Minio(
        host,
        access_key=settings.S3_ACCESS_KEY,
        secret_key=settings.S3_SECRET_KEY,
        secure=secure,
    )


def build_storage(settings: Settings = default_settings) -> MinioStorage:
    """MinioStorage with the documents and verdicts buckets in place."""
    storage = MinioStorage(build_minio_client(settings))
    storage.ensure_bucket(settings.S3_BUCKET_DOCUMENTS)
    storage.ensure_bucket(settings.S3_BUCKET_VERDICTS)
    return storage


__all__ = ["build_minio_client", "build_storage"]
