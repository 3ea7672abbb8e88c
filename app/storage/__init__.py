"""Object storage for uploaded documents and verdict artifacts."""

from app.storage.contracts import ObjectStorage, StorageError, document_key, locator, verdict_key
from app.storage.minio_impl import MinioStorage

__all__ = [
    "MinioStorage",
    "ObjectStorage",
    "StorageError",
    "document_key",
    "locator",
    "verdict_key",
]
