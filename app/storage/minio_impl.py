"""MinIO-backed ObjectStorage."""

from __future__ import annotations

import io
import logging
from typing import Callable, Mapping, TypeVar

from minio import Minio

from app.storage.contracts import ObjectStorage, StorageError, locator

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MinioStorage(ObjectStorage):
    """Object storage backed by the MinIO SDK.

    Every SDK failure (S3Error or transport) is re-raised as StorageError.
    """

    def __init__(self, client: Minio):
        self._client = client

    @property
    def client(self) -> Minio:
        return self._client

    def _call(self, op: str, bucket: str | None, key: str | None, fn: Callable[[], T]) -> T:
        try:
            return fn()
        except Exception as exc:
            logger.warning("Storage %s failed for %s/%s: %s", op, bucket, key, exc)
            raise StorageError(op=op, bucket=bucket, key=key, message=str(exc)) from exc

    def put_bytes(
        self,
        bucket: str,
        key: str,
        data: bytes,
        *,
        content_type: str | None = None,
        metadata: Mapping[str, str] | None = None,
    ) -> str:
        self._call(
            "put",
            bucket,
            key,
            lambda: self._client.put_object(
                bucket_name=bucket,
                object_name=key,
                data=io.BytesIO(data),
                length=len(data),
                content_type=content_type or "application/octet-stream",
                metadata=dict(metadata) if metadata else None,
            ),
        )
        return locator(bucket, key)

    def get_bytes(self, bucket: str, key: str) -> tuple[bytes, Mapping[str, str]]:
        def _read() -> tuple[bytes, Mapping[str, str]]:
            obj = self._client.get_object(bucket, key)
            try:
                return obj.read(), obj.headers or {}
            finally:
                obj.close()
                obj.release_conn()

        return self._call("get", bucket, key, _read)

    def remove(self, bucket: str, key: str) -> None:
        self._call("remove", bucket, key, lambda: self._client.remove_object(bucket, key))

    def ensure_bucket(self, name: str) -> None:
        def _ensure() -> None:
            if not self._client.bucket_exists(name):
                self._client.make_bucket(name)
                logger.info("Created bucket %s", name)

        self._call("ensure_bucket", name, None, _ensure)


__all__ = ["MinioStorage"]
