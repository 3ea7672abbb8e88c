"""Storage interface, error type and object key layout."""

from __future__ import annotations

import re
from typing import Mapping, Protocol, runtime_checkable


class StorageError(Exception):
    """Underlying storage failure with operation context."""

    def __init__(self, op: str, bucket: str | None, key: str | None, message: str):
        self.op = op
        self.bucket = bucket
        self.key = key
        self.message = message
        super().__init__(str(self))

    def __str__(self) -> str:
        return (
            f"{self.op} failed for bucket={self.bucket or '<unknown>'} "
            f"key={self.key or '<unknown>'}: {self.message}"
        )


@runtime_checkable
class ObjectStorage(Protocol):
    """What the API and worker need from object storage."""

    def put_bytes(
        self,
        bucket: str,
        key: str,
        data: bytes,
        *,
        content_type: str | None = None,
        metadata: Mapping[str, str] | None = None,
    ) -> str:
        ...

    def get_bytes(self, bucket: str, key: str) -> tuple[bytes, Mapping[str, str]]:
        ...

    def remove(self, bucket: str, key: str) -> None:
        ...

    def ensure_bucket(self, name: str) -> None:
        ...


_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def document_key(case_id: str, position: int, filename: str) -> str:
    """``<case_id>/<position>-<sanitized filename>``."""
    safe = _UNSAFE_KEY_CHARS.sub("_", filename).strip("_") or "document"
    return f"{case_id}/{position}-{safe}"


def verdict_key(case_id: str, verdict_id: str) -> str:
    return f"{case_id}/{verdict_id}.json"


def locator(bucket: str, key: str) -> str:
    return f"{bucket}/{key}"


__all__ = ["ObjectStorage", "StorageError", "document_key", "locator", "verdict_key"]
