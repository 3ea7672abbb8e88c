"""Upload validation and text decoding for case documents.

PDFs go through pdfplumber, plain text is decoded as UTF-8. Decoded text can
be memoized in a DocumentTextCache keyed by storage locator; the cache is an
ordinary object handed to whoever needs it.
"""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from pathlib import PurePath
from typing import Iterable, Optional

from app.services.pdf_parser import extract_text_and_pages

logger = logging.getLogger(__name__)

DEFAULT_ALLOWED_EXTENSIONS = (".pdf", ".txt")


class DocumentError(Exception):
    """Base class for document ingestion errors."""


class UnsupportedDocumentError(DocumentError):
    """File extension is not accepted."""


class DocumentTooLargeError(DocumentError):
    """File exceeds the configured size limit."""


class DocumentDecodeError(DocumentError):
    """Bytes could not be turned into text."""


class DocumentTextCache:
    """Thread-safe LRU map from storage locator (``bucket/key``) to decoded text.

    Holds at most ``max_entries`` texts; the least recently used entry is
    evicted first.
    """

    def __init__(self, max_entries: int = 256) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._lock = threading.Lock()
        self._texts: OrderedDict[str, str] = OrderedDict()

    def get(self, locator: str) -> Optional[str]:
        with self._lock:
            text = self._texts.get(locator)
            if text is not None:
                self._texts.move_to_end(locator)
            return text

    def put(self, locator: str, text: str) -> None:
        with self._lock:
            self._texts[locator] = text
            self._texts.move_to_end(locator)
            while len(self._texts) > self.max_entries:
                evicted, _ = self._texts.popitem(last=False)
                logger.debug("Evicted cached text for %s", evicted)

    def clear(self) -> None:
        with self._lock:
            self._texts.clear()

    def __contains__(self, locator: object) -> bool:
        with self._lock:
            return locator in self._texts

    def __len__(self) -> int:
        with self._lock:
            return len(self._texts)


def document_extension(filename: str) -> str:
    return PurePath(filename or "").suffix.lower()


def validate_upload(
    filename: str,
    size: int,
    *,
    allowed_extensions: Iterable[str] = DEFAULT_ALLOWED_EXTENSIONS,
    max_size_mb: int = 10,
) -> str:
    """Check extension and size of an uploaded file.

    Returns:
        The lower-cased extension.

    Raises:
        UnsupportedDocumentError: Extension not in ``allowed_extensions``.
        DocumentTooLargeError: ``size`` above ``max_size_mb``.
    """
    extension = document_extension(filename)
    allowed = tuple(ext.lower() for ext in allowed_extensions)
    if extension not in allowed:
        raise UnsupportedDocumentError(
            f"unsupported file type {extension or '<none>'!r} for {filename!r}; "
            f"allowed: {', '.join(allowed)}"
        )
    if size > max_size_mb * 1024 * 1024:
        raise DocumentTooLargeError(
            f"{filename!r} is {size / 1024 / 1024:.1f}MB, limit is {max_size_mb}MB"
        )
    return extension


def load_document_text(
    data: bytes,
    filename: str,
    *,
    cache: Optional[DocumentTextCache] = None,
    locator: Optional[str] = None,
    max_size_mb: int = 10,
    max_pages: int = 100,
) -> str:
    """Decode an uploaded document to text.

    Args:
        data: Raw file bytes.
        filename: Original filename; its extension selects the decoder.
        cache: Optional cache consulted and filled when ``locator`` is given.
        locator: Storage locator identifying the bytes.
        max_size_mb: Size limit forwarded to the PDF parser.
        max_pages: Page limit forwarded to the PDF parser.

    Raises:
        UnsupportedDocumentError: Neither PDF nor plain text.
        DocumentDecodeError: Text file is not valid UTF-8.
        PDFValidationError, PDFParseError: From the PDF parser.
    """
    if cache is not None and locator:
        cached = cache.get(locator)
        if cached is not None:
            logger.debug("Text cache hit for %s", locator)
            return cached

    extension = document_extension(filename)
    if extension == ".pdf":
        text = extract_text_and_pages(data, max_size_mb=max_size_mb, max_pages=max_pages).text
    elif extension == ".txt":
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DocumentDecodeError(f"{filename!r} is not valid UTF-8 text") from e
    else:
        raise UnsupportedDocumentError(f"cannot decode {filename!r}")

    logger.info("Decoded %s: %d bytes -> %d chars", filename, len(data), len(text))

    if cache is not None and locator:
        cache.put(locator, text)
    return text


__all__ = [
    "DEFAULT_ALLOWED_EXTENSIONS",
    "DocumentDecodeError",
    "DocumentError",
    "DocumentTextCache",
    "DocumentTooLargeError",
    "UnsupportedDocumentError",
    "document_extension",
    "load_document_text",
    "validate_upload",
]
