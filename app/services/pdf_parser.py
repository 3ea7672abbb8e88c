"""PDF text extraction.

Works entirely on bytes so it can run inside API handlers and worker
activities alike.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from io import BytesIO
from typing import Any

import pdfplumber

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF"
PAGE_SEPARATOR = "\n\n"


class PDFError(Exception):
    """Base class for PDF-related errors."""


class PDFValidationError(PDFError):
    """The file is not something we will parse. Final, never retried.

    Raised for: missing PDF header, oversize, too many pages, image-only.
    """


class PDFParseError(PDFError):
    """pdfplumber could not read the content (corrupted, encrypted)."""


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Immutable result of PDF text extraction."""

    text: str
    page_count: int
    metadata: dict[str, Any] = field(default_factory=dict)


def _check_bytes(data: bytes, max_size_mb: int) -> None:
    if not data.startswith(PDF_MAGIC):
        raise PDFValidationError("unsupported content: missing PDF header")
    if len(data) > max_size_mb * 1024 * 1024:
        raise PDFValidationError(
            f"file too large: {len(data) / 1024 / 1024:.1f}MB > {max_size_mb}MB"
        )


def extract_text_and_pages(
    data: bytes,
    *,
    max_size_mb: int = 10,
    max_pages: int = 100,
) -> ParseResult:
    """Extract text and page count from PDF bytes.

    Args:
        data: Raw PDF file bytes.
        max_size_mb: Maximum allowed file size in MB.
        max_pages: Maximum allowed page count.

    Returns:
        ParseResult with the page texts joined by a blank line.

    Raises:
        PDFValidationError: Not a PDF, too large, too many pages, or no text layer.
        PDFParseError: Corrupted, encrypted or otherwise unreadable PDF.
    """
    _check_bytes(data, max_size_mb)

    try:
        with pdfplumber.open(BytesIO(data)) as pdf:
            page_count = len(pdf.pages)
            if page_count > max_pages:
                raise PDFValidationError(f"too many pages: {page_count} > {max_pages}")

            pages = [(page.extract_text() or "").strip() for page in pdf.pages]
            if not any(pages):
                raise PDFValidationError(
                    "no text content: PDF may be scanned/image-only (OCR not supported)"
                )

            metadata = {k: v for k, v in (pdf.metadata or {}).items() if isinstance(v, str)}
            return ParseResult(
                text=PAGE_SEPARATOR.join(pages).strip(),
                page_count=page_count,
                metadata=metadata,
            )
    except PDFValidationError:
        raise
    except Exception as e:
        logger.warning("PDF parse failed: %s", e, exc_info=True)
        raise PDFParseError(f"failed to parse PDF: {type(e).__name__}") from e


__all__ = [
    "PDFError",
    "PDFParseError",
    "PDFValidationError",
    "ParseResult",
    "extract_text_and_pages",
]
