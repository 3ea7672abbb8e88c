"""Document ingestion services."""

from app.services.document_text import (
    DocumentDecodeError,
    DocumentError,
    DocumentTextCache,
    DocumentTooLargeError,
    UnsupportedDocumentError,
    load_document_text,
    validate_upload,
)
from app.services.pdf_parser import (
    PDFError,
    PDFParseError,
    PDFValidationError,
    ParseResult,
    extract_text_and_pages,
)

__all__ = [
    "DocumentDecodeError",
    "DocumentError",
    "DocumentTextCache",
    "DocumentTooLargeError",
    "PDFError",
    "PDFParseError",
    "PDFValidationError",
    "ParseResult",
    "UnsupportedDocumentError",
    "extract_text_and_pages",
    "load_document_text",
    "validate_upload",
]
