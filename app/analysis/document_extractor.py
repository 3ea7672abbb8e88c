"""Rule-based feature extraction for legal documents.

Pure function interface: takes already-decoded text, returns an immutable
DocumentAnalysis. Nothing here raises for missing matches; an empty or
unstructured document yields a General record with empty lists.
"""

from __future__ import annotations

import logging

from app.analysis import patterns
from app.schemas.domain import DocumentAnalysis, DocumentType

logger = logging.getLogger(__name__)

MAX_ITEMS = 10
MIN_PARTY_CHARS = 3
MAX_PARTY_CHARS = 100
MIN_KEY_POINT_CHARS = 30
MAX_EVIDENCE_CHARS = 200
MIN_CLAIM_CHARS = 20
MAX_CLAIM_CHARS = 500

_TRAILING_PUNCTUATION = " \t.,;:"


def analyze_document(document_text: str, document_name: str = "") -> DocumentAnalysis:
    """Extract type, parties, key points, evidence and claims from a document.

    Args:
        document_text: Decoded document text. May be empty.
        document_name: Display name, used for logging only.

    Returns:
        DocumentAnalysis with every list de-duplicated and capped.
    """
    if not document_text or not document_text.strip():
        logger.info("Document %r is empty, returning general analysis", document_name)
        return DocumentAnalysis()

    analysis = DocumentAnalysis(
        document_type=detect_document_type(document_text),
        parties=extract_parties(document_text),
        key_points=extract_key_points(document_text),
        evidence=extract_evidence(document_text),
        claims=extract_claims(document_text),
    )

    logger.info(
        "Analyzed document %r: type=%s parties=%d key_points=%d evidence=%d claims=%d",
        document_name,
        analysis.document_type.value,
        len(analysis.parties),
        len(analysis.key_points),
        len(analysis.evidence),
        len(analysis.claims),
    )
    return analysis


def detect_document_type(text: str) -> DocumentType:
    """Classify by keyword containment; earlier categories take precedence."""
    for document_type, keywords in patterns.DOCUMENT_TYPE_KEYWORDS:
        if patterns.contains_any(text, keywords):
            return document_type
    return DocumentType.general


def extract_parties(text: str) -> list[str]:
    parties = []
    for pattern in patterns.PARTY_PATTERNS:
        for name in patterns.find_all(text, pattern):
            party = name.rstrip(_TRAILING_PUNCTUATION)
            if MIN_PARTY_CHARS <= len(party) <= MAX_PARTY_CHARS:
                parties.append(party)
    return patterns.dedupe(parties)


def extract_key_points(text: str) -> list[str]:
    points = [
        sentence
        for sentence in patterns.split_sentences(text)
        if len(sentence) > MIN_KEY_POINT_CHARS
        and patterns.contains_any(sentence, patterns.LEGAL_KEYWORDS)
    ]
    return points[:MAX_ITEMS]


def extract_evidence(text: str) -> list[str]:
    evidence = []
    for pattern in patterns.EVIDENCE_PATTERNS:
        evidence.extend(
            item for item in patterns.find_all(text, pattern) if len(item) < MAX_EVIDENCE_CHARS
        )
    return patterns.dedupe(evidence, MAX_ITEMS)


def extract_claims(text: str) -> list[str]:
    claims = []
    for pattern in patterns.CLAIM_PATTERNS:
        claims.extend(
            claim
            for claim in patterns.find_all(text, pattern)
            if MIN_CLAIM_CHARS <= len(claim) <= MAX_CLAIM_CHARS
        )
    return patterns.dedupe(claims, MAX_ITEMS)


__all__ = [
    "analyze_document",
    "detect_document_type",
    "extract_claims",
    "extract_evidence",
    "extract_key_points",
    "extract_parties",
]
