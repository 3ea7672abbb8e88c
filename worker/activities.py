"""Temporal activities for the case analysis workflow.

- extract_case_documents: decode and analyze every document of a case
- generate_narrative: run the LLM stages over the case brief
- store_verdict: synthesize the verdict, write artifact and Verdict row
- mark_case_failed: record an upstream failure on the case
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError
from temporalio import activity

from app.analysis import (
    SourceDocument,
    analyze_documents,
    build_case_brief,
    compare_parties,
    synthesize_verdict,
)
from app.core.config import settings
from app.db.models import CaseStatus, Verdict
from app.db.repository import get_case, set_case_status
from app.db.session import get_sync_db
from app.deps import get_storage, get_text_cache
from app.schemas.domain import ArgumentComparison, CaseAssessment, DocumentReport
from app.services import load_document_text
from app.storage import locator, verdict_key
from worker import narrative

logger = logging.getLogger(__name__)


class CaseNotFoundError(LookupError):
    """The case id does not exist."""


class EmptyCaseError(ValueError):
    """The case has no documents to analyze."""


@activity.defn
def extract_case_documents(case_id: str) -> dict[str, Any]:
    """Decode and analyze every document of a case.

    Stores the decoded text and the DocumentAnalysis on each CaseDocument.

    Args:
        case_id: UUID of the case.

    Returns:
        Dict with 'brief' (str), 'documents' (DocumentReport dicts) and
        'comparison' (ArgumentComparison dict or None), camelCase keys.

    Raises:
        CaseNotFoundError, EmptyCaseError: Nothing to analyze.
        DocumentError, PDFError: A document cannot be decoded.
        StorageError: MinIO read failed.
    """
    storage = get_storage()
    cache = get_text_cache()

    with get_sync_db() as db:
        case = get_case(db, case_id)
        if case is None:
            raise CaseNotFoundError(f"Case {case_id} not found")
        if not case.documents:
            raise EmptyCaseError(f"Case {case_id} has no documents")

        sources = []
        for doc in case.documents:
            doc_locator = locator(doc.bucket, doc.object_key)
            text = cache.get(doc_locator)
            if text is None:
                data, _ = storage.get_bytes(doc.bucket, doc.object_key)
                text = load_document_text(
                    data,
                    doc.filename,
                    cache=cache,
                    locator=doc_locator,
                    max_size_mb=settings.MAX_FILE_SIZE_MB,
                    max_pages=settings.PDF_MAX_PAGES,
                )
            sources.append(SourceDocument(name=doc.filename, text=text, party=doc.party))

        reports = analyze_documents(sources)
        for doc, source, report in zip(case.documents, sources, reports):
            doc.raw_text = source.text
            doc.analysis = report.analysis.model_dump(mode="json", by_alias=True)

        comparison = compare_parties(reports)
        brief = build_case_brief(case_id, reports, comparison)

    logger.info("Extracted %d documents for case %s (brief %d chars)", len(reports), case_id, len(brief))

    return {
        "brief": brief,
        "documents": [r.model_dump(mode="json", by_alias=True) for r in reports],
        "comparison": comparison.model_dump(mode="json", by_alias=True) if comparison else None,
    }


@activity.defn
def generate_narrative(case_id: str, brief: str) -> str:
    """Produce the judicial narrative for a case brief.

    Raises:
        NarrativeError: Propagated so the workflow retry policy applies.
    """
    logger.info("Generating narrative for case %s (%d chars)", case_id, len(brief))
    return narrative.generate_narrative(brief)


@activity.defn
def store_verdict(
    verdict_id: str,
    case_id: str,
    extracted: dict[str, Any],
    narrative_text: str,
) -> dict[str, Any]:
    """Synthesize and persist the verdict, then mark the case completed.

    Uses the workflow's stable verdict_id: a duplicate insert on retry is
    treated as success.

    Returns:
        The VerdictResult as a camelCase dict.
    """
    verdict = synthesize_verdict(narrative_text)
    comparison = extracted.get("comparison")
    assessment = CaseAssessment(
        case_id=case_id,
        documents=[DocumentReport.model_validate(d) for d in extracted.get("documents", [])],
        comparison=ArgumentComparison.model_validate(comparison) if comparison else None,
        verdict=verdict,
    )
    result = assessment.model_dump(mode="json", by_alias=True)

    storage = get_storage()
    artifact_key = verdict_key(case_id, verdict_id)
    storage.put_bytes(
        settings.S3_BUCKET_VERDICTS,
        artifact_key,
        json.dumps(result, indent=2).encode("utf-8"),
        content_type="application/json",
    )
    logger.info("Stored verdict artifact: %s/%s", settings.S3_BUCKET_VERDICTS, artifact_key)

    with get_sync_db() as db:
        try:
            db.add(
                Verdict(
                    id=verdict_id,
                    case_id=case_id,
                    model_used=settings.MODEL_NAME,
                    verdict=verdict.verdict,
                    confidence=verdict.confidence,
                    result=result,
                    artifact_bucket=settings.S3_BUCKET_VERDICTS,
                    artifact_key=artifact_key,
                )
            )
            db.flush()
            logger.info("Created Verdict %s for case %s", verdict_id, case_id)
        except IntegrityError:
            db.rollback()
            logger.info("Verdict %s already exists (idempotent retry), skipping insert", verdict_id)

        set_case_status(db, case_id, CaseStatus.completed)

    return verdict.model_dump(mode="json", by_alias=True)


@activity.defn
def mark_case_failed(case_id: str, message: Optional[str] = None) -> None:
    with get_sync_db() as db:
        if set_case_status(db, case_id, CaseStatus.failed, error_message=message) is None:
            logger.warning("Cannot mark unknown case %s as failed", case_id)
            return
    logger.warning("Case %s marked as failed: %s", case_id, message)


__all__ = [
    "CaseNotFoundError",
    "EmptyCaseError",
    "extract_case_documents",
    "generate_narrative",
    "mark_case_failed",
    "store_verdict",
]
