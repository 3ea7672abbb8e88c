"""Sync repository helpers for cases, their documents and verdicts."""

from __future__ import annotations

from typing import Optional
from uuid import uuid4

from sqlalchemy.orm import Session

from app.db.models import Case, CaseDocument, CaseStatus, Verdict


def create_case(
    db: Session,
    *,
    case_id: Optional[str] = None,
    status: CaseStatus = CaseStatus.uploaded,
) -> Case:
    case = Case(id=case_id or str(uuid4()), status=status)
    db.add(case)
    db.flush()
    db.refresh(case)
    return case


def add_case_document(
    db: Session,
    *,
    case_id: str,
    filename: str,
    content_type: str,
    file_size: int,
    object_key: str,
    bucket: str = "case-documents",
    party: str = "Unknown",
    position: int = 0,
) -> CaseDocument:
    doc = CaseDocument(
        id=str(uuid4()),
        case_id=case_id,
        position=position,
        filename=filename,
        content_type=content_type,
        party=party,
        file_size=file_size,
        bucket=bucket,
        object_key=object_key,
    )
    db.add(doc)
    db.flush()
    db.refresh(doc)
    return doc


def get_case(db: Session, case_id: str) -> Optional[Case]:
    return db.get(Case, case_id)


def set_case_status(
    db: Session,
    case_id: str,
    status: CaseStatus,
    *,
    error_message: Optional[str] = None,
) -> Optional[Case]:
    """Update status; ``error_message`` is cleared unless given."""
    case = db.get(Case, case_id)
    if case is None:
        return None
    case.status = status
    case.error_message = error_message
    db.flush()
    return case


def save_document_analysis(
    db: Session,
    document_id: str,
    *,
    raw_text: str,
    analysis: dict,
) -> None:
    doc = db.get(CaseDocument, document_id)
    if doc is not None:
        doc.raw_text = raw_text
        doc.analysis = analysis
        db.flush()


def add_verdict(
    db: Session,
    *,
    case_id: str,
    model_used: str,
    verdict: str,
    confidence: str,
    result: dict,
    verdict_id: Optional[str] = None,
    artifact_bucket: str = "verdicts",
    artifact_key: Optional[str] = None,
) -> Verdict:
    verdict_id = verdict_id or str(uuid4())
    row = Verdict(
        id=verdict_id,
        case_id=case_id,
        model_used=model_used,
        verdict=verdict,
        confidence=confidence,
        result=result,
        artifact_bucket=artifact_bucket,
        artifact_key=artifact_key or f"{case_id}/{verdict_id}.json",
    )
    db.add(row)
    db.flush()
    db.refresh(row)
    return row


def latest_verdict(db: Session, case_id: str) -> Optional[Verdict]:
    return (
        db.query(Verdict)
        .filter(Verdict.case_id == case_id)
        .order_by(Verdict.created_at.desc())
        .first()
    )


def delete_case(db: Session, case_id: str) -> None:
    db.query(Verdict).filter(Verdict.case_id == case_id).delete()
    db.query(CaseDocument).filter(CaseDocument.case_id == case_id).delete()
    db.query(Case).filter(Case.id == case_id).delete()


__all__ = [
    "add_case_document",
    "add_verdict",
    "create_case",
    "delete_case",
    "get_case",
    "latest_verdict",
    "save_document_analysis",
    "set_case_status",
]
