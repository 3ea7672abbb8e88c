"""Case upload, analysis and read endpoints."""

import logging
from typing import Optional
from uuid import uuid4

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Request, UploadFile
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import settings
from app.db.models import Case, CaseDocument, CaseStatus, Verdict
from app.db.session import get_db
from app.deps import get_storage
from app.schemas.api import (
    AnalyzeResponse,
    CaseDocumentResponse,
    CaseListResponse,
    CaseResponse,
    CaseVerdictResponse,
)
from app.schemas.domain import ArgumentComparison, DocumentAnalysis, VerdictResult
from app.services import DocumentTooLargeError, UnsupportedDocumentError, validate_upload
from app.storage import ObjectStorage, StorageError, document_key
from worker.workflows import CaseAnalysisWorkflow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cases", tags=["cases"])

CONTENT_TYPES = {".pdf": "application/pdf", ".txt": "text/plain"}
UNKNOWN_PARTY = "Unknown"


def _party_label(parties: list[str], index: int) -> str:
    if index < len(parties) and parties[index].strip():
        return parties[index].strip()
    return UNKNOWN_PARTY


def _build_case_response(case: Case) -> CaseResponse:
    documents = [
        CaseDocumentResponse(
            id=doc.id,
            filename=doc.filename,
            party=doc.party,
            content_type=doc.content_type,
            file_size=doc.file_size,
            analysis=DocumentAnalysis.model_validate(doc.analysis) if doc.analysis else None,
        )
        for doc in case.documents
    ]

    verdict = None
    if case.verdicts:
        latest: Verdict = max(case.verdicts, key=lambda v: v.created_at)
        comparison = latest.result.get("comparison")
        verdict = CaseVerdictResponse(
            verdict_id=latest.id,
            model_used=latest.model_used,
            result=VerdictResult.model_validate(latest.result["verdict"]),
            comparison=ArgumentComparison.model_validate(comparison) if comparison else None,
            created_at=latest.created_at,
        )

    return CaseResponse(
        case_id=case.id,
        status=case.status.value,
        error_message=case.error_message,
        created_at=case.created_at,
        updated_at=case.updated_at,
        documents=documents,
        verdict=verdict,
    )


async def _load_case(db: AsyncSession, case_id: str) -> Case:
    result = await db.execute(
        select(Case)
        .where(Case.id == case_id)
        .options(selectinload(Case.documents), selectinload(Case.verdicts))
        .execution_options(populate_existing=True)
    )
    case = result.scalar_one_or_none()
    if case is None:
        raise HTTPException(status_code=404, detail="Case not found")
    return case


@router.post("", response_model=CaseResponse, status_code=201)
async def create_case(
    documents: Optional[list[UploadFile]] = File(None),
    parties: Optional[list[str]] = Form(None),
    db: AsyncSession = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
):
    """Upload the documents of a new dispute case (PDF or TXT)."""
    documents = documents or []
    parties = parties or []

    if not documents:
        raise HTTPException(status_code=400, detail="No documents uploaded")
    if len(documents) > settings.MAX_FILES_PER_CASE:
        raise HTTPException(
            status_code=400,
            detail=f"Too many documents: {len(documents)} > {settings.MAX_FILES_PER_CASE}",
        )

    uploads = []
    for upload in documents:
        content = await upload.read()
        filename = upload.filename or "unnamed.txt"
        try:
            extension = validate_upload(
                filename,
                len(content),
                allowed_extensions=settings.ALLOWED_EXTENSIONS,
                max_size_mb=settings.MAX_FILE_SIZE_MB,
            )
        except UnsupportedDocumentError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except DocumentTooLargeError as e:
            raise HTTPException(status_code=413, detail=str(e))
        uploads.append((filename, extension, content))

    case_id = str(uuid4())
    case = Case(id=case_id, status=CaseStatus.uploaded)
    db.add(case)

    for position, (filename, extension, content) in enumerate(uploads):
        object_key = document_key(case_id, position, filename)
        try:
            storage.put_bytes(
                settings.S3_BUCKET_DOCUMENTS,
                object_key,
                content,
                content_type=CONTENT_TYPES[extension],
            )
        except StorageError as e:
            logger.error("Upload failed for case %s: %s", case_id, e)
            raise HTTPException(status_code=503, detail="Document storage unavailable")

        db.add(
            CaseDocument(
                case_id=case_id,
                position=position,
                filename=filename,
                content_type=CONTENT_TYPES[extension],
                party=_party_label(parties, position),
                file_size=len(content),
                bucket=settings.S3_BUCKET_DOCUMENTS,
                object_key=object_key,
            )
        )

    await db.commit()
    logger.info("Created case %s with %d documents", case_id, len(uploads))

    return _build_case_response(await _load_case(db, case_id))


@router.post("/{case_id}/analyze", response_model=AnalyzeResponse, status_code=202)
async def analyze_case(
    case_id: str,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """Start the analysis workflow for an uploaded case."""
    case = await _load_case(db, case_id)

    if case.status == CaseStatus.analyzing:
        raise HTTPException(status_code=409, detail="Case is already being analyzed")

    temporal = getattr(request.app.state, "temporal", None)
    if temporal is None:
        raise HTTPException(status_code=503, detail="Analysis service unavailable")

    previous_status = case.status
    case.status = CaseStatus.analyzing
    case.error_message = None
    await db.commit()

    workflow_id = f"case-analysis-{case_id}"
    try:
        await temporal.start_workflow(
            CaseAnalysisWorkflow.run,
            case_id,
            id=workflow_id,
            task_queue=settings.WORKER_TASK_QUEUE,
        )
    except Exception as e:
        logger.error("Failed to start workflow for case %s: %s", case_id, e)
        case.status = previous_status
        await db.commit()
        raise HTTPException(status_code=503, detail="Analysis service unavailable")

    logger.info("Started analysis workflow %s", workflow_id)
    return AnalyzeResponse(case_id=case_id, status=CaseStatus.analyzing.value, workflow_id=workflow_id)


@router.get("/{case_id}", response_model=CaseResponse)
async def get_case(case_id: str, db: AsyncSession = Depends(get_db)):
    """Case with its documents, their analyses and the latest verdict."""
    return _build_case_response(await _load_case(db, case_id))


@router.get("", response_model=CaseListResponse)
async def list_cases(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """List cases with pagination, newest first."""
    total = (await db.execute(select(func.count(Case.id)))).scalar() or 0

    if total == 0:
        return CaseListResponse(items=[], total=0, page=page, page_size=page_size)

    result = await db.execute(
        select(Case)
        .options(selectinload(Case.documents), selectinload(Case.verdicts))
        .order_by(Case.created_at.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    items = [_build_case_response(case) for case in result.scalars().all()]

    return CaseListResponse(items=items, total=total, page=page, page_size=page_size)
