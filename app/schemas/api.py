"""API request and response models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.schemas.domain import ArgumentComparison, DocumentAnalysis, VerdictResult


class _ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class CaseDocumentResponse(_ApiModel):
    id: str
    filename: str
    party: str
    content_type: str
    file_size: int
    analysis: Optional[DocumentAnalysis] = None


class CaseVerdictResponse(_ApiModel):
    verdict_id: str
    model_used: str
    result: VerdictResult
    comparison: Optional[ArgumentComparison] = None
    created_at: datetime


class CaseResponse(_ApiModel):
    case_id: str
    status: str
    error_message: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    documents: list[CaseDocumentResponse] = Field(default_factory=list)
    verdict: Optional[CaseVerdictResponse] = None


class CaseListResponse(_ApiModel):
    """Paginated case list, newest first."""

    items: list[CaseResponse]
    total: int
    page: int
    page_size: int


class AnalyzeResponse(_ApiModel):
    case_id: str
    status: str
    workflow_id: str


class DocumentAnalysisRequest(_ApiModel):
    document_text: str
    document_name: str = ""


class VerdictRequest(_ApiModel):
    narrative: str


class CompareRequest(_ApiModel):
    party_one_analysis: str
    party_two_analysis: str
