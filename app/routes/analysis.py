"""Synchronous access to the analysis core, without a case."""

from fastapi import APIRouter

from app.analysis import analyze_document, compare_arguments, synthesize_verdict
from app.schemas.api import CompareRequest, DocumentAnalysisRequest, VerdictRequest
from app.schemas.domain import ArgumentComparison, DocumentAnalysis, VerdictResult

router = APIRouter(prefix="/api/analysis", tags=["analysis"])


@router.post("/document", response_model=DocumentAnalysis)
def analyze_document_text(body: DocumentAnalysisRequest):
    """Extract type, parties, key points, evidence and claims from text."""
    return analyze_document(body.document_text, body.document_name)


@router.post("/verdict", response_model=VerdictResult)
def synthesize(body: VerdictRequest):
    """Parse a judicial narrative into a structured verdict."""
    return synthesize_verdict(body.narrative)


@router.post("/compare", response_model=ArgumentComparison)
def compare(body: CompareRequest):
    return compare_arguments(body.party_one_analysis, body.party_two_analysis)
