"""Domain schemas for dispute analysis."""

from app.schemas.domain import (
    ArgumentComparison,
    CaseAssessment,
    ConfidenceLevel,
    DocumentAnalysis,
    DocumentReport,
    DocumentType,
    VerdictResult,
)

__all__ = [
    "ArgumentComparison",
    "CaseAssessment",
    "ConfidenceLevel",
    "DocumentAnalysis",
    "DocumentReport",
    "DocumentType",
    "VerdictResult",
]
