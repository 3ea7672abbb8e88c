"""Domain models for dispute analysis and verdict synthesis."""

import enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class DocumentType(str, enum.Enum):
    """Closed set of document categories, in classification priority order."""

    complaint = "Complaint/Petition"
    response = "Response/Answer"
    contract = "Contract/Agreement"
    evidence = "Evidence/Exhibit"
    general = "General Legal Document"


class ConfidenceLevel(str, enum.Enum):
    """Machine-checkable confidence category of a verdict."""

    high = "high-confidence"
    medium = "medium-confidence"
    low = "low-confidence"
    requires_review = "requires-human-review"

    @property
    def label(self) -> str:
        """Human-readable label emitted in VerdictResult.confidence."""
        return _CONFIDENCE_LABELS[self]


_CONFIDENCE_LABELS = {
    ConfidenceLevel.high: "High - Strong Evidentiary Basis",
    ConfidenceLevel.medium: "Medium - AI Analysis Complete",
    ConfidenceLevel.low: "Low - Significant Uncertainty",
    ConfidenceLevel.requires_review: "Requires Human Expert Review",
}


class _Record(BaseModel):
    """Immutable record serialized with camelCase field names."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class DocumentAnalysis(_Record):
    """Structured features extracted from one legal document."""

    document_type: DocumentType = DocumentType.general
    parties: list[str] = Field(default_factory=list)
    key_points: list[str] = Field(default_factory=list, max_length=10)
    evidence: list[str] = Field(default_factory=list, max_length=10)
    claims: list[str] = Field(default_factory=list, max_length=10)


class VerdictResult(_Record):
    """Structured judicial recommendation parsed from a narrative."""

    verdict: str = Field(min_length=1)
    reasoning: str
    recommendations: list[str] = Field(min_length=1, max_length=6)
    confidence: str
    confidence_level: ConfidenceLevel = ConfidenceLevel.medium
    confidence_note: Optional[str] = None


class ArgumentComparison(_Record):
    """Side-by-side assessment of two parties' positions."""

    summary: str
    party_one_strengths: list[str] = Field(default_factory=list)
    party_two_strengths: list[str] = Field(default_factory=list)
    conflicting_points: list[str] = Field(default_factory=list)
    recommendation: str


class DocumentReport(_Record):
    """Analysis of a single submitted document, tagged with its party."""

    document_name: str
    party: str = "Unknown"
    analysis: DocumentAnalysis


class CaseAssessment(_Record):
    """Everything the pipeline produced for one case."""

    case_id: str
    documents: list[DocumentReport] = Field(default_factory=list)
    comparison: Optional[ArgumentComparison] = None
    verdict: VerdictResult
