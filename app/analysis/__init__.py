"""Deterministic document analysis and verdict synthesis."""

from app.analysis.comparison import compare_arguments
from app.analysis.document_extractor import analyze_document
from app.analysis.pipeline import (
    AnalysisPipeline,
    NarrativeGenerator,
    SourceDocument,
    analyze_documents,
    build_case_brief,
    compare_parties,
)
from app.analysis.verdict_synthesizer import synthesize_verdict

__all__ = [
    "AnalysisPipeline",
    "NarrativeGenerator",
    "SourceDocument",
    "analyze_document",
    "analyze_documents",
    "build_case_brief",
    "compare_arguments",
    "compare_parties",
    "synthesize_verdict",
]
