"""Case analysis pipeline.

raw text -> analyze_document (per document) -> party comparison -> case
brief -> narrative generator (external) -> synthesize_verdict.

The narrative generator is injected; everything else is pure.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Protocol, Sequence

from app.analysis.comparison import compare_arguments
from app.analysis.document_extractor import analyze_document
from app.analysis.verdict_synthesizer import synthesize_verdict
from app.schemas.domain import ArgumentComparison, CaseAssessment, DocumentReport

logger = logging.getLogger(__name__)

UNKNOWN_PARTY = "Unknown"

BRIEF_TASKS = """Your task is to:
1. Analyze all documents thoroughly and extract key claims, evidence, and legal arguments
2. Evaluate the strength and validity of evidence from both parties
3. Identify relevant legal principles, laws, and precedents that apply
4. Provide a comprehensive judicial recommendation based on your analysis

Please provide a thorough analysis considering:
- Contractual obligations and their interpretation
- Quality and credibility of evidence
- Legal precedents and applicable laws
- Fairness and equity considerations
- Potential remedies and resolutions"""


@dataclass(frozen=True, slots=True)
class SourceDocument:
    """Decoded document text with the party that submitted it."""

    name: str
    text: str
    party: str = UNKNOWN_PARTY


class NarrativeGenerator(Protocol):
    """Produces the judicial narrative for a case brief."""

    def __call__(self, brief: str) -> str:
        ...


def analyze_documents(documents: Iterable[SourceDocument]) -> list[DocumentReport]:
    return [
        DocumentReport(
            document_name=doc.name,
            party=doc.party or UNKNOWN_PARTY,
            analysis=analyze_document(doc.text, doc.name),
        )
        for doc in documents
    ]


def party_summary(reports: Iterable[DocumentReport]) -> str:
    """Flatten a party's analyses into text for comparison and prompting."""
    lines = []
    for report in reports:
        analysis = report.analysis
        lines.append(f"Document: {report.document_name} ({analysis.document_type.value})")
        lines.extend(f"Party: {party}" for party in analysis.parties)
        lines.extend(f"Key point: {point}" for point in analysis.key_points)
        lines.extend(f"Claim: {claim}" for claim in analysis.claims)
        lines.extend(f"Evidence: {item}" for item in analysis.evidence)
    return "\n".join(lines)


def compare_parties(reports: Sequence[DocumentReport]) -> Optional[ArgumentComparison]:
    """Compare the first two distinct parties, or None with fewer than two."""
    parties = list(dict.fromkeys(report.party for report in reports))
    if len(parties) < 2:
        return None
    first, second = parties[:2]
    return compare_arguments(
        party_summary(r for r in reports if r.party == first),
        party_summary(r for r in reports if r.party == second),
    )


def build_case_brief(
    case_id: str,
    reports: Sequence[DocumentReport],
    comparison: Optional[ArgumentComparison] = None,
) -> str:
    """Build the prompt handed to the narrative generator."""
    sections = [
        "Analyze the following legal dispute case between companies:",
        f"Case ID: {case_id}",
        "Documents submitted:\n"
        + "\n".join(
            f"{idx}. Document: {r.document_name} (Party: {r.party})"
            for idx, r in enumerate(reports, start=1)
        ),
    ]

    for party in dict.fromkeys(r.party for r in reports):
        summary = party_summary(r for r in reports if r.party == party)
        sections.append(f"Extracted analysis for {party}:\n{summary}")

    if comparison is not None:
        sections.append(
            "Comparison of positions:\n"
            + "\n".join(f"- Conflict: {point}" for point in comparison.conflicting_points)
            + ("\n" if comparison.conflicting_points else "")
            + f"- Party one strengths: {', '.join(comparison.party_one_strengths)}\n"
            + f"- Party two strengths: {', '.join(comparison.party_two_strengths)}"
        )

    sections.append(BRIEF_TASKS)
    return "\n\n".join(sections)


class AnalysisPipeline:
    """Runs a whole case through extraction, narration and synthesis."""

    def __init__(self, narrator: NarrativeGenerator):
        self._narrator = narrator

    def run(self, case_id: str, documents: Sequence[SourceDocument]) -> CaseAssessment:
        logger.info("Starting analysis for case %s (%d documents)", case_id, len(documents))

        reports = analyze_documents(documents)
        comparison = compare_parties(reports)
        brief = build_case_brief(case_id, reports, comparison)

        narrative = self._narrator(brief)
        verdict = synthesize_verdict(narrative)

        logger.info("Case %s analyzed: verdict=%r", case_id, verdict.verdict)
        return CaseAssessment(
            case_id=case_id,
            documents=reports,
            comparison=comparison,
            verdict=verdict,
        )


__all__ = [
    "AnalysisPipeline",
    "NarrativeGenerator",
    "SourceDocument",
    "analyze_documents",
    "build_case_brief",
    "compare_parties",
    "party_summary",
]
