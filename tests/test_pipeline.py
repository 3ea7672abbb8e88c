"""Tests for the case analysis pipeline."""

from unittest.mock import MagicMock

from app.analysis.pipeline import (
    AnalysisPipeline,
    SourceDocument,
    analyze_documents,
    build_case_brief,
    compare_parties,
)
from app.analysis.verdict_synthesizer import FALLBACK_VERDICT
from app.schemas.domain import DocumentType

COMPLAINT = SourceDocument(
    name="complaint.txt",
    party="Acme Corp",
    text=(
        "COMPLAINT. Plaintiff: Acme Corp. Defendant: Beta LLC. "
        "Acme alleges Beta breached the supply contract causing $50,000 in damages."
    ),
)
ANSWER = SourceDocument(
    name="answer.txt",
    party="Beta LLC",
    text=(
        "ANSWER. Respondent: Beta LLC. Beta asserts the contract was terminated "
        "before the delivery date and denies any liability for damages."
    ),
)

NARRATIVE = (
    "## JudicialRecommender\n\n"
    "Having reviewed both submissions and the supply agreement in detail:\n\n"
    "The court finds that Beta LLC breached the supply contract.\n\n"
    "Orders:\n"
    "- Beta LLC shall pay $50,000 in damages\n"
    "- Each party bears its own costs\n\n"
    "Confidence: High - delivery records are undisputed\n"
)


def test_analyze_documents_keeps_party_and_order():
    reports = analyze_documents([COMPLAINT, ANSWER])

    assert [r.document_name for r in reports] == ["complaint.txt", "answer.txt"]
    assert [r.party for r in reports] == ["Acme Corp", "Beta LLC"]
    assert reports[0].analysis.document_type == DocumentType.complaint
    assert reports[1].analysis.document_type == DocumentType.response


def test_compare_parties_needs_two_parties():
    reports = analyze_documents([COMPLAINT])
    assert compare_parties(reports) is None

    comparison = compare_parties(analyze_documents([COMPLAINT, ANSWER]))
    assert "Different assessments of damages and liability" in comparison.conflicting_points


def test_case_brief_lists_documents_and_tasks():
    reports = analyze_documents([COMPLAINT, ANSWER])
    brief = build_case_brief("case-1", reports, compare_parties(reports))

    assert "Case ID: case-1" in brief
    assert "1. Document: complaint.txt (Party: Acme Corp)" in brief
    assert "2. Document: answer.txt (Party: Beta LLC)" in brief
    assert "Extracted analysis for Beta LLC:" in brief
    assert "Comparison of positions:" in brief
    assert "Provide a comprehensive judicial recommendation" in brief


def test_run_feeds_brief_to_narrator():
    narrator = MagicMock(return_value=NARRATIVE)

    assessment = AnalysisPipeline(narrator).run("case-1", [COMPLAINT, ANSWER])

    narrator.assert_called_once()
    assert "Case ID: case-1" in narrator.call_args.args[0]
    assert assessment.case_id == "case-1"
    assert len(assessment.documents) == 2
    assert assessment.comparison is not None
    assert assessment.verdict.verdict == "The court finds that Beta LLC breached the supply contract."
    assert assessment.verdict.recommendations == [
        "Beta LLC shall pay $50,000 in damages",
        "Each party bears its own costs",
    ]
    assert assessment.verdict.confidence == "High - delivery records are undisputed"
    assert assessment.verdict.reasoning == NARRATIVE


def test_run_with_short_narrative_falls_back():
    assessment = AnalysisPipeline(lambda brief: "Unavailable.").run("case-2", [COMPLAINT])

    assert assessment.verdict.verdict == FALLBACK_VERDICT
    assert assessment.comparison is None
