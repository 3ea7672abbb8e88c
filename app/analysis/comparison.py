"""Side-by-side comparison of the two parties' analyzed positions."""

from __future__ import annotations

from app.analysis import patterns
from app.schemas.domain import ArgumentComparison

COMPARISON_SUMMARY = "Comparative analysis of both parties positions"
COMPARISON_RECOMMENDATION = (
    "This comparison should be reviewed by the judicial AI agent for final verdict"
)
DEFAULT_STRENGTH = "Standard legal arguments presented"

STRENGTH_MARKERS: tuple[tuple[str, str], ...] = (
    ("evidence", "Strong documentary evidence provided"),
    ("contract", "Clear contractual basis for claims"),
    ("damages", "Quantified damages claimed"),
)

# A topic is in conflict when both parties address it.
CONFLICT_TOPICS: tuple[tuple[tuple[str, ...], str], ...] = (
    (
        ("contract", "obligation", "agreement"),
        "Conflicting interpretations of contractual obligations",
    ),
    (
        ("date", "deadline", "timeline", "delivered", "delay"),
        "Disputed facts regarding timeline of events",
    ),
    (
        ("damages", "liable", "liability", "compensation"),
        "Different assessments of damages and liability",
    ),
)


def party_strengths(analysis: str) -> list[str]:
    strengths = [label for marker, label in STRENGTH_MARKERS if marker in analysis.lower()]
    return strengths or [DEFAULT_STRENGTH]


def conflicting_points(first: str, second: str) -> list[str]:
    """Topics both parties address, in catalog order.

    A topic raised by only one side is not listed, so parties with no
    overlapping topics yield an empty list.
    """
    return [
        label
        for keywords, label in CONFLICT_TOPICS
        if patterns.contains_any(first, keywords) and patterns.contains_any(second, keywords)
    ]


def compare_arguments(first: str, second: str) -> ArgumentComparison:
    """Compare the textual analyses of two parties.

    Args:
        first: Analysis text (or serialized analyses) of the first party.
        second: Analysis text of the second party.

    Returns:
        ArgumentComparison with per-party strengths and shared points of
        conflict.
    """
    return ArgumentComparison(
        summary=COMPARISON_SUMMARY,
        party_one_strengths=party_strengths(first),
        party_two_strengths=party_strengths(second),
        conflicting_points=conflicting_points(first, second),
        recommendation=COMPARISON_RECOMMENDATION,
    )


__all__ = ["compare_arguments", "conflicting_points", "party_strengths"]
