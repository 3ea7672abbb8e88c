"""Verdict synthesis: turn a judicial narrative into a VerdictResult.

The narrative is the aggregated output of the upstream reasoning stages.
Parsing is layered:

1. Fallback gate - narratives of 100 characters or fewer short-circuit to a
   canonical "Further Review Required" result.
2. Verdict statement - an ordered rule chain, first match wins:
   court action > "in favor of" ruling > grant/deny outcome >
   "Final Decision"/"Conclusion" section > best sentence > literal default.
3. Recommendations - "Orders" bullets, topped up from "Remedies" bullets,
   then directive clauses, then a canonical default list; capped at 6.
4. Confidence - labeled line verbatim, else marker containment, else medium.

Unparseable text is never an error: every stage degrades to a documented
default, so the result is always fully populated.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from app.analysis import patterns
from app.schemas.domain import ConfidenceLevel, VerdictResult

logger = logging.getLogger(__name__)

MIN_NARRATIVE_CHARS = 100
MAX_RECOMMENDATIONS = 6
MAX_ORDER_ITEMS = 4
MAX_REMEDY_ITEMS = 3
MIN_RECOMMENDATIONS_BEFORE_REMEDIES = 3
MAX_DIRECTIVES = 4
MIN_DIRECTIVE_CHARS = 15
MAX_DIRECTIVE_CHARS = 200
MAX_OUTCOME_CONTEXT_CHARS = 100
MIN_SECTION_SENTENCE_CHARS = 20
MAX_APPENDED_SENTENCE_CHARS = 120
MIN_FALLBACK_SENTENCE_CHARS = 40

DEFAULT_VERDICT = "Judicial Recommendation Provided"

FALLBACK_VERDICT = "Further Review Required"
FALLBACK_REASONING = (
    "The AI analysis has been completed. The dispute involves complex legal issues that "
    "require detailed examination of the submitted documents. Both parties have presented "
    "their positions, and a thorough evaluation of evidence, contractual obligations, and "
    "applicable laws is needed."
)
FALLBACK_RECOMMENDATIONS: tuple[str, ...] = (
    "Conduct detailed review of all submitted evidence",
    "Verify authenticity of documents",
    "Consider mediation or settlement options",
    "Consult legal precedents for similar cases",
    "Ensure compliance with jurisdictional requirements",
)

DEFAULT_RECOMMENDATIONS: tuple[str, ...] = (
    "Review all submitted documents carefully",
    "Consider contractual obligations and evidence quality",
    "Consult with legal professionals for final decision",
    "Ensure all parties have been heard fairly",
)


def fallback_verdict() -> VerdictResult:
    """Canonical result for narratives too short to parse."""
    return VerdictResult(
        verdict=FALLBACK_VERDICT,
        reasoning=FALLBACK_REASONING,
        recommendations=list(FALLBACK_RECOMMENDATIONS),
        confidence=ConfidenceLevel.requires_review.label,
        confidence_level=ConfidenceLevel.requires_review,
    )


def synthesize_verdict(narrative_text: str) -> VerdictResult:
    """Parse a judicial narrative into a structured verdict.

    Args:
        narrative_text: Full narrative produced by the reasoning stages.

    Returns:
        VerdictResult whose reasoning is the narrative verbatim, or the
        canonical fallback when the narrative is 100 characters or fewer.
    """
    narrative_text = narrative_text or ""
    if len(narrative_text) <= MIN_NARRATIVE_CHARS:
        logger.info(
            "Narrative too short (%d chars), returning fallback verdict", len(narrative_text)
        )
        return fallback_verdict()

    verdict = extract_verdict(narrative_text)
    recommendations = extract_recommendations(narrative_text)
    confidence, level, note = extract_confidence(narrative_text)

    logger.info(
        "Synthesized verdict: %d chars, %d recommendations, confidence=%s",
        len(verdict),
        len(recommendations),
        level.value,
    )

    return VerdictResult(
        verdict=verdict,
        reasoning=narrative_text,
        recommendations=recommendations,
        confidence=confidence,
        confidence_level=level,
        confidence_note=note,
    )


# --------------------
# Verdict statement
# --------------------


def _matched_sentence(match: re.Match[str], text: str) -> Optional[str]:
    return patterns.strip_markup(match.group(0))


def classify_outcome(span: str) -> str:
    """Label a grant/deny span.

    Partial markers win, then any deny word, then plain GRANTED. A span
    containing both "granted" and "denied" is therefore DENIED.
    """
    if patterns.contains_any(span, patterns.PARTIAL_MARKERS):
        return "PARTIALLY GRANTED"
    if patterns.DENIAL.search(span):
        return "DENIED"
    return "GRANTED"


def _grant_deny(match: re.Match[str], text: str) -> Optional[str]:
    outcome = classify_outcome(match.group(0))
    context = patterns.sentence_around(text, match.start())[:MAX_OUTCOME_CONTEXT_CHARS].rstrip()
    return f"{outcome}: {context}"


def _decision_section(match: re.Match[str], text: str) -> Optional[str]:
    sentences = [
        sentence
        for sentence in patterns.narrative_sentences(match.group("body"))
        if len(sentence) > MIN_SECTION_SENTENCE_CHARS
    ]
    if not sentences:
        return None
    verdict = sentences[0]
    if len(sentences) > 1 and len(sentences[1]) < MAX_APPENDED_SENTENCE_CHARS:
        verdict = f"{verdict} {sentences[1]}"
    return verdict


# Priority order is part of the contract; do not reorder.
VERDICT_RULES: tuple[patterns.Rule, ...] = (
    (patterns.COURT_ACTION, _matched_sentence),
    (patterns.IN_FAVOR_OF, _matched_sentence),
    (patterns.GRANT_DENY, _grant_deny),
    (patterns.DECISION_SECTION, _decision_section),
)


def _best_sentence(text: str) -> Optional[str]:
    candidates = [
        sentence
        for sentence in patterns.narrative_sentences(text)
        if len(sentence) > MIN_FALLBACK_SENTENCE_CHARS
    ]
    for sentence in candidates:
        if patterns.contains_any(sentence, patterns.VERDICT_KEYWORDS):
            return sentence
    return candidates[0] if candidates else None


def extract_verdict(text: str) -> str:
    """Verdict statement by rule priority, never empty."""
    return patterns.apply_first(text, VERDICT_RULES) or _best_sentence(text) or DEFAULT_VERDICT


# --------------------
# Recommendations
# --------------------


def _section_items(text: str, section: re.Pattern[str]) -> list[str]:
    body = patterns.section_body(text, section)
    return patterns.bullet_items(body) if body else []


def _directives(text: str) -> list[str]:
    clauses = [
        patterns.strip_markup(clause)
        for clause in patterns.find_all(text, patterns.DIRECTIVE)
    ]
    return patterns.dedupe(
        (c for c in clauses if MIN_DIRECTIVE_CHARS <= len(c) <= MAX_DIRECTIVE_CHARS),
        MAX_DIRECTIVES,
    )


def extract_recommendations(text: str) -> list[str]:
    """Recommendation list, 1 to 6 items, de-duplicated."""
    recommendations = patterns.dedupe(_section_items(text, patterns.ORDERS_SECTION), MAX_ORDER_ITEMS)

    if len(recommendations) < MIN_RECOMMENDATIONS_BEFORE_REMEDIES:
        remedies = [
            item
            for item in _section_items(text, patterns.REMEDIES_SECTION)
            if item not in recommendations
        ]
        recommendations.extend(patterns.dedupe(remedies, MAX_REMEDY_ITEMS))

    if not recommendations:
        recommendations = _directives(text)

    if not recommendations:
        recommendations = list(DEFAULT_RECOMMENDATIONS)

    return recommendations[:MAX_RECOMMENDATIONS]


# --------------------
# Confidence
# --------------------


# Checked in order against the part of a label before " - ".
LABEL_LEVELS = (
    (re.compile(r"\b(?:human|review)\b", re.I), ConfidenceLevel.requires_review),
    (re.compile(r"\bhigh\b", re.I), ConfidenceLevel.high),
    (re.compile(r"\blow\b", re.I), ConfidenceLevel.low),
)


def _level_from_label(label: str) -> ConfidenceLevel:
    """Classify a label by its leading value, ignoring the explanatory note."""
    head, _, _ = label.partition(" - ")
    for pattern, level in LABEL_LEVELS:
        if pattern.search(head):
            return level
    return ConfidenceLevel.medium


def _labeled_confidence(text: str) -> Optional[str]:
    match = patterns.find_first(text, (patterns.CONFIDENCE_LINE, patterns.CONFIDENCE_SECTION))
    if match is None:
        return None
    value = match.groupdict().get("value") or match.groupdict().get("body") or ""
    lines = [line for line in (patterns.strip_markup(v) for v in value.splitlines()) if line]
    return lines[0] if lines else None


def extract_confidence(text: str) -> tuple[str, ConfidenceLevel, Optional[str]]:
    """Return ``(label, level, note)`` for the narrative."""
    label = _labeled_confidence(text)
    if label:
        _, _, note = label.partition(" - ")
        return label, _level_from_label(label), note.strip() or None

    for markers, level in (
        (patterns.HIGH_CONFIDENCE_MARKERS, ConfidenceLevel.high),
        (patterns.LOW_CONFIDENCE_MARKERS, ConfidenceLevel.low),
    ):
        marker = patterns.contains_any(text, markers)
        if marker:
            position = re.search(re.escape(marker), text, re.IGNORECASE).start()
            note = patterns.sentence_around(text, position)
            return level.label, level, note or None

    return ConfidenceLevel.medium.label, ConfidenceLevel.medium, None


__all__ = [
    "DEFAULT_RECOMMENDATIONS",
    "DEFAULT_VERDICT",
    "FALLBACK_REASONING",
    "FALLBACK_RECOMMENDATIONS",
    "FALLBACK_VERDICT",
    "VERDICT_RULES",
    "classify_outcome",
    "extract_confidence",
    "extract_recommendations",
    "extract_verdict",
    "fallback_verdict",
    "synthesize_verdict",
]
