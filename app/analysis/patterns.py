"""Pattern catalog shared by the document extractor and verdict synthesizer.

Pure data plus matching helpers. Every pattern is compiled case-insensitive
and runs over the whole text. No helper raises on a missing match: absence
is an empty list or None.
"""

from __future__ import annotations

import re
from typing import Callable, Iterable, Optional, Sequence

from app.schemas.domain import DocumentType

Rule = tuple[re.Pattern[str], Callable[[re.Match[str], str], Optional[str]]]

_I = re.IGNORECASE
_IM = re.IGNORECASE | re.MULTILINE

# --------------------
# Document features
# --------------------

# Checked in this order; the first category with a hit wins.
DOCUMENT_TYPE_KEYWORDS: tuple[tuple[DocumentType, tuple[str, ...]], ...] = (
    (DocumentType.complaint, ("complaint", "petition")),
    (DocumentType.response, ("response", "answer")),
    (DocumentType.contract, ("contract", "agreement")),
    (DocumentType.evidence, ("evidence", "exhibit")),
)

LEGAL_KEYWORDS: tuple[str, ...] = (
    "breach",
    "violated",
    "damages",
    "compensation",
    "liable",
    "obligation",
    "failed",
    "duty",
    "negligent",
    "contract",
)

# A name starts with a capital letter and runs lazily until a line break,
# "v."/"vs.", a comma, semicolon, colon, parenthesis or sentence-ending period.
_NAME = r"((?-i:[A-Z])[A-Za-z0-9&.,'\- ]+?)"
_NAME_END = r"(?=[ \t]*(?:\n|\bvs?\.|[,;:(]|\.(?:\s|$)|$))"

PARTY_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\b(?:plaintiff|claimant|petitioner)s?[:\s]+" + _NAME + _NAME_END, _I),
    re.compile(r"\b(?:defendant|respondent)s?[:\s]+" + _NAME + _NAME_END, _I),
    re.compile(r"\bbetween\s+" + _NAME + r"\s+and\s+" + _NAME + _NAME_END, _I),
)

EVIDENCE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\b(?:exhibit|evidence|document)[:\s]+((?-i:[A-Z0-9])[^\n.]+)", _I),
    re.compile(r"\b(?:attached|enclosed|herewith)[:\s]+((?-i:[A-Z])[^\n.]+)", _I),
)

CLAIM_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\b(?:claim|allege|assert)s?[:\s]+([^.!?]+[.!?])", _I),
    re.compile(
        r"\b(?:plaintiff|claimant|defendant|respondent)\s+(?:claims|alleges|asserts)\s+([^.!?]+[.!?])",
        _I,
    ),
)

# --------------------
# Verdict narrative
# --------------------

COURT_ACTION = re.compile(
    r"\b(?:(?:the|this)\s+)?court\s+(?:hereby\s+)?"
    r"(?:finds|rules|orders|concludes|determines)\b[^.!?\n]*[.!?]?",
    _I,
)

IN_FAVOR_OF = re.compile(
    r"[^.!?\n]*\b(?:rule|ruling|rules|ruled)\s+in\s+favou?r\s+of\b[^.!?\n]*[.!?]?",
    _I,
)

_OUTCOME = (
    r"(?:partially\s+grant(?:ed|s)?|grant(?:ed|s)?(?:\s+in\s+part)?"
    r"|den(?:y|ies|ied)(?:\s+in\s+part)?)"
)
_SUBJECT = r"(?:claims?|relief|motions?|requests?)"

GRANT_DENY = re.compile(
    rf"\b{_OUTCOME}\b[^.!?\n]{{0,80}}?\b{_SUBJECT}\b"
    rf"|\b{_SUBJECT}\b[^.!?\n]{{0,80}}?\b{_OUTCOME}\b",
    _I,
)

DENIAL = re.compile(r"\bden(?:y|ies|ied)\b", _I)
PARTIAL_MARKERS: tuple[str, ...] = ("partial", "in part")

VERDICT_KEYWORDS: tuple[str, ...] = (
    "court",
    "ruling",
    "decision",
    "granted",
    "denied",
    "favor",
    "dismiss",
    "order",
    "conclude",
    "find",
)

DIRECTIVE = re.compile(r"[^.!?\n]*\b(?:shall|must|should|ordered\s+to)\b[^.!?\n]*", _I)

CONFIDENCE_LINE = re.compile(
    r"^[ \t]*(?:[-•*#>]+[ \t]*)?(?:\*\*|__)?[ \t]*"
    r"confidence(?:[ \t]+(?:level|rating|assessment))?"
    r"[ \t]*(?:\*\*|__)?[ \t]*:[ \t]*(?:\*\*|__)?[ \t]*(?P<value>[^\n]*\w[^\n]*)",
    _IM,
)

HIGH_CONFIDENCE_MARKERS: tuple[str, ...] = (
    "strong evidence",
    "clear breach",
    "unambiguous",
    "definitive",
)
LOW_CONFIDENCE_MARKERS: tuple[str, ...] = (
    "insufficient",
    "unclear",
    "requires further",
    "disputed facts",
)

BULLET = re.compile(r"^[ \t]*(?:[-•✓✔]|\d+\.)[ \t]+(?P<item>.+?)[ \t]*$", re.MULTILINE)

_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_NARRATIVE_SENTENCE = re.compile(r"[^.!?\n]+[.!?]*")
_SENTENCE_BOUNDARY = re.compile(r"[.!?\n]")
_MARKUP_CHARS = "#*->•✓✔_ \t"


def section_pattern(*names: str, labeled_only: bool = False) -> re.Pattern[str]:
    """Compile a pattern capturing the body of a labeled section.

    A heading is a line holding one of ``names`` (optionally preceded by up
    to two capitalized words, a markdown ``#`` prefix, bold markers or a
    number), followed by a colon or the end of the line. The body runs until
    the next heading-like line or the end of the text.

    With ``labeled_only`` a heading needs a ``#`` prefix or a trailing colon,
    and no leading words are allowed.
    """
    name = r"(?:" + "|".join(names) + r")"
    tail = r"[ \t]*(?:\*\*|__)?[ \t]*(?::[ \t]*(?:\*\*|__)?|$)"
    if labeled_only:
        heading = (
            r"^[ \t]*(?:#{1,6}[ \t]*(?:\*\*|__)?[ \t]*" + name + tail
            + r"|(?:\*\*|__)?[ \t]*" + name
            + r"[ \t]*(?:\*\*|__)?[ \t]*:[ \t]*(?:\*\*|__)?)"
        )
    else:
        heading = (
            r"^[ \t]*(?:#{1,6}[ \t]*)?(?:\*\*|__)?[ \t]*(?:\d+\.[ \t]*)?"
            r"(?:(?-i:[A-Z])[A-Za-z]*[ \t]+){0,2}"
            + name + tail
        )
    body = r"[ \t]*\n?(?P<body>.*?)"
    end = (
        r"(?=\n[ \t]*#{1,6}[ \t]"
        r"|\n[ \t]*(?:\*\*|__)[^*_\n]{1,60}(?:\*\*|__)[ \t]*:?[ \t]*(?:\*\*|__)?[ \t]*(?:\n|$)"
        r"|\n[ \t]*[A-Za-z][A-Za-z /&-]{1,50}:[ \t]*(?:\n|$)"
        r"|\Z)"
    )
    return re.compile(heading + body + end, _IM | re.DOTALL)


DECISION_SECTION = section_pattern(r"final[ \t]+decision", r"conclusions?")
ORDERS_SECTION = section_pattern(r"orders?")
REMEDIES_SECTION = section_pattern(r"remed(?:y|ies)")
CONFIDENCE_SECTION = section_pattern(r"confidence(?:[ \t]+level)?", labeled_only=True)


# --------------------
# Matching primitives
# --------------------


def find_first(text: str, patterns: Sequence[re.Pattern[str]]) -> Optional[re.Match[str]]:
    """Return the first non-empty match, trying ``patterns`` in order.

    An earlier pattern wins even if a later one would also match.
    """
    for pattern in patterns:
        match = pattern.search(text)
        if match and match.group(0).strip():
            return match
    return None


def apply_first(text: str, rules: Sequence[Rule]) -> Optional[str]:
    """Evaluate ``(pattern, handler)`` rules in order, first result wins.

    A rule whose pattern does not match, or whose handler returns an empty
    value, hands over to the next rule.
    """
    for pattern, handler in rules:
        match = pattern.search(text)
        if match is None:
            continue
        result = handler(match, text)
        if result:
            return result
    return None


def find_all(text: str, pattern: re.Pattern[str]) -> list[str]:
    """Return every match in document order, capture groups flattened.

    Patterns without groups contribute the whole match. Empty groups are
    skipped; values are stripped but not de-duplicated or truncated.
    """
    found: list[str] = []
    for match in pattern.finditer(text):
        groups = match.groups() or (match.group(0),)
        for group in groups:
            if group and group.strip():
                found.append(group.strip())
    return found


def contains_any(text: str, keywords: Iterable[str]) -> Optional[str]:
    """Return the first keyword contained in ``text`` (case-insensitive)."""
    lowered = text.lower()
    for keyword in keywords:
        if keyword in lowered:
            return keyword
    return None


def dedupe(items: Iterable[str], limit: Optional[int] = None) -> list[str]:
    """Drop repeated strings keeping first occurrence, then cap at ``limit``."""
    unique = list(dict.fromkeys(items))
    return unique if limit is None else unique[:limit]


def split_sentences(text: str) -> list[str]:
    """Split on runs of terminal punctuation; punctuation is dropped."""
    return [part.strip() for part in _SENTENCE_SPLIT.split(text) if part.strip()]


def narrative_sentences(text: str) -> list[str]:
    """Sentence-like runs ending at terminal punctuation or a line break.

    Terminal punctuation is kept; leading markdown and bullet markers are
    removed.
    """
    sentences = []
    for raw in _NARRATIVE_SENTENCE.findall(text):
        sentence = strip_markup(raw)
        if sentence:
            sentences.append(sentence)
    return sentences


def sentence_around(text: str, start: int) -> str:
    """Return the sentence that contains position ``start``, without markup."""
    begin = max(text.rfind(mark, 0, start) for mark in ".!?\n") + 1
    boundary = _SENTENCE_BOUNDARY.search(text, start)
    stop = boundary.end() if boundary else len(text)
    return strip_markup(text[begin:stop])


def strip_markup(value: str) -> str:
    """Trim whitespace, markdown emphasis and leading bullet markers."""
    return value.strip().lstrip(_MARKUP_CHARS).replace("**", "").strip()


def section_body(text: str, pattern: re.Pattern[str]) -> Optional[str]:
    """Body of the first section matched by ``pattern``, or None."""
    match = pattern.search(text)
    if match is None:
        return None
    return match.group("body").strip() or None


def bullet_items(body: str, min_length: int = 10) -> list[str]:
    """Bulleted or numbered lines of ``body`` with their marker removed."""
    items = []
    for match in BULLET.finditer(body):
        item = match.group("item").replace("**", "").strip()
        if len(item) > min_length:
            items.append(item)
    return items


__all__ = [
    "BULLET",
    "CLAIM_PATTERNS",
    "CONFIDENCE_LINE",
    "CONFIDENCE_SECTION",
    "COURT_ACTION",
    "DECISION_SECTION",
    "DENIAL",
    "DIRECTIVE",
    "DOCUMENT_TYPE_KEYWORDS",
    "EVIDENCE_PATTERNS",
    "GRANT_DENY",
    "HIGH_CONFIDENCE_MARKERS",
    "IN_FAVOR_OF",
    "LEGAL_KEYWORDS",
    "LOW_CONFIDENCE_MARKERS",
    "ORDERS_SECTION",
    "PARTIAL_MARKERS",
    "PARTY_PATTERNS",
    "REMEDIES_SECTION",
    "VERDICT_KEYWORDS",
    "Rule",
    "apply_first",
    "bullet_items",
    "contains_any",
    "dedupe",
    "find_all",
    "find_first",
    "narrative_sentences",
    "section_body",
    "section_pattern",
    "sentence_around",
    "split_sentences",
    "strip_markup",
]
