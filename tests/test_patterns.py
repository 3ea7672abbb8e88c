"""Tests for the pattern catalog and matching primitives."""

import re

import pytest

from app.analysis import patterns


class TestFindFirst:
    def test_earlier_pattern_wins(self):
        text = "alpha beta"
        match = patterns.find_first(text, (re.compile("beta"), re.compile("alpha")))
        assert match.group(0) == "beta"

    def test_returns_none_without_match(self):
        assert patterns.find_first("nothing here", (re.compile("xyz"),)) is None

    def test_skips_empty_matches(self):
        match = patterns.find_first("abc", (re.compile(r"z*"), re.compile(r"b")))
        assert match.group(0) == "b"


class TestApplyFirst:
    def test_handler_returning_none_hands_over(self):
        rules = (
            (re.compile("one"), lambda m, t: None),
            (re.compile("two"), lambda m, t: "second rule"),
        )
        assert patterns.apply_first("one two", rules) == "second rule"

    def test_first_result_wins(self):
        rules = (
            (re.compile("two"), lambda m, t: "first rule"),
            (re.compile("one"), lambda m, t: "second rule"),
        )
        assert patterns.apply_first("one two", rules) == "first rule"

    def test_no_rule_matches(self):
        assert patterns.apply_first("text", ((re.compile("x"), lambda m, t: "x"),)) is None


class TestFindAll:
    def test_groups_are_flattened_in_order(self):
        assert patterns.find_all("a=1 b=2", re.compile(r"(\w)=(\w)")) == ["a", "1", "b", "2"]

    def test_whole_match_without_groups(self):
        assert patterns.find_all("cat hat", re.compile(r"\wat")) == ["cat", "hat"]

    def test_no_dedupe(self):
        assert patterns.find_all("x x", re.compile("x")) == ["x", "x"]


class TestTextHelpers:
    def test_contains_any_is_case_insensitive(self):
        assert patterns.contains_any("Material BREACH", ("damages", "breach")) == "breach"
        assert patterns.contains_any("nothing", ("damages",)) is None

    def test_dedupe_keeps_first_occurrence_and_limit(self):
        assert patterns.dedupe(["a", "b", "a", "c"]) == ["a", "b", "c"]
        assert patterns.dedupe(["a", "b", "a", "c"], 2) == ["a", "b"]

    def test_split_sentences(self):
        assert patterns.split_sentences("One. Two!! Three?") == ["One", "Two", "Three"]

    def test_narrative_sentences_strip_markup(self):
        text = "## Heading\n- First point. Second!"
        assert patterns.narrative_sentences(text) == ["Heading", "First point.", "Second!"]

    def test_sentence_around(self):
        text = "First one. The court agrees here. Last"
        assert patterns.sentence_around(text, text.index("court")) == "The court agrees here."

    def test_strip_markup(self):
        assert patterns.strip_markup("  **- Bold item**  ") == "Bold item"


class TestSections:
    NARRATIVE = (
        "Intro line\n"
        "\n"
        "Orders:\n"
        "- Defendant shall pay $10,000\n"
        "- Plaintiff's claim is denied\n"
        "\n"
        "Remedies:\n"
        "- Mediation between the parties\n"
    )

    def test_section_body_stops_at_next_label(self):
        body = patterns.section_body(self.NARRATIVE, patterns.ORDERS_SECTION)
        assert body == "- Defendant shall pay $10,000\n- Plaintiff's claim is denied"

    def test_markdown_heading_section(self):
        text = "## Final Decision\nThe claim succeeds in full.\n\n## Next\nOther text"
        body = patterns.section_body(text, patterns.DECISION_SECTION)
        assert body == "The claim succeeds in full."

    def test_missing_section(self):
        assert patterns.section_body("no sections here", patterns.REMEDIES_SECTION) is None

    def test_confidence_section_needs_heading_marker(self):
        text = "Summary of the dispute.\nHigh Confidence\nThe evidence is mixed overall."
        assert patterns.section_body(text, patterns.CONFIDENCE_SECTION) is None

    @pytest.mark.parametrize(
        "text",
        [
            "## Confidence\nLow - two invoices are unsigned",
            "**Confidence Level:**\nLow - two invoices are unsigned",
        ],
    )
    def test_confidence_section_headings(self, text):
        assert patterns.section_body(text, patterns.CONFIDENCE_SECTION) == "Low - two invoices are unsigned"

    def test_bullet_items(self):
        body = "- Defendant shall pay\n• Provide an accounting\n3. Numbered order item\n- short"
        assert patterns.bullet_items(body) == [
            "Defendant shall pay",
            "Provide an accounting",
            "Numbered order item",
        ]


class TestPartyPatterns:
    def test_name_must_start_upper_case(self):
        found = patterns.find_all("the plaintiff was late", patterns.PARTY_PATTERNS[0])
        assert found == []

    def test_name_stops_at_versus(self):
        found = patterns.find_all("Plaintiff Acme Corp v. Beta LLC", patterns.PARTY_PATTERNS[0])
        assert found == ["Acme Corp"]
