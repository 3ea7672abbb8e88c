"""Tests for the staged narrative generator."""

from unittest.mock import MagicMock, Mock

import pytest
from openai import AuthenticationError, RateLimitError

from worker.narrative import (
    LLM_MAX_CHARS,
    LLM_MAX_RETRIES,
    LLM_MODEL,
    STAGES,
    NarrativeError,
    _system_prompt,
    _truncate_text,
    _user_prompt,
    generate_narrative,
)

BRIEF = "Case ID: case-1\n\n1. Document: complaint.txt (Party: Acme Corp)"


def create_mock_response(content):
    """Create a mock OpenAI chat completion response."""
    mock_message = Mock()
    mock_message.content = content

    mock_choice = Mock()
    mock_choice.message = mock_message

    mock_response = Mock()
    mock_response.choices = [mock_choice]
    return mock_response


def create_mock_client(outputs=None, side_effect=None):
    """Mock client answering each stage in turn."""
    mock_client = MagicMock()
    if side_effect is not None:
        mock_client.chat.completions.create.side_effect = side_effect
    else:
        outputs = outputs or [f"Output of stage {i}." for i in range(len(STAGES))]
        mock_client.chat.completions.create.side_effect = [create_mock_response(o) for o in outputs]
    return mock_client


def _rate_limited():
    return RateLimitError(message="Rate limited", response=Mock(status_code=429), body=None)


class TestConfiguration:
    def test_defaults(self):
        assert LLM_MODEL == "gpt-4o-mini"
        assert LLM_MAX_CHARS == 120000
        assert LLM_MAX_RETRIES == 3

    def test_stage_chain(self):
        assert [s.name for s in STAGES] == [
            "DocumentAnalyzer",
            "EvidenceEvaluator",
            "LegalAdvisor",
            "JudicialRecommender",
        ]
        assert [s.temperature for s in STAGES] == [0.3, 0.3, 0.3, 0.4]


class TestPrompts:
    def test_final_stage_asks_for_labeled_sections(self):
        prompt = _system_prompt(STAGES[-1])
        assert "Final Decision:" in prompt
        assert "Orders:" in prompt
        assert "Confidence:" in prompt
        assert "Orders:" not in _system_prompt(STAGES[0])

    def test_user_prompt_chains_previous_output(self):
        assert _user_prompt(BRIEF, None) == BRIEF
        prompt = _user_prompt(BRIEF, (STAGES[0], "Parties identified."))
        assert prompt.startswith(BRIEF)
        assert "Analysis from the Legal Document Analyst:\n\nParties identified." in prompt


class TestTruncateText:
    def test_short_text_unchanged(self):
        assert _truncate_text("Short text", 100) == "Short text"

    def test_cut_at_sentence_end(self):
        text = "x" * 90 + ". " + "y" * 100
        assert _truncate_text(text, 100) == "x" * 90 + "."

    def test_hard_cut_without_late_period(self):
        text = "A. " + "y" * 200
        assert len(_truncate_text(text, 100)) == 100


class TestGenerateNarrative:
    def test_runs_all_stages_in_order(self):
        mock_client = create_mock_client()

        narrative = generate_narrative(BRIEF, client=mock_client)

        assert mock_client.chat.completions.create.call_count == len(STAGES)
        for stage, output in zip(STAGES, (f"Output of stage {i}." for i in range(len(STAGES)))):
            assert f"## {stage.name}\n\n{output}" in narrative
        assert narrative.index("## DocumentAnalyzer") < narrative.index("## JudicialRecommender")

        calls = mock_client.chat.completions.create.call_args_list
        assert calls[0].kwargs["model"] == LLM_MODEL
        assert calls[0].kwargs["messages"][1]["content"] == BRIEF
        assert "Output of stage 0." in calls[1].kwargs["messages"][1]["content"]
        assert calls[3].kwargs["temperature"] == 0.4

    @pytest.mark.parametrize("brief", ["", "   "])
    def test_empty_brief(self, brief):
        with pytest.raises(NarrativeError, match="Empty case brief"):
            generate_narrative(brief, client=MagicMock())

    def test_empty_stage_output(self):
        mock_client = create_mock_client(outputs=["ok", "  ", "x", "y"])

        with pytest.raises(NarrativeError, match="Empty response from EvidenceEvaluator"):
            generate_narrative(BRIEF, client=mock_client)

    def test_authentication_error_not_retried(self):
        mock_client = create_mock_client(
            side_effect=AuthenticationError(
                message="Invalid API key",
                response=Mock(status_code=401),
                body=None,
            )
        )

        with pytest.raises(NarrativeError, match="non-retryable API error"):
            generate_narrative(BRIEF, client=mock_client)

        assert mock_client.chat.completions.create.call_count == 1

    def test_rate_limit_error_retried(self):
        mock_client = create_mock_client(side_effect=_rate_limited())

        with pytest.raises(NarrativeError, match="API error after"):
            generate_narrative(BRIEF, client=mock_client)

        assert mock_client.chat.completions.create.call_count == LLM_MAX_RETRIES

    def test_retry_succeeds_on_second_attempt(self):
        responses = [create_mock_response(f"Stage {i} done.") for i in range(len(STAGES))]
        mock_client = create_mock_client(side_effect=[_rate_limited(), *responses])

        narrative = generate_narrative(BRIEF, client=mock_client)

        assert "## JudicialRecommender\n\nStage 3 done." in narrative
        assert mock_client.chat.completions.create.call_count == len(STAGES) + 1

    def test_unexpected_error_wrapped(self):
        mock_client = create_mock_client(side_effect=KeyError("choices"))

        with pytest.raises(NarrativeError, match="DocumentAnalyzer: unexpected error"):
            generate_narrative(BRIEF, client=mock_client)
