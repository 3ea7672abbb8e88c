"""OpenAI narrative generator for dispute cases.

Four chained chat stages (document analysis, evidence evaluation, legal
advice, judicial recommendation). Each stage sees the case brief plus the
previous stage's output; the stage outputs are concatenated under markdown
headings into one narrative for the verdict synthesizer.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from openai import (
    APIConnectionError,
    APITimeoutError,
    AuthenticationError,
    BadRequestError,
    InternalServerError,
    OpenAI,
    RateLimitError,
)
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

LLM_MODEL = os.environ.get("LLM_MODEL", os.environ.get("MODEL_NAME", "gpt-4o-mini"))
LLM_MAX_CHARS = int(os.environ.get("LLM_MAX_CHARS", "120000"))
LLM_TIMEOUT_S = int(os.environ.get("LLM_TIMEOUT_S", "60"))
LLM_MAX_RETRIES = int(os.environ.get("LLM_MAX_RETRIES", "3"))

RETRYABLE_ERRORS = (
    RateLimitError,
    APIConnectionError,
    APITimeoutError,
    InternalServerError,
)


@dataclass(frozen=True, slots=True)
class Stage:
    name: str
    role: str
    description: str
    objective: str
    temperature: float
    instructions: str = ""


JUDICIAL_OUTPUT_FORMAT = """Structure your answer with these labeled sections:

Final Decision:
One or two sentences stating the recommended outcome (e.g. "The court finds ...").

Orders:
- One bullet per order the court should issue

Remedies:
- One bullet per remedy or resolution available to the parties

Confidence: High, Medium or Low - one sentence explaining the evidentiary basis"""

STAGES: tuple[Stage, ...] = (
    Stage(
        name="DocumentAnalyzer",
        role="Legal Document Analyst",
        description=(
            "Extracts and analyzes key information from legal documents including "
            "parties, claims, evidence, and legal arguments"
        ),
        objective="Analyze legal documents and extract key information",
        temperature=0.3,
    ),
    Stage(
        name="EvidenceEvaluator",
        role="Evidence Assessment Specialist",
        description=(
            "Evaluates the strength and validity of evidence presented by both parties, "
            "identifies supporting and contradicting evidence"
        ),
        objective="Assess evidence quality and credibility",
        temperature=0.3,
    ),
    Stage(
        name="LegalAdvisor",
        role="Legal Precedent and Law Specialist",
        description=(
            "Provides legal context, relevant laws, precedents, and contractual "
            "interpretation for the dispute"
        ),
        objective="Provide legal context and applicable laws",
        temperature=0.3,
    ),
    Stage(
        name="JudicialRecommender",
        role="Judicial Decision Recommender",
        description=(
            "Synthesizes all analyses to provide a balanced judicial recommendation "
            "based on evidence, law, and fairness principles"
        ),
        objective="Generate balanced judicial recommendations",
        temperature=0.4,
        instructions=JUDICIAL_OUTPUT_FORMAT,
    ),
)


class NarrativeError(RuntimeError):
    """Raised when the narrative cannot be generated."""


_client: Optional[OpenAI] = None


def _get_client() -> OpenAI:
    global _client
    if _client is None:
        _client = OpenAI(timeout=LLM_TIMEOUT_S)
    return _client


def _truncate_text(text: str, max_chars: int) -> str:
    """Cut to max_chars, backing up to a sentence end if that keeps 80%."""
    if len(text) <= max_chars:
        return text

    truncated = text[:max_chars]
    last_period = truncated.rfind(".")
    if last_period > max_chars * 0.8:
        truncated = truncated[: last_period + 1]
    return truncated


def _system_prompt(stage: Stage) -> str:
    prompt = (
        f"You are the {stage.role}. {stage.description}.\n"
        f"Objective: {stage.objective}."
    )
    if stage.instructions:
        prompt = f"{prompt}\n\n{stage.instructions}"
    return prompt


def _user_prompt(brief: str, previous: Optional[tuple[Stage, str]]) -> str:
    if previous is None:
        return brief
    stage, output = previous
    return f"{brief}\n\nAnalysis from the {stage.role}:\n\n{output}"


def _make_retry_decorator():
    return retry(
        retry=retry_if_exception_type(RETRYABLE_ERRORS),
        stop=stop_after_attempt(LLM_MAX_RETRIES),
        wait=wait_exponential(multiplier=1, min=1, max=60),
        reraise=True,
    )


def _call_stage(client: OpenAI, stage: Stage, content: str) -> str:
    response = client.chat.completions.create(
        model=LLM_MODEL,
        temperature=stage.temperature,
        messages=[
            {"role": "system", "content": _system_prompt(stage)},
            {"role": "user", "content": content},
        ],
    )
    output = response.choices[0].message.content
    if not output or not output.strip():
        raise NarrativeError(f"Empty response from {stage.name}")
    return output.strip()


def generate_narrative(brief: str, client: Optional[OpenAI] = None) -> str:
    """Run the four stages over a case brief.

    Args:
        brief: Case brief built by the analysis pipeline.
        client: Optional OpenAI client (tests). Defaults to a shared lazy client.

    Returns:
        The stage outputs, each under a ``## <stage name>`` heading.

    Raises:
        NarrativeError: On any failure (API, empty output, exhausted retries).
    """
    if not brief or not brief.strip():
        raise NarrativeError("Empty case brief provided")

    actual_client = client if client is not None else _get_client()
    brief = _truncate_text(brief, LLM_MAX_CHARS)
    call_stage = _make_retry_decorator()(_call_stage)

    sections: list[str] = []
    previous: Optional[tuple[Stage, str]] = None
    for stage in STAGES:
        logger.info("Running narrative stage %s", stage.name)
        try:
            output = call_stage(actual_client, stage, _user_prompt(brief, previous))
        except NarrativeError:
            raise
        except RETRYABLE_ERRORS as e:
            raise NarrativeError(
                f"{stage.name}: API error after {LLM_MAX_RETRIES} retries: {e}"
            ) from e
        except (AuthenticationError, BadRequestError) as e:
            raise NarrativeError(f"{stage.name}: non-retryable API error: {e}") from e
        except Exception as e:
            raise NarrativeError(f"{stage.name}: unexpected error: {e}") from e

        sections.append(f"## {stage.name}\n\n{output}")
        previous = (stage, output)

    narrative = "\n\n".join(sections)
    logger.info("Narrative generated: %d chars", len(narrative))
    return narrative


__all__ = ["STAGES", "NarrativeError", "Stage", "generate_narrative"]
