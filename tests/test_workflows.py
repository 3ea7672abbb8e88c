"""Tests for Temporal workflows (CaseAnalysisWorkflow)."""

from __future__ import annotations

import re
from uuid import uuid4

import pytest
from temporalio import activity
from temporalio.client import WorkflowFailureError
from temporalio.exceptions import ApplicationError
from temporalio.testing import WorkflowEnvironment
from temporalio.worker import Worker

from worker.workflows import CaseAnalysisWorkflow

# UUID v4 pattern for validation
UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

EXTRACTED = {
    "brief": "Case ID: case-123",
    "documents": [
        {"documentName": "complaint.txt", "party": "Acme Corp", "analysis": {}},
        {"documentName": "answer.txt", "party": "Beta LLC", "analysis": {}},
    ],
    "comparison": None,
}
NARRATIVE = "## JudicialRecommender\n\nThe court finds that Beta LLC breached the supply contract."

# Track activity calls for verification
activity_calls: list[tuple[str, tuple]] = []


@activity.defn(name="extract_case_documents")
async def tracking_extract(case_id: str) -> dict:
    activity_calls.append(("extract_case_documents", (case_id,)))
    return EXTRACTED


@activity.defn(name="generate_narrative")
async def tracking_narrative(case_id: str, brief: str) -> str:
    activity_calls.append(("generate_narrative", (case_id, brief)))
    return NARRATIVE


@activity.defn(name="store_verdict")
async def tracking_store_verdict(verdict_id: str, case_id: str, extracted: dict, narrative: str) -> dict:
    activity_calls.append(("store_verdict", (verdict_id, case_id, extracted, narrative)))
    return {"verdict": "The court finds that Beta LLC breached the supply contract."}


@activity.defn(name="mark_case_failed")
async def tracking_mark_failed(case_id: str, message: str) -> None:
    activity_calls.append(("mark_case_failed", (case_id, message)))


@activity.defn(name="extract_case_documents")
async def failing_extract(case_id: str) -> dict:
    activity_calls.append(("extract_case_documents", (case_id,)))
    raise ApplicationError(f"Case {case_id} has no documents", type="EmptyCaseError")


@activity.defn(name="generate_narrative")
async def failing_narrative(case_id: str, brief: str) -> str:
    activity_calls.append(("generate_narrative", (case_id, brief)))
    raise ApplicationError("JudicialRecommender: non-retryable API error", non_retryable=True)


@activity.defn(name="store_verdict")
async def failing_store_verdict(verdict_id: str, case_id: str, extracted: dict, narrative: str) -> dict:
    activity_calls.append(("store_verdict", (verdict_id, case_id, extracted, narrative)))
    raise ApplicationError("verdicts bucket unavailable", non_retryable=True)


async def _run(activities, case_id="case-123"):
    async with await WorkflowEnvironment.start_time_skipping() as env:
        async with Worker(
            env.client,
            task_queue="test-queue",
            workflows=[CaseAnalysisWorkflow],
            activities=activities,
        ):
            return await env.client.execute_workflow(
                CaseAnalysisWorkflow.run,
                case_id,
                id=f"test-workflow-{uuid4()}",
                task_queue="test-queue",
            )


class TestCaseAnalysisWorkflow:
    """Tests for CaseAnalysisWorkflow."""

    @pytest.fixture(autouse=True)
    def reset_activity_calls(self):
        activity_calls.clear()

    @pytest.mark.asyncio
    async def test_workflow_happy_path(self):
        result = await _run(
            [tracking_extract, tracking_narrative, tracking_store_verdict, tracking_mark_failed]
        )

        assert result["status"] == "completed"
        assert result["case_id"] == "case-123"
        assert UUID_PATTERN.match(result["verdict_id"])
        assert result["verdict"] == "The court finds that Beta LLC breached the supply contract."

    @pytest.mark.asyncio
    async def test_workflow_activity_call_sequence(self):
        result = await _run(
            [tracking_extract, tracking_narrative, tracking_store_verdict, tracking_mark_failed]
        )

        assert [name for name, _ in activity_calls] == [
            "extract_case_documents",
            "generate_narrative",
            "store_verdict",
        ]
        assert activity_calls[1][1] == ("case-123", "Case ID: case-123")

        verdict_id, case_id, extracted, narrative = activity_calls[2][1]
        assert verdict_id == result["verdict_id"]
        assert case_id == "case-123"
        assert extracted == EXTRACTED
        assert narrative == NARRATIVE

    @pytest.mark.asyncio
    async def test_document_error_marks_case_failed(self):
        with pytest.raises(WorkflowFailureError):
            await _run([failing_extract, tracking_narrative, tracking_store_verdict, tracking_mark_failed])

        names = [name for name, _ in activity_calls]
        # Non-retryable: a single extraction attempt
        assert names == ["extract_case_documents", "mark_case_failed"]
        case_id, message = activity_calls[1][1]
        assert case_id == "case-123"
        assert "no documents" in message

    @pytest.mark.asyncio
    async def test_narrative_failure_marks_case_failed(self):
        with pytest.raises(WorkflowFailureError):
            await _run([tracking_extract, failing_narrative, tracking_store_verdict, tracking_mark_failed])

        names = [name for name, _ in activity_calls]
        assert names == ["extract_case_documents", "generate_narrative", "mark_case_failed"]
        assert "store_verdict" not in names

    @pytest.mark.asyncio
    async def test_store_failure_marks_case_failed(self):
        with pytest.raises(WorkflowFailureError):
            await _run([tracking_extract, tracking_narrative, failing_store_verdict, tracking_mark_failed])

        names = [name for name, _ in activity_calls]
        assert names == [
            "extract_case_documents",
            "generate_narrative",
            "store_verdict",
            "mark_case_failed",
        ]
        case_id, message = activity_calls[-1][1]
        assert case_id == "case-123"
        assert "verdicts bucket unavailable" in message
