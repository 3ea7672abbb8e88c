"""Temporal workflow for case analysis.

extract_case_documents -> generate_narrative -> store_verdict
"""

from datetime import timedelta

from temporalio import workflow
from temporalio.common import RetryPolicy
from temporalio.exceptions import ActivityError

with workflow.unsafe.imports_passed_through():
    from worker.activities import (
        extract_case_documents,
        generate_narrative,
        mark_case_failed,
        store_verdict,
    )

# Bad input: retrying cannot help.
DOCUMENT_ERRORS = [
    "CaseNotFoundError",
    "EmptyCaseError",
    "UnsupportedDocumentError",
    "DocumentTooLargeError",
    "DocumentDecodeError",
    "PDFValidationError",
    "PDFParseError",
]


@workflow.defn
class CaseAnalysisWorkflow:
    """Analyze all documents of a case and record a verdict.

    A stable verdict_id is drawn at start so store_verdict retries never
    create duplicate verdicts. A failure in any step marks the case failed
    before the workflow fails, so no case is left in analyzing.
    """

    @workflow.run
    async def run(self, case_id: str) -> dict:
        verdict_id = str(workflow.uuid4())
        workflow.logger.info("Starting case analysis for %s, verdict_id=%s", case_id, verdict_id)

        try:
            extracted = await workflow.execute_activity(
                extract_case_documents,
                case_id,
                start_to_close_timeout=timedelta(minutes=5),
                retry_policy=RetryPolicy(
                    maximum_attempts=2,
                    non_retryable_error_types=DOCUMENT_ERRORS,
                ),
            )
            workflow.logger.info(
                "Extracted %d documents for case %s", len(extracted["documents"]), case_id
            )

            narrative = await workflow.execute_activity(
                generate_narrative,
                args=[case_id, extracted["brief"]],
                start_to_close_timeout=timedelta(minutes=5),
                retry_policy=RetryPolicy(
                    maximum_attempts=3,
                    initial_interval=timedelta(seconds=2),
                    backoff_coefficient=2.0,
                    maximum_interval=timedelta(seconds=30),
                ),
            )

            verdict = await workflow.execute_activity(
                store_verdict,
                args=[verdict_id, case_id, extracted, narrative],
                start_to_close_timeout=timedelta(minutes=1),
                retry_policy=RetryPolicy(maximum_attempts=3),
            )
        except ActivityError as e:
            message = str(e.cause or e)
            await workflow.execute_activity(
                mark_case_failed,
                args=[case_id, message],
                start_to_close_timeout=timedelta(minutes=1),
                retry_policy=RetryPolicy(maximum_attempts=3),
            )
            raise

        workflow.logger.info("Case analysis completed for %s", case_id)

        return {
            "status": "completed",
            "case_id": case_id,
            "verdict_id": verdict_id,
            "verdict": verdict["verdict"],
        }


__all__ = ["CaseAnalysisWorkflow"]
