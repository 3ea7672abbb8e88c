"""Temporal worker entry point for the case analysis queue."""
import asyncio
import logging
import signal
from concurrent.futures import ThreadPoolExecutor

from temporalio.client import Client
from temporalio.worker import Worker

from app.core.logging import setup_logging
from worker.activities import (
    extract_case_documents,
    generate_narrative,
    mark_case_failed,
    store_verdict,
)
from worker.config import WorkerSettings
from worker.workflows import CaseAnalysisWorkflow

logger = logging.getLogger("worker")

ACTIVITIES = [extract_case_documents, generate_narrative, store_verdict, mark_case_failed]


def _install_signal_handlers(stop_event: asyncio.Event) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except NotImplementedError:  # pragma: no cover - Windows
            signal.signal(sig, lambda *_: stop_event.set())


def build_worker(client: Client, settings: WorkerSettings, executor: ThreadPoolExecutor) -> Worker:
    return Worker(
        client,
        task_queue=settings.WORKER_TASK_QUEUE,
        workflows=[CaseAnalysisWorkflow],
        activities=ACTIVITIES,
        activity_executor=executor,
    )


async def run_worker() -> None:
    """Poll the task queue until SIGINT/SIGTERM."""
    settings = WorkerSettings()
    logger.info("Starting worker: %r", settings)

    client = await Client.connect(settings.TEMPORAL_ADDRESS, namespace=settings.TEMPORAL_NAMESPACE)

    activity_executor = ThreadPoolExecutor(max_workers=settings.ACTIVITY_THREADS)
    worker = build_worker(client, settings, activity_executor)

    stop_event = asyncio.Event()
    _install_signal_handlers(stop_event)

    logger.info("Worker running, polling for tasks...")
    worker_task = asyncio.create_task(worker.run())

    await stop_event.wait()
    logger.info("Shutdown signal received, stopping worker...")

    worker_task.cancel()
    await asyncio.gather(worker_task, return_exceptions=True)
    activity_executor.shutdown(wait=True)
    logger.info("Worker stopped")


def main() -> None:
    setup_logging()
    asyncio.run(run_worker())


if __name__ == "__main__":
    main()
