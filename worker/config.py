"""Worker configuration.

The worker shares storage, database and upload settings with the API
(``app.core.config``); only its own runtime knobs live here.
"""
import os


class WorkerSettings:
    """Temporal worker settings from environment variables."""

    def __init__(self):
        self.TEMPORAL_ADDRESS = os.getenv("TEMPORAL_ADDRESS", "temporal:7233")
        self.TEMPORAL_NAMESPACE = os.getenv("TEMPORAL_NAMESPACE", "default")
        self.WORKER_TASK_QUEUE = os.getenv("WORKER_TASK_QUEUE", "case-analysis-queue")
        self.ACTIVITY_THREADS = int(os.getenv("WORKER_ACTIVITY_THREADS", "4"))

    def __repr__(self):
        return (
            f"WorkerSettings(temporal={self.TEMPORAL_ADDRESS}, "
            f"queue={self.WORKER_TASK_QUEUE}, "
            f"namespace={self.TEMPORAL_NAMESPACE}, threads={self.ACTIVITY_THREADS})"
        )
