"""Logging configuration shared by the API and the worker."""

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Third-party loggers that are chatty at INFO.
_QUIET_LOGGERS = ("httpx", "pdfminer", "temporalio.activity")


def setup_logging(level: str | None = None) -> None:
    """Configure root logging from ``LOG_LEVEL`` (default INFO)."""
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
