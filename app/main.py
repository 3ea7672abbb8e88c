"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from temporalio.client import Client as TemporalClient

from app.core.config import settings
from app.core.logging import setup_logging
from app.db import init_db
from app.routes import analysis_router, cases_router, health_router
from app.storage.factory import build_minio_client

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and connect MinIO and Temporal; both may be unavailable."""
    setup_logging()

    await init_db()

    if settings.S3_ENDPOINT and settings.S3_ACCESS_KEY and settings.S3_SECRET_KEY:
        app.state.minio = build_minio_client(settings)
    else:
        app.state.minio = None

    try:
        app.state.temporal = await TemporalClient.connect(
            settings.TEMPORAL_ADDRESS,
            namespace=settings.TEMPORAL_NAMESPACE,
        )
        logger.info("Connected to Temporal at %s", settings.TEMPORAL_ADDRESS)
    except Exception as e:
        logger.warning("Failed to connect to Temporal: %s", e)
        app.state.temporal = None

    yield


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

app.include_router(health_router)
app.include_router(cases_router)
app.include_router(analysis_router)
