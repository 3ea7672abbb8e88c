"""Health check endpoints."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from app.core.config import settings
from app.db.session import AsyncSessionLocal

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check():
    """Liveness probe."""
    return {"status": "ok", "service": settings.APP_NAME}


async def _check_database() -> str:
    try:
        async with AsyncSessionLocal() as db:
            await db.execute(text("SELECT 1"))
        return "ok"
    except Exception as e:
        logger.warning("Database readiness check failed: %s", e)
        return f"error: {e}"


def _check_storage(request: Request) -> str:
    minio = getattr(request.app.state, "minio", None)
    if minio is None:
        return "not configured"
    try:
        for bucket in (settings.S3_BUCKET_DOCUMENTS, settings.S3_BUCKET_VERDICTS):
            if not minio.bucket_exists(bucket):
                return f"missing bucket: {bucket}"
        return "ok"
    except Exception as e:
        logger.warning("Storage readiness check failed: %s", e)
        return f"error: {e}"


@router.get("/health/ready")
async def readiness_check(request: Request):
    """Readiness probe: database, storage buckets, Temporal connection."""
    checks = {
        "database": await _check_database(),
        "storage": _check_storage(request),
        "temporal": "ok" if getattr(request.app.state, "temporal", None) is not None else "not connected",
    }
    all_ok = all(value == "ok" for value in checks.values())

    return JSONResponse(
        status_code=200 if all_ok else 503,
        content={"status": "ok" if all_ok else "degraded", "checks": checks},
    )
