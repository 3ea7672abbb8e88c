"""API routes package."""

from app.routes.analysis import router as analysis_router
from app.routes.cases import router as cases_router
from app.routes.health import router as health_router

__all__ = ["analysis_router", "cases_router", "health_router"]
