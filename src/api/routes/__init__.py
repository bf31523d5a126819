"""API route modules."""

from .health import router as health_router
from .reports import router as reports_router
from .schedules import router as schedules_router

__all__ = ["health_router", "reports_router", "schedules_router"]
