"""API route modules."""

from .health import router as health_router
from .projects import router as projects_router
from .signups import router as signups_router

__all__ = ["health_router", "projects_router", "signups_router"]
