"""API routers."""
from .monitors import router as monitors_router
from .reports import router as reports_router

__all__ = ["monitors_router", "reports_router"]
