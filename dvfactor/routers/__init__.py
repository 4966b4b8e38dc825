"""Expose API routers for inclusion in the FastAPI app."""

from .admin import router as admin_router
from .dashboard import router as dashboard_router
from .payouts import router as payouts_router

__all__ = [
    "admin_router",
    "dashboard_router",
    "payouts_router",
]
