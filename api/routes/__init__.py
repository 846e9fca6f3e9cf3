"""HTTP route modules."""

from .health_routes import router as health_router
from .redirect_routes import router as redirect_router

__all__ = [
    "health_router",
    "redirect_router",
]
