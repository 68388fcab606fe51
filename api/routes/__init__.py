"""API route modules."""

from .artists_routes import router as artists_router
from .health_routes import router as health_router
from .tracks_routes import router as tracks_router
from .users_routes import router as users_router

__all__ = [
    "artists_router",
    "health_router",
    "tracks_router",
    "users_router",
]
