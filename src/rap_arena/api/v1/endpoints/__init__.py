# src/rap_arena/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .beats import router as beats_router
from .comments import router as comments_router
from .favorites import router as favorites_router
from .notifications import router as notifications_router
from .posts import router as posts_router
from .reactions import router as reactions_router
from .recordings import router as recordings_router
from .users import router as users_router

__all__ = [
    "beats_router",
    "comments_router",
    "favorites_router",
    "notifications_router",
    "posts_router",
    "reactions_router",
    "recordings_router",
    "users_router",
]
