# src/rap_arena/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    beats_router,
    comments_router,
    favorites_router,
    notifications_router,
    posts_router,
    reactions_router,
    recordings_router,
    users_router,
)

__all__ = [
    "reactions_router",
    "favorites_router",
    "posts_router",
    "recordings_router",
    "beats_router",
    "comments_router",
    "notifications_router",
    "users_router",
]
