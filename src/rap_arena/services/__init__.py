# src/rap_arena/services/__init__.py
"""Business logic services for the Rap Arena application."""

from .comments import CommentService
from .favorites import FavoriteService
from .notifications import NotificationService
from .reactions import CounterMaintainer, ReactionService, ReactionStore
from .storage import StorageService
from .storage_cleanup import StorageCleanupWorker

__all__ = [
    "CommentService",
    "CounterMaintainer",
    "FavoriteService",
    "NotificationService",
    "ReactionService",
    "ReactionStore",
    "StorageCleanupWorker",
    "StorageService",
]
