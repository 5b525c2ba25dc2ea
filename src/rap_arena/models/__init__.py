# src/rap_arena/models/__init__.py
"""SQLAlchemy models for the Rap Arena application."""

from .comment import Comment
from .favorite import FavoriteBeat, FavoritePost, FavoriteRecording
from .follow import Follow
from .notification import Notification
from .post import Post
from .reaction import BeatLike, CommentLike, PostLike, RecordingLike
from .recording import Beat, Recording
from .storage import StorageDeletion
from .user import User

__all__ = [
    "Comment",
    "FavoriteBeat", "FavoritePost", "FavoriteRecording",
    "Follow",
    "Notification",
    "Post",
    "BeatLike", "CommentLike", "PostLike", "RecordingLike",
    "Beat", "Recording",
    "StorageDeletion",
    "User",
]
