"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .comment import CommentCreate, CommentResponse, CommentThreadResponse
from .common import CamelModel, MessageResponse, Pagination
from .content import (
    BeatCreate,
    BeatResponse,
    PostCreate,
    PostResponse,
    RecordingCreate,
    RecordingResponse,
    RecordingVisibilityUpdate,
    UserPostsResponse,
)
from .notification import MarkAllReadResponse, NotificationListResponse, NotificationResponse
from .reaction import (
    FavoriteStatusResponse,
    ReactionStatusResponse,
    ReactionToggleResponse,
    UserFavoritesResponse,
)
from .user import (
    AccountStatusResponse,
    FollowResponse,
    FollowStatusResponse,
    OwnProfile,
    PrivacyUpdate,
    ProfileResponse,
    ProfileUpdate,
    UserSummary,
)

__all__ = [
    "CommentCreate", "CommentResponse", "CommentThreadResponse",
    "CamelModel", "MessageResponse", "Pagination",
    "BeatCreate", "BeatResponse", "PostCreate", "PostResponse",
    "RecordingCreate", "RecordingResponse", "RecordingVisibilityUpdate", "UserPostsResponse",
    "MarkAllReadResponse", "NotificationListResponse", "NotificationResponse",
    "FavoriteStatusResponse", "ReactionStatusResponse", "ReactionToggleResponse",
    "UserFavoritesResponse",
    "AccountStatusResponse", "FollowResponse", "FollowStatusResponse",
    "OwnProfile", "PrivacyUpdate", "ProfileResponse", "ProfileUpdate", "UserSummary",
]
