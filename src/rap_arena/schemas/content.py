"""Post, recording and beat Pydantic schemas."""

from datetime import datetime

from pydantic import Field

from .common import CamelModel, Pagination


class PostCreate(CamelModel):
    """Schema for creating a new post; length limits are enforced by the service."""

    content: str = Field(..., description="Text of the post")


class PostResponse(CamelModel):
    id: str
    user_id: str
    content: str
    likes_count: int
    comments_count: int
    created_at: datetime


class AudioUpload(CamelModel):
    """Base64-encoded audio submitted alongside its metadata."""

    title: str
    audio_base64: str = Field(..., description="Base64-encoded audio bytes")
    content_type: str = Field("audio/webm", description="MIME type of the audio")


class RecordingCreate(AudioUpload):
    is_public: bool = True


class RecordingVisibilityUpdate(CamelModel):
    is_public: bool


class RecordingResponse(CamelModel):
    id: str
    user_id: str
    title: str
    file_path: str | None
    content_type: str
    is_public: bool
    likes_count: int
    comments_count: int
    created_at: datetime
    audio_url: str | None = None


class BeatCreate(AudioUpload):
    content_type: str = Field("audio/mpeg", description="MIME type of the audio")
    bpm: int | None = None


class BeatResponse(CamelModel):
    id: str
    user_id: str
    title: str
    bpm: int | None
    file_path: str | None
    content_type: str
    likes_count: int
    created_at: datetime
    audio_url: str | None = None


class UserPostsResponse(CamelModel):
    posts: list[PostResponse]
    pagination: Pagination
