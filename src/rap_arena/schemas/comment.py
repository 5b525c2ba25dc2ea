"""Comment Pydantic schemas."""

from datetime import datetime

from pydantic import Field

from .common import CamelModel


class CommentCreate(CamelModel):
    content: str = Field(..., description="Comment text")


class CommentResponse(CamelModel):
    id: str
    user_id: str
    content: str
    post_id: str | None
    recording_id: str | None
    parent_id: str | None
    likes_count: int
    created_at: datetime


class CommentThreadResponse(CommentResponse):
    """Top-level comment with its replies."""

    replies: list[CommentResponse] = Field(default_factory=list)
