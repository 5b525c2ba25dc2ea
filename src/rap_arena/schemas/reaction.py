"""Reaction and favorite Pydantic schemas."""

from pydantic import Field

from .common import CamelModel


class ReactionToggleResponse(CamelModel):
    """State after toggling a like."""

    liked: bool
    likes_count: int = Field(..., ge=0)


class ReactionStatusResponse(CamelModel):
    """Like state of an entity from the caller's perspective."""

    is_liked: bool
    likes_count: int = Field(..., ge=0)
    comments_count: int | None = None


class FavoriteStatusResponse(CamelModel):
    is_favorited: bool


class UserFavoritesResponse(CamelModel):
    """Favorited entity ids grouped by kind."""

    posts: list[str]
    recordings: list[str]
    beats: list[str]
