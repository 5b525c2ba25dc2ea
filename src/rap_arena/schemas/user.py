"""User-related Pydantic schemas."""

from typing import Any

from pydantic import model_validator

from .common import CamelModel


class UserSummary(CamelModel):
    """Public fields of a user shown next to their content.

    ``name`` is withheld when the user has hidden their full name.
    """

    id: str
    username: str
    name: str | None = None
    image: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _apply_privacy(cls, data: Any) -> Any:
        if getattr(data, "hide_full_name", False):
            return {"id": data.id, "username": data.username, "name": None, "image": data.image}
        return data


class FollowStatusResponse(CamelModel):
    is_following: bool
    followers_count: int
    following_count: int


class FollowResponse(CamelModel):
    message: str
    is_following: bool


class ProfileUpdate(CamelModel):
    """Fields a user may change on their own profile; omitted fields stay as they are."""

    name: str | None = None
    username: str | None = None
    image: str | None = None


class PrivacyUpdate(CamelModel):
    hide_full_name: bool = False


class OwnProfile(CamelModel):
    """The caller's own profile, privacy settings included."""

    id: str
    username: str
    name: str | None = None
    image: str | None = None
    hide_full_name: bool


class ProfileResponse(CamelModel):
    message: str
    user: OwnProfile


class AccountStatusResponse(CamelModel):
    message: str
    is_active: bool
