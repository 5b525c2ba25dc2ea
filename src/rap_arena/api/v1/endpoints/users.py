"""User-related endpoints: account lifecycle, profile, follows, posts and favorites."""

from fastapi import APIRouter, Query

from rap_arena.core.errors import ForbiddenError
from rap_arena.schemas.common import MessageResponse, Pagination
from rap_arena.schemas.content import PostResponse, UserPostsResponse
from rap_arena.schemas.reaction import UserFavoritesResponse
from rap_arena.schemas.user import (
    AccountStatusResponse,
    FollowResponse,
    FollowStatusResponse,
    OwnProfile,
    PrivacyUpdate,
    ProfileResponse,
    ProfileUpdate,
    UserSummary,
)
from rap_arena.services import accounts, follows
from rap_arena.services.favorites import list_user_favorites

from ..dependencies import (
    CurrentAccountDep,
    CurrentUserDep,
    NotificationServiceDep,
    OptionalUserDep,
    SessionDep,
    StorageServiceDep,
)

router = APIRouter(prefix="/users", tags=["users"])


@router.patch("/account/deactivate", response_model=AccountStatusResponse)
async def deactivate_account(
    current_user: CurrentAccountDep, db: SessionDep
) -> AccountStatusResponse:
    accounts.deactivate_account(db, current_user.id)
    return AccountStatusResponse(message="Account deactivated successfully", is_active=False)


@router.patch("/account/reactivate", response_model=AccountStatusResponse)
async def reactivate_account(
    current_user: CurrentAccountDep, db: SessionDep
) -> AccountStatusResponse:
    """Reactivate a deactivated account; its existing tokens work again."""
    accounts.reactivate_account(db, current_user.id)
    return AccountStatusResponse(message="Account reactivated successfully", is_active=True)


@router.delete("/account", response_model=MessageResponse)
async def delete_account(
    current_user: CurrentAccountDep,
    db: SessionDep,
    storage: StorageServiceDep,
) -> MessageResponse:
    """Permanently delete the caller's account, content and audio files."""
    accounts.delete_account(db, storage, current_user.id)
    return MessageResponse(message="Account deleted successfully")


@router.patch("/{user_id}/profile", response_model=ProfileResponse)
async def update_profile(
    user_id: str,
    payload: ProfileUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ProfileResponse:
    if user_id != current_user.id:
        raise ForbiddenError("Cannot edit another user's profile")
    user = accounts.update_profile(
        db, user_id, name=payload.name, username=payload.username, image=payload.image
    )
    return ProfileResponse(
        message="Profile updated successfully", user=OwnProfile.model_validate(user)
    )


@router.patch("/{user_id}/privacy", response_model=ProfileResponse)
async def update_privacy(
    user_id: str,
    payload: PrivacyUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ProfileResponse:
    """Choose whether the full name is shown to other users."""
    if user_id != current_user.id:
        raise ForbiddenError("Cannot edit another user's privacy settings")
    user = accounts.update_privacy(db, user_id, hide_full_name=payload.hide_full_name)
    return ProfileResponse(
        message="Privacy settings updated successfully", user=OwnProfile.model_validate(user)
    )


@router.get("/{user_id}/posts", response_model=UserPostsResponse)
async def list_user_posts(
    user_id: str,
    db: SessionDep,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
) -> UserPostsResponse:
    """List a user's posts, newest first."""
    posts, total = accounts.list_user_posts(db, user_id, page=page, limit=limit)
    return UserPostsResponse(
        posts=[PostResponse.model_validate(p) for p in posts],
        pagination=Pagination.build(page, limit, total),
    )


@router.post("/{user_id}/follow", response_model=FollowResponse)
async def follow_user(
    user_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
    notifications: NotificationServiceDep,
) -> FollowResponse:
    """Follow a user and notify them."""
    follows.follow_user(db, current_user.id, user_id, notifications)
    return FollowResponse(message="Successfully followed user", is_following=True)


@router.delete("/{user_id}/follow", response_model=FollowResponse)
async def unfollow_user(
    user_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> FollowResponse:
    follows.unfollow_user(db, current_user.id, user_id)
    return FollowResponse(message="Successfully unfollowed user", is_following=False)


@router.get("/{user_id}/follow-status", response_model=FollowStatusResponse)
async def follow_status(
    user_id: str,
    current_user: OptionalUserDep,
    db: SessionDep,
) -> FollowStatusResponse:
    """Return whether the caller follows the user, plus the user's follow counts."""
    viewer_id = current_user.id if current_user else None
    return FollowStatusResponse(
        is_following=follows.is_following(db, viewer_id, user_id),
        followers_count=follows.count_followers(db, user_id),
        following_count=follows.count_following(db, user_id),
    )


@router.get("/{user_id}/followers", response_model=list[UserSummary])
async def list_followers(
    user_id: str,
    db: SessionDep,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
) -> list[UserSummary]:
    return [UserSummary.model_validate(u) for u in follows.get_followers(db, user_id, skip, limit)]


@router.get("/{user_id}/following", response_model=list[UserSummary])
async def list_following(
    user_id: str,
    db: SessionDep,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
) -> list[UserSummary]:
    return [UserSummary.model_validate(u) for u in follows.get_following(db, user_id, skip, limit)]


@router.get("/{user_id}/favorites", response_model=UserFavoritesResponse)
async def list_favorites(
    user_id: str, current_user: OptionalUserDep, db: SessionDep
) -> UserFavoritesResponse:
    """List ids of everything the user has favorited, grouped by kind.

    Private recordings appear only when the caller owns them.
    """
    viewer_id = current_user.id if current_user else None
    return UserFavoritesResponse(**list_user_favorites(db, user_id, viewer_id))
