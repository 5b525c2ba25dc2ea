"""Favorite toggles for posts, recordings and beats."""

from fastapi import APIRouter

from rap_arena.schemas.reaction import FavoriteStatusResponse
from rap_arena.services.favorites import FavoriteService
from rap_arena.services.kinds import FAVORITE_KINDS, resolve_kind

from ..dependencies import CurrentUserDep, OptionalUserDep, SessionDep

router = APIRouter(prefix="/favorites", tags=["favorites"])


@router.post("/{entity_kind}/{entity_id}", response_model=FavoriteStatusResponse)
async def toggle_favorite(
    entity_kind: str,
    entity_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> FavoriteStatusResponse:
    """Add the entity to the caller's favorites, or remove it if already there."""
    service = FavoriteService(db, resolve_kind(FAVORITE_KINDS, entity_kind))
    return FavoriteStatusResponse(is_favorited=service.toggle(current_user.id, entity_id))


@router.get("/{entity_kind}/{entity_id}", response_model=FavoriteStatusResponse)
async def favorite_status(
    entity_kind: str,
    entity_id: str,
    current_user: OptionalUserDep,
    db: SessionDep,
) -> FavoriteStatusResponse:
    service = FavoriteService(db, resolve_kind(FAVORITE_KINDS, entity_kind))
    user_id = current_user.id if current_user else None
    return FavoriteStatusResponse(is_favorited=service.is_favorited(user_id, entity_id))
