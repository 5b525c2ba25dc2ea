"""Like toggles shared by every likeable content kind."""

from fastapi import APIRouter

from rap_arena.schemas.reaction import ReactionStatusResponse, ReactionToggleResponse
from rap_arena.services.kinds import LIKE_KINDS, resolve_kind
from rap_arena.services.reactions import ReactionService

from ..dependencies import CurrentUserDep, NotificationServiceDep, OptionalUserDep, SessionDep

router = APIRouter(prefix="/reactions", tags=["reactions"])


@router.post("/{entity_kind}/{entity_id}", response_model=ReactionToggleResponse)
async def toggle_reaction(
    entity_kind: str,
    entity_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
    notifications: NotificationServiceDep,
) -> ReactionToggleResponse:
    """Like the entity if the caller has not liked it yet, otherwise unlike it.

    Args:
        entity_kind: One of ``posts``, ``recordings``, ``beats`` or ``comments``.
        entity_id: Identifier of the entity.
        current_user: Authenticated caller.
        db: Database session.
        notifications: Service used to tell the owner about a new like.

    Returns:
        The caller's new like state and the stored like count.
    """
    service = ReactionService(db, resolve_kind(LIKE_KINDS, entity_kind), notifications)
    result = service.toggle(current_user.id, entity_id)
    return ReactionToggleResponse(liked=result.is_reacted, likes_count=result.reaction_count)


@router.get(
    "/{entity_kind}/{entity_id}/status",
    response_model=ReactionStatusResponse,
    response_model_exclude_none=True,
)
async def reaction_status(
    entity_kind: str,
    entity_id: str,
    current_user: OptionalUserDep,
    db: SessionDep,
) -> ReactionStatusResponse:
    """Return whether the caller liked the entity; anonymous callers get ``isLiked: false``."""
    service = ReactionService(db, resolve_kind(LIKE_KINDS, entity_kind))
    status = service.status(current_user.id if current_user else None, entity_id)
    return ReactionStatusResponse(
        is_liked=status.is_reacted,
        likes_count=status.reaction_count,
        comments_count=status.comments_count,
    )
