"""Comment replies and shared comment serialization."""

from fastapi import APIRouter, status

from rap_arena.schemas.comment import CommentCreate, CommentResponse, CommentThreadResponse
from rap_arena.services.comments import CommentService, CommentThread

from ..dependencies import CurrentUserDep, NotificationServiceDep, SessionDep

router = APIRouter(prefix="/comments", tags=["comments"])


def to_thread_response(thread: CommentThread) -> CommentThreadResponse:
    """Serialize a comment with its replies."""
    base = CommentResponse.model_validate(thread.comment)
    return CommentThreadResponse(
        **base.model_dump(),
        replies=[CommentResponse.model_validate(reply) for reply in thread.replies],
    )


@router.post(
    "/{comment_id}/reply",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def reply_to_comment(
    comment_id: str,
    reply_data: CommentCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
    notifications: NotificationServiceDep,
) -> CommentResponse:
    """Reply to a comment; the reply counts toward the parent's post or recording."""
    reply = CommentService(db, notifications).reply(current_user.id, comment_id, reply_data.content)
    return CommentResponse.model_validate(reply)
