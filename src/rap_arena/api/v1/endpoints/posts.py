"""Post-related endpoints for the Rap Arena API."""

from fastapi import APIRouter, Query, status

from rap_arena.models import Post
from rap_arena.schemas.comment import CommentCreate, CommentResponse, CommentThreadResponse
from rap_arena.schemas.common import MessageResponse
from rap_arena.schemas.content import PostCreate, PostResponse
from rap_arena.services import content
from rap_arena.services.comments import CommentService

from ..dependencies import CurrentUserDep, NotificationServiceDep, SessionDep
from .comments import to_thread_response

router = APIRouter(prefix="/posts", tags=["posts"])


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Post:
    """Publish a text post.

    Raises:
        ValidationError: If the content is empty or longer than ``MAX_POST_LENGTH``.
    """
    return content.create_post(db, current_user.id, post_data.content)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: str, db: SessionDep) -> Post:
    return content.get_post(db, post_id)


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageResponse:
    """Delete a post owned by the caller; likes, comments and notifications go with it."""
    content.delete_post(db, current_user.id, post_id)
    return MessageResponse(message="Post deleted successfully")


@router.get("/{post_id}/comments", response_model=list[CommentThreadResponse])
async def list_post_comments(
    post_id: str,
    db: SessionDep,
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> list[CommentThreadResponse]:
    threads = CommentService(db).list_threads("posts", post_id, limit=limit, offset=offset)
    return [to_thread_response(thread) for thread in threads]


@router.post(
    "/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_post_comment(
    post_id: str,
    comment_data: CommentCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
    notifications: NotificationServiceDep,
) -> CommentResponse:
    comment = CommentService(db, notifications).add_comment(
        current_user.id, "posts", post_id, comment_data.content
    )
    return CommentResponse.model_validate(comment)
