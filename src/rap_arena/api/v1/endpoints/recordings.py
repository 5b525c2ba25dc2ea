"""Recording endpoints: upload, fetch, visibility, delete and comments."""

from fastapi import APIRouter, Query, status

from rap_arena.core.settings import settings
from rap_arena.models import Recording
from rap_arena.schemas.comment import CommentCreate, CommentResponse, CommentThreadResponse
from rap_arena.schemas.common import MessageResponse
from rap_arena.schemas.content import (
    RecordingCreate,
    RecordingResponse,
    RecordingVisibilityUpdate,
)
from rap_arena.services import content
from rap_arena.services.comments import CommentService
from rap_arena.services.storage import StorageService

from ..dependencies import (
    CurrentUserDep,
    NotificationServiceDep,
    OptionalUserDep,
    SessionDep,
    StorageServiceDep,
)
from .comments import to_thread_response

router = APIRouter(prefix="/recordings", tags=["recordings"])


def _to_response(recording: Recording, storage: StorageService) -> RecordingResponse:
    response = RecordingResponse.model_validate(recording)
    response.audio_url = storage.presigned_url(
        settings.storage_recordings_bucket, recording.file_path
    )
    return response


@router.post("/", response_model=RecordingResponse, status_code=status.HTTP_201_CREATED)
async def create_recording(
    recording_data: RecordingCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
    storage: StorageServiceDep,
) -> RecordingResponse:
    """Upload a recording's audio and publish it."""
    recording = content.create_recording(
        db,
        storage,
        current_user.id,
        title=recording_data.title,
        audio_base64=recording_data.audio_base64,
        content_type=recording_data.content_type,
        is_public=recording_data.is_public,
    )
    return _to_response(recording, storage)


@router.get("/{recording_id}", response_model=RecordingResponse)
async def get_recording(
    recording_id: str,
    current_user: OptionalUserDep,
    db: SessionDep,
    storage: StorageServiceDep,
) -> RecordingResponse:
    viewer_id = current_user.id if current_user else None
    return _to_response(content.get_recording(db, recording_id, viewer_id), storage)


@router.patch("/{recording_id}/visibility", response_model=RecordingResponse)
async def update_visibility(
    recording_id: str,
    visibility: RecordingVisibilityUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
    storage: StorageServiceDep,
) -> RecordingResponse:
    recording = content.set_recording_visibility(
        db, current_user.id, recording_id, visibility.is_public
    )
    return _to_response(recording, storage)


@router.delete("/{recording_id}", response_model=MessageResponse)
async def delete_recording(
    recording_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
    storage: StorageServiceDep,
) -> MessageResponse:
    """Delete a recording owned by the caller.

    The audio object is removed first; if storage refuses, the removal is queued
    for retry and the recording row is deleted anyway.
    """
    content.delete_recording(db, storage, current_user.id, recording_id)
    return MessageResponse(message="Recording deleted successfully")


@router.get("/{recording_id}/comments", response_model=list[CommentThreadResponse])
async def list_recording_comments(
    recording_id: str,
    current_user: OptionalUserDep,
    db: SessionDep,
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> list[CommentThreadResponse]:
    threads = CommentService(db).list_threads(
        "recordings",
        recording_id,
        viewer_id=current_user.id if current_user else None,
        limit=limit,
        offset=offset,
    )
    return [to_thread_response(thread) for thread in threads]


@router.post(
    "/{recording_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_recording_comment(
    recording_id: str,
    comment_data: CommentCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
    notifications: NotificationServiceDep,
) -> CommentResponse:
    comment = CommentService(db, notifications).add_comment(
        current_user.id, "recordings", recording_id, comment_data.content
    )
    return CommentResponse.model_validate(comment)
