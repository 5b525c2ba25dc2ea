"""Beat endpoints: upload, fetch and delete."""

from fastapi import APIRouter, status

from rap_arena.core.settings import settings
from rap_arena.models import Beat
from rap_arena.schemas.common import MessageResponse
from rap_arena.schemas.content import BeatCreate, BeatResponse
from rap_arena.services import content
from rap_arena.services.storage import StorageService

from ..dependencies import CurrentUserDep, SessionDep, StorageServiceDep

router = APIRouter(prefix="/beats", tags=["beats"])


def _to_response(beat: Beat, storage: StorageService) -> BeatResponse:
    response = BeatResponse.model_validate(beat)
    response.audio_url = storage.presigned_url(settings.storage_beats_bucket, beat.file_path)
    return response


@router.post("/", response_model=BeatResponse, status_code=status.HTTP_201_CREATED)
async def create_beat(
    beat_data: BeatCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
    storage: StorageServiceDep,
) -> BeatResponse:
    beat = content.create_beat(
        db,
        storage,
        current_user.id,
        title=beat_data.title,
        audio_base64=beat_data.audio_base64,
        content_type=beat_data.content_type,
        bpm=beat_data.bpm,
    )
    return _to_response(beat, storage)


@router.get("/{beat_id}", response_model=BeatResponse)
async def get_beat(beat_id: str, db: SessionDep, storage: StorageServiceDep) -> BeatResponse:
    return _to_response(content.get_beat(db, beat_id), storage)


@router.delete("/{beat_id}", response_model=MessageResponse)
async def delete_beat(
    beat_id: str,
    current_user: CurrentUserDep,
    db: SessionDep,
    storage: StorageServiceDep,
) -> MessageResponse:
    """Delete a beat owned by the caller and its audio object (retried if storage fails)."""
    content.delete_beat(db, storage, current_user.id, beat_id)
    return MessageResponse(message="Beat deleted successfully")
