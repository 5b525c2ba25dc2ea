"""Create, fetch and delete posts, recordings and beats."""
from __future__ import annotations

from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rap_arena.core.errors import ForbiddenError, NotFoundError, ValidationError
from rap_arena.core.settings import settings
from rap_arena.models import Beat, Comment, Post, Recording
from rap_arena.services.storage import StorageService, decode_audio

__all__ = [
    "create_post",
    "get_post",
    "delete_post",
    "create_recording",
    "get_recording",
    "set_recording_visibility",
    "delete_recording",
    "create_beat",
    "get_beat",
    "delete_beat",
    "hidden_from",
]


def _clean_text(value: str, *, field: str, max_length: int) -> str:
    text = value.strip()
    if not text:
        raise ValidationError(f"{field} is required")
    if len(text) > max_length:
        raise ValidationError(f"{field} is too long (max {max_length} characters)")
    return text


def create_post(db: Session, user_id: str, content: str) -> Post:
    """Publish a text post for ``user_id``."""
    post = Post(
        user_id=user_id,
        content=_clean_text(content, field="Content", max_length=settings.max_post_length),
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    return post


def get_post(db: Session, post_id: str) -> Post:
    post = db.get(Post, post_id)
    if post is None:
        raise NotFoundError("Post not found")
    return post


def delete_post(db: Session, user_id: str, post_id: str) -> None:
    """Delete a post owned by ``user_id``; likes, comments and notifications cascade."""
    post = get_post(db, post_id)
    if post.user_id != user_id:
        raise ForbiddenError("Not authorized to delete this post")
    db.delete(post)
    db.commit()


def _upload_audio(
    storage: StorageService,
    bucket: str,
    user_id: str,
    audio_base64: str,
    content_type: str,
) -> str:
    data = decode_audio(audio_base64, content_type)
    return storage.upload(bucket, user_id, data, content_type)


def create_recording(
    db: Session,
    storage: StorageService,
    user_id: str,
    *,
    title: str,
    audio_base64: str,
    content_type: str,
    is_public: bool = True,
) -> Recording:
    """Upload the audio and create the recording row.

    If the row cannot be written, the uploaded object is removed again (or
    queued for removal) so storage does not collect orphans.
    """
    clean_title = _clean_text(title, field="Title", max_length=settings.max_title_length)
    bucket = settings.storage_recordings_bucket
    file_path = _upload_audio(storage, bucket, user_id, audio_base64, content_type)

    recording = Recording(
        user_id=user_id,
        title=clean_title,
        file_path=file_path,
        content_type=content_type,
        is_public=is_public,
    )
    db.add(recording)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        storage.remove_or_enqueue(db, bucket, file_path)
        db.commit()
        raise
    db.refresh(recording)
    return recording


def hidden_from(db: Session, entity: Any, viewer_id: str | None) -> bool:
    """Return True when ``entity`` sits on a private recording the viewer does not own.

    Covers the recording itself and comments or replies attached to it.
    """
    recording = entity if isinstance(entity, Recording) else None
    if isinstance(entity, Comment) and entity.recording_id is not None:
        recording = db.get(Recording, entity.recording_id)
    return recording is not None and not recording.is_public and recording.user_id != viewer_id


def get_recording(db: Session, recording_id: str, viewer_id: str | None = None) -> Recording:
    """Return a recording; private recordings are only visible to their owner."""
    recording = db.get(Recording, recording_id)
    if recording is None or hidden_from(db, recording, viewer_id):
        raise NotFoundError("Recording not found")
    return recording


def set_recording_visibility(
    db: Session, user_id: str, recording_id: str, is_public: bool
) -> Recording:
    recording = db.get(Recording, recording_id)
    if recording is None:
        raise NotFoundError("Recording not found")
    if recording.user_id != user_id:
        raise ForbiddenError("Not authorized to update this recording")
    recording.is_public = is_public
    db.commit()
    db.refresh(recording)
    return recording


def _delete_with_file(
    db: Session,
    storage: StorageService,
    entity: Recording | Beat,
    bucket: str,
) -> None:
    # The row is always deleted; a failed object removal is queued for retry.
    if entity.file_path:
        storage.remove_or_enqueue(db, bucket, entity.file_path)
    db.delete(entity)
    db.commit()


def delete_recording(
    db: Session, storage: StorageService, user_id: str, recording_id: str
) -> None:
    """Delete a recording owned by ``user_id`` and its audio object."""
    recording = db.get(Recording, recording_id)
    if recording is None:
        raise NotFoundError("Recording not found")
    if recording.user_id != user_id:
        raise ForbiddenError("Not authorized to delete this recording")
    _delete_with_file(db, storage, recording, settings.storage_recordings_bucket)


def create_beat(
    db: Session,
    storage: StorageService,
    user_id: str,
    *,
    title: str,
    audio_base64: str,
    content_type: str,
    bpm: int | None = None,
) -> Beat:
    """Upload the audio and create the beat row."""
    clean_title = _clean_text(title, field="Title", max_length=settings.max_title_length)
    if bpm is not None and not 40 <= bpm <= 300:
        raise ValidationError("BPM must be between 40 and 300")
    bucket = settings.storage_beats_bucket
    file_path = _upload_audio(storage, bucket, user_id, audio_base64, content_type)

    beat = Beat(
        user_id=user_id,
        title=clean_title,
        bpm=bpm,
        file_path=file_path,
        content_type=content_type,
    )
    db.add(beat)
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        storage.remove_or_enqueue(db, bucket, file_path)
        db.commit()
        raise
    db.refresh(beat)
    return beat


def get_beat(db: Session, beat_id: str) -> Beat:
    beat = db.get(Beat, beat_id)
    if beat is None:
        raise NotFoundError("Beat not found")
    return beat


def delete_beat(db: Session, storage: StorageService, user_id: str, beat_id: str) -> None:
    """Delete a beat owned by ``user_id`` and its audio object."""
    beat = get_beat(db, beat_id)
    if beat.user_id != user_id:
        raise ForbiddenError("Not authorized to delete this beat")
    _delete_with_file(db, storage, beat, settings.storage_beats_bucket)
