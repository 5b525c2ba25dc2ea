from __future__ import annotations

import base64
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError
from sqlalchemy import select

from rap_arena.core.errors import StorageError, ValidationError
from rap_arena.models import StorageDeletion
from rap_arena.services.storage import StorageService, decode_audio


def _client_error() -> ClientError:
    return ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "DeleteObject")


def test_decode_audio_accepts_known_types():
    data = decode_audio(base64.b64encode(b"RIFF....WAVE").decode(), "audio/wav")
    assert data == b"RIFF....WAVE"


@pytest.mark.parametrize(
    ("payload", "content_type"),
    [
        (base64.b64encode(b"abc").decode(), "image/png"),
        ("not base64!", "audio/mpeg"),
        ("", "audio/mpeg"),
    ],
)
def test_decode_audio_rejects_bad_input(payload, content_type):
    with pytest.raises(ValidationError):
        decode_audio(payload, content_type)


def test_decode_audio_rejects_oversized_payload(mocker):
    mocker.patch("rap_arena.services.storage.settings.max_audio_bytes", 4)
    with pytest.raises(ValidationError):
        decode_audio(base64.b64encode(b"12345").decode(), "audio/mpeg")


def test_delete_wraps_client_errors():
    client = MagicMock()
    client.delete_object.side_effect = _client_error()
    with pytest.raises(StorageError):
        StorageService(client=client).delete("beats", "u/1.mp3")


def test_remove_or_enqueue_success(db_session):
    client = MagicMock()
    assert StorageService(client=client).remove_or_enqueue(db_session, "beats", "u/1.mp3") is True
    client.delete_object.assert_called_once_with(Bucket="beats", Key="u/1.mp3")
    assert db_session.execute(select(StorageDeletion)).first() is None


def test_remove_or_enqueue_queues_on_failure(db_session):
    client = MagicMock()
    client.delete_object.side_effect = _client_error()

    deleted = StorageService(client=client).remove_or_enqueue(db_session, "beats", "u/1.mp3")
    db_session.commit()

    assert deleted is False
    queued = db_session.execute(select(StorageDeletion)).scalar_one()
    assert (queued.bucket, queued.path, queued.status, queued.retry_count) == (
        "beats",
        "u/1.mp3",
        "pending",
        0,
    )


def test_presigned_url_without_key():
    client = MagicMock()
    assert StorageService(client=client).presigned_url("beats", None) is None
    client.generate_presigned_url.assert_not_called()


def test_upload_uses_owner_prefix_and_extension():
    client = MagicMock()
    key = StorageService(client=client).upload("recordings", "owner1", b"data", "audio/ogg")
    assert key.startswith("owner1/")
    assert key.endswith(".ogg")
    client.put_object.assert_called_once_with(
        Bucket="recordings", Key=key, Body=b"data", ContentType="audio/ogg"
    )


def test_client_build_failure_is_queued(db_session, mocker):
    mocker.patch(
        "rap_arena.services.storage.boto3.client",
        side_effect=ValueError("Invalid endpoint: not a url"),
    )
    service = StorageService()

    deleted = service.remove_or_enqueue(db_session, "recordings", "u/take.webm")
    db_session.commit()

    assert deleted is False
    queued = db_session.execute(select(StorageDeletion)).scalar_one()
    assert (queued.bucket, queued.path) == ("recordings", "u/take.webm")
    assert "Invalid endpoint" in queued.last_error
    assert service.presigned_url("recordings", "u/take.webm") is None
