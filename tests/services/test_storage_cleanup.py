from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

import pytest

from rap_arena.core.errors import StorageError
from rap_arena.models import StorageDeletion
from rap_arena.services.storage_cleanup import StorageCleanupWorker


@pytest.fixture
def mock_storage():
    return MagicMock()


def _queue(db_session, count: int = 1, retry_count: int = 0) -> list[StorageDeletion]:
    records = [
        StorageDeletion(bucket="recordings", path=f"user/{i}.webm", retry_count=retry_count)
        for i in range(count)
    ]
    db_session.add_all(records)
    db_session.commit()
    return records


def test_process_pending_marks_deleted_rows_done(db_session, mock_storage):
    records = _queue(db_session, 2)
    worker = StorageCleanupWorker(storage=mock_storage, session_factory=lambda: db_session)

    assert worker.process_pending(db_session) == 2
    assert mock_storage.delete.call_count == 2
    assert {r.status for r in records} == {"done"}


def test_failed_retry_increments_count(db_session, mock_storage):
    (record,) = _queue(db_session)
    mock_storage.delete.side_effect = StorageError("bucket unreachable")
    worker = StorageCleanupWorker(storage=mock_storage)

    assert worker.process_pending(db_session) == 0
    assert record.status == "pending"
    assert record.retry_count == 1
    assert record.last_error == "bucket unreachable"


def test_gives_up_after_max_retries(db_session, mock_storage, mocker):
    mocker.patch(
        "rap_arena.services.storage_cleanup.settings.storage_cleanup_max_retries", 3
    )
    (record,) = _queue(db_session, retry_count=2)
    mock_storage.delete.side_effect = StorageError("still failing")

    StorageCleanupWorker(storage=mock_storage).process_pending(db_session)

    assert record.status == "failed"
    assert record.retry_count == 3


def test_done_and_failed_rows_are_skipped(db_session, mock_storage):
    done, failed = _queue(db_session, 2)
    done.status = "done"
    failed.status = "failed"
    db_session.commit()

    assert StorageCleanupWorker(storage=mock_storage).process_pending(db_session) == 0
    mock_storage.delete.assert_not_called()


@pytest.mark.asyncio
async def test_worker_start_and_stop(mock_storage, mocker):
    mocker.patch(
        "rap_arena.services.storage_cleanup.settings.storage_cleanup_interval_seconds", 0.1
    )
    worker = StorageCleanupWorker(storage=mock_storage)
    process_once = mocker.patch.object(worker, "process_once", return_value=0)

    await worker.start()
    await asyncio.sleep(0.05)
    await worker.stop()

    assert process_once.call_count >= 1
    assert worker._task is None


@pytest.mark.asyncio
async def test_worker_survives_failed_pass(mock_storage, mocker):
    mocker.patch(
        "rap_arena.services.storage_cleanup.settings.storage_cleanup_interval_seconds", 0.1
    )
    worker = StorageCleanupWorker(storage=mock_storage)
    process_once = mocker.patch.object(
        worker, "process_once", side_effect=[RuntimeError("db down"), 0, 0, 0, 0]
    )

    await worker.start()
    await asyncio.sleep(0.25)
    await worker.stop()

    assert process_once.call_count >= 2
