"""Background retry of object-store deletions that failed inline."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from sqlalchemy import select
from sqlalchemy.orm import Session

from rap_arena.core.errors import StorageError
from rap_arena.core.settings import settings
from rap_arena.db.session import SessionLocal
from rap_arena.models import StorageDeletion
from rap_arena.models.storage import (
    STORAGE_DELETION_DONE,
    STORAGE_DELETION_FAILED,
    STORAGE_DELETION_PENDING,
)
from rap_arena.services.storage import StorageService, get_storage_service

logger = logging.getLogger(__name__)


class StorageCleanupWorker:
    """Periodically retries pending ``StorageDeletion`` rows.

    Each row is attempted once per pass. A row that keeps failing is marked
    ``failed`` after ``STORAGE_CLEANUP_MAX_RETRIES`` attempts and left for an
    operator to inspect.
    """

    def __init__(
        self,
        storage: StorageService | None = None,
        session_factory: Callable[[], Session] = SessionLocal,
    ) -> None:
        self.storage = storage or get_storage_service()
        self._session_factory = session_factory
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()

    async def start(self) -> None:
        """Start the background cleanup loop."""
        if self._task is None or self._task.done():
            self._stopping.clear()
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Stop the background cleanup loop."""
        if self._task is None:
            return

        self._stopping.set()
        await self._task
        self._task = None

    async def _run(self) -> None:
        interval = max(0.1, float(settings.storage_cleanup_interval_seconds))

        while not self._stopping.is_set():
            try:
                await asyncio.to_thread(self.process_once)
            except Exception:
                logger.exception("StorageCleanupWorker pass failed")

            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=interval)
            except TimeoutError:
                continue

    def process_once(self) -> int:
        """Run one pass over pending deletions in a fresh session.

        Returns:
            Number of objects deleted during this pass.
        """
        with self._session_factory() as db:
            return self.process_pending(db)

    def process_pending(self, db: Session) -> int:
        """Retry a batch of pending deletions using ``db``."""
        pending = list(
            db.execute(
                select(StorageDeletion)
                .where(StorageDeletion.status == STORAGE_DELETION_PENDING)
                .order_by(StorageDeletion.id)
                .limit(settings.storage_cleanup_batch_size)
            ).scalars()
        )
        logger.debug("Found %d pending storage deletions", len(pending))

        deleted = 0
        for record in pending:
            try:
                self.storage.delete(record.bucket, record.path)
            except StorageError as exc:
                record.retry_count += 1
                record.last_error = str(exc)
                if record.retry_count >= settings.storage_cleanup_max_retries:
                    record.status = STORAGE_DELETION_FAILED
                    logger.error(
                        "Giving up on deleting %s/%s after %d attempts",
                        record.bucket,
                        record.path,
                        record.retry_count,
                    )
                else:
                    logger.warning(
                        "Retry %d for %s/%s failed: %s",
                        record.retry_count,
                        record.bucket,
                        record.path,
                        exc,
                    )
            else:
                record.status = STORAGE_DELETION_DONE
                record.last_error = None
                deleted += 1
            db.commit()

        if deleted:
            logger.info("Removed %d orphaned storage objects", deleted)
        return deleted
