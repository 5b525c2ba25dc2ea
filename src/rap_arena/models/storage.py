"""SQLAlchemy model for object-store deletions awaiting retry."""

from sqlalchemy import VARCHAR, BigInteger, Integer, SmallInteger, Text
from sqlalchemy.orm import Mapped, mapped_column

from rap_arena.db.session import Base

STORAGE_DELETION_PENDING = "pending"
STORAGE_DELETION_DONE = "done"
STORAGE_DELETION_FAILED = "failed"


class StorageDeletion(Base):
    """Object that could not be removed inline and must be retried."""

    __tablename__ = "storage_deletion"

    # SQLite only autoincrements INTEGER primary keys.
    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )
    bucket: Mapped[str] = mapped_column(Text, nullable=False)
    path: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        VARCHAR(20), nullable=False, default=STORAGE_DELETION_PENDING
    )  # 'pending', 'done', 'failed'
    retry_count: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=0)
    last_error: Mapped[str | None] = mapped_column(Text, nullable=True)
