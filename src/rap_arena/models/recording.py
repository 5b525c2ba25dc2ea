"""SQLAlchemy models for audio content: recordings and beats."""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from rap_arena.db.ids import new_id
from rap_arena.db.session import Base
from rap_arena.db.time import utcnow


class Recording(Base):
    """A performance recorded over a beat.

    The audio bytes live in the recordings bucket under `file_path`.
    """

    __tablename__ = "recording"
    __table_args__ = (
        CheckConstraint("likes_count >= 0", name="ck_recording_likes_count"),
        CheckConstraint("comments_count >= 0", name="ck_recording_comments_count"),
        Index("ix_recording_user_id", "user_id"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    file_path: Mapped[str | None] = mapped_column(Text, nullable=True)
    content_type: Mapped[str] = mapped_column(String(64), nullable=False, default="audio/webm")
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    likes_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    comments_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )


class Beat(Base):
    """Instrumental track that recordings are performed over."""

    __tablename__ = "beat"
    __table_args__ = (
        CheckConstraint("likes_count >= 0", name="ck_beat_likes_count"),
        Index("ix_beat_user_id", "user_id"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    bpm: Mapped[int | None] = mapped_column(Integer, nullable=True)
    file_path: Mapped[str | None] = mapped_column(Text, nullable=True)
    content_type: Mapped[str] = mapped_column(String(64), nullable=False, default="audio/mpeg")

    likes_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
