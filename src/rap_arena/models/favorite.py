"""Join tables for content a user has saved to their favorites."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from rap_arena.db.session import Base
from rap_arena.db.time import utcnow


class FavoritePost(Base):
    """Post saved by a user."""

    __tablename__ = "favorite_post"

    user_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("user_account.id", ondelete="CASCADE"),
        primary_key=True,
    )
    post_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("post.id", ondelete="CASCADE"),
        primary_key=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class FavoriteRecording(Base):
    """Recording saved by a user."""

    __tablename__ = "favorite_recording"

    user_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("user_account.id", ondelete="CASCADE"),
        primary_key=True,
    )
    recording_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("recording.id", ondelete="CASCADE"),
        primary_key=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )


class FavoriteBeat(Base):
    """Beat saved by a user."""

    __tablename__ = "favorite_beat"

    user_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("user_account.id", ondelete="CASCADE"),
        primary_key=True,
    )
    beat_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("beat.id", ondelete="CASCADE"),
        primary_key=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
