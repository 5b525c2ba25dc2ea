"""Join tables recording a user's like on a piece of content."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from rap_arena.db.session import Base
from rap_arena.db.time import utcnow

# Each table uses a composite primary key on (user_id, <entity>_id) so the
# database rejects a second like from the same user.


class PostLike(Base):
    """Like on a post."""

    __tablename__ = "post_like"
    __table_args__ = (Index("ix_post_like_post_id", "post_id"),)

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


class RecordingLike(Base):
    """Like on a recording."""

    __tablename__ = "recording_like"
    __table_args__ = (Index("ix_recording_like_recording_id", "recording_id"),)

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


class BeatLike(Base):
    """Like on a beat."""

    __tablename__ = "beat_like"
    __table_args__ = (Index("ix_beat_like_beat_id", "beat_id"),)

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


class CommentLike(Base):
    """Like on a comment or reply."""

    __tablename__ = "comment_like"
    __table_args__ = (Index("ix_comment_like_comment_id", "comment_id"),)

    user_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("user_account.id", ondelete="CASCADE"),
        primary_key=True,
    )
    comment_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("comment.id", ondelete="CASCADE"),
        primary_key=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
