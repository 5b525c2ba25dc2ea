"""SQLAlchemy model for in-app notifications."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rap_arena.db.ids import new_id
from rap_arena.db.session import Base
from rap_arena.db.time import utcnow
from rap_arena.models.user import User

# Notification type codes stored in `Notification.type`.
NOTIFICATION_FOLLOW = "follow"
NOTIFICATION_POST_LIKE = "post_like"
NOTIFICATION_POST_COMMENT = "post_comment"
NOTIFICATION_RECORDING_LIKE = "recording_like"
NOTIFICATION_RECORDING_COMMENT = "recording_comment"
NOTIFICATION_BEAT_LIKE = "beat_like"
NOTIFICATION_COMMENT_REPLY = "comment_reply"


class Notification(Base):
    """Message shown to `receiver_id` about an action taken by `sender_id`."""

    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_receiver_read", "receiver_id", "is_read"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    sender_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
    )
    receiver_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)

    # At most one of these references the content the notification is about.
    post_id: Mapped[str | None] = mapped_column(
        String(32), ForeignKey("post.id", ondelete="CASCADE"), nullable=True
    )
    recording_id: Mapped[str | None] = mapped_column(
        String(32), ForeignKey("recording.id", ondelete="CASCADE"), nullable=True
    )
    beat_id: Mapped[str | None] = mapped_column(
        String(32), ForeignKey("beat.id", ondelete="CASCADE"), nullable=True
    )
    comment_id: Mapped[str | None] = mapped_column(
        String(32), ForeignKey("comment.id", ondelete="CASCADE"), nullable=True
    )

    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    sender: Mapped[User] = relationship(User, foreign_keys=[sender_id], lazy="joined")
