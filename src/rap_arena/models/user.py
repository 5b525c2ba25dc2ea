"""SQLAlchemy models for user accounts."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String, Text, false
from sqlalchemy.orm import Mapped, mapped_column

from rap_arena.db.ids import new_id
from rap_arena.db.session import Base
from rap_arena.db.time import utcnow


class User(Base):
    """Account provisioned by the identity provider.

    Rows are created when a user first signs in. This service edits the profile
    fields, flips `is_active` on deactivation and deletes the row on request;
    owned content goes with it through the foreign key cascades.
    """

    __tablename__ = "user_account"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    name: Mapped[str | None] = mapped_column(Text, nullable=True)
    image: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    hide_full_name: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    @property
    def display_name(self) -> str:
        """Return the name shown in notification messages."""
        if self.hide_full_name:
            return self.username or "Someone"
        return self.name or self.username or "Someone"
