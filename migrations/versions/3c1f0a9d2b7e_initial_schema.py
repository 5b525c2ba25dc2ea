"""initial schema

Revision ID: 3c1f0a9d2b7e
Revises:
Create Date: 2026-10-19 09:12:44.318502

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3c1f0a9d2b7e"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_ID = sa.String(length=32)


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), nullable=False)


def _user_fk(name: str = "user_id", **kwargs) -> sa.Column:
    return sa.Column(
        name,
        _ID,
        sa.ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
        **kwargs,
    )


def _join_table(table: str, column: str, target: str, index: bool) -> None:
    op.create_table(
        table,
        _user_fk(primary_key=True),
        sa.Column(
            column,
            _ID,
            sa.ForeignKey(f"{target}.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        _created_at(),
    )
    if index:
        op.create_index(f"ix_{table}_{column}", table, [column])


def upgrade() -> None:
    """Create content, reaction, notification and storage queue tables."""
    op.create_table(
        "user_account",
        sa.Column("id", _ID, primary_key=True),
        sa.Column("username", sa.String(length=64), nullable=False),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("image", sa.Text(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        _created_at(),
        sa.UniqueConstraint("username"),
    )

    op.create_table(
        "post",
        sa.Column("id", _ID, primary_key=True),
        _user_fk(),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("likes_count", sa.Integer(), nullable=False),
        sa.Column("comments_count", sa.Integer(), nullable=False),
        _created_at(),
        sa.CheckConstraint("likes_count >= 0", name="ck_post_likes_count"),
        sa.CheckConstraint("comments_count >= 0", name="ck_post_comments_count"),
    )
    op.create_index("ix_post_user_id", "post", ["user_id"])

    op.create_table(
        "recording",
        sa.Column("id", _ID, primary_key=True),
        _user_fk(),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("file_path", sa.Text(), nullable=True),
        sa.Column("content_type", sa.String(length=64), nullable=False),
        sa.Column("is_public", sa.Boolean(), nullable=False),
        sa.Column("likes_count", sa.Integer(), nullable=False),
        sa.Column("comments_count", sa.Integer(), nullable=False),
        _created_at(),
        sa.CheckConstraint("likes_count >= 0", name="ck_recording_likes_count"),
        sa.CheckConstraint("comments_count >= 0", name="ck_recording_comments_count"),
    )
    op.create_index("ix_recording_user_id", "recording", ["user_id"])

    op.create_table(
        "beat",
        sa.Column("id", _ID, primary_key=True),
        _user_fk(),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("bpm", sa.Integer(), nullable=True),
        sa.Column("file_path", sa.Text(), nullable=True),
        sa.Column("content_type", sa.String(length=64), nullable=False),
        sa.Column("likes_count", sa.Integer(), nullable=False),
        _created_at(),
        sa.CheckConstraint("likes_count >= 0", name="ck_beat_likes_count"),
    )
    op.create_index("ix_beat_user_id", "beat", ["user_id"])

    op.create_table(
        "comment",
        sa.Column("id", _ID, primary_key=True),
        _user_fk(),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column(
            "post_id", _ID, sa.ForeignKey("post.id", ondelete="CASCADE"), nullable=True
        ),
        sa.Column(
            "recording_id",
            _ID,
            sa.ForeignKey("recording.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column(
            "parent_id", _ID, sa.ForeignKey("comment.id", ondelete="CASCADE"), nullable=True
        ),
        sa.Column("likes_count", sa.Integer(), nullable=False),
        _created_at(),
        sa.CheckConstraint("likes_count >= 0", name="ck_comment_likes_count"),
        sa.CheckConstraint(
            "(post_id IS NULL) <> (recording_id IS NULL)",
            name="ck_comment_single_target",
        ),
    )
    op.create_index("ix_comment_post_id", "comment", ["post_id"])
    op.create_index("ix_comment_recording_id", "comment", ["recording_id"])

    _join_table("post_like", "post_id", "post", index=True)
    _join_table("recording_like", "recording_id", "recording", index=True)
    _join_table("beat_like", "beat_id", "beat", index=True)
    _join_table("comment_like", "comment_id", "comment", index=True)
    _join_table("favorite_post", "post_id", "post", index=False)
    _join_table("favorite_recording", "recording_id", "recording", index=False)
    _join_table("favorite_beat", "beat_id", "beat", index=False)

    op.create_table(
        "follow",
        _user_fk("follower_id", primary_key=True),
        _user_fk("following_id", primary_key=True),
        _created_at(),
        sa.CheckConstraint("follower_id <> following_id", name="ck_follow_not_self"),
    )
    op.create_index("ix_follow_following_id", "follow", ["following_id"])

    op.create_table(
        "notification",
        sa.Column("id", _ID, primary_key=True),
        sa.Column("type", sa.String(length=32), nullable=False),
        _user_fk("sender_id"),
        _user_fk("receiver_id"),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("post_id", _ID, sa.ForeignKey("post.id", ondelete="CASCADE"), nullable=True),
        sa.Column(
            "recording_id",
            _ID,
            sa.ForeignKey("recording.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("beat_id", _ID, sa.ForeignKey("beat.id", ondelete="CASCADE"), nullable=True),
        sa.Column(
            "comment_id", _ID, sa.ForeignKey("comment.id", ondelete="CASCADE"), nullable=True
        ),
        sa.Column("is_read", sa.Boolean(), nullable=False),
        _created_at(),
    )
    op.create_index(
        "ix_notification_receiver_read", "notification", ["receiver_id", "is_read"]
    )

    op.create_table(
        "storage_deletion",
        sa.Column(
            "id",
            sa.BigInteger().with_variant(sa.Integer(), "sqlite"),
            primary_key=True,
            autoincrement=True,
        ),
        sa.Column("bucket", sa.Text(), nullable=False),
        sa.Column("path", sa.Text(), nullable=False),
        sa.Column("status", sa.VARCHAR(length=20), nullable=False),
        sa.Column("retry_count", sa.SmallInteger(), nullable=False),
        sa.Column("last_error", sa.Text(), nullable=True),
    )


def downgrade() -> None:
    """Drop every table created by this revision."""
    op.drop_table("storage_deletion")
    op.drop_index("ix_notification_receiver_read", table_name="notification")
    op.drop_table("notification")
    op.drop_index("ix_follow_following_id", table_name="follow")
    op.drop_table("follow")
    for table in ("favorite_beat", "favorite_recording", "favorite_post"):
        op.drop_table(table)
    for table, column in (
        ("comment_like", "comment_id"),
        ("beat_like", "beat_id"),
        ("recording_like", "recording_id"),
        ("post_like", "post_id"),
    ):
        op.drop_index(f"ix_{table}_{column}", table_name=table)
        op.drop_table(table)
    op.drop_index("ix_comment_recording_id", table_name="comment")
    op.drop_index("ix_comment_post_id", table_name="comment")
    op.drop_table("comment")
    op.drop_index("ix_beat_user_id", table_name="beat")
    op.drop_table("beat")
    op.drop_index("ix_recording_user_id", table_name="recording")
    op.drop_table("recording")
    op.drop_index("ix_post_user_id", table_name="post")
    op.drop_table("post")
    op.drop_table("user_account")
