"""Registry of content kinds that users can like or favorite.

Each entry ties a URL-facing kind name to the entity table, the join table
that records who reacted, and the denormalized counter kept on the entity.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from rap_arena.core.errors import NotFoundError
from rap_arena.models import (
    Beat,
    BeatLike,
    Comment,
    CommentLike,
    FavoriteBeat,
    FavoritePost,
    FavoriteRecording,
    Post,
    PostLike,
    Recording,
    RecordingLike,
)
from rap_arena.models.notification import (
    NOTIFICATION_BEAT_LIKE,
    NOTIFICATION_POST_LIKE,
    NOTIFICATION_RECORDING_LIKE,
)


@dataclass(frozen=True)
class ReactionKind:
    """Describe how one kind of content stores its reactions.

    Attributes:
        name: Kind name used in URLs, e.g. ``"posts"``.
        label: Human-readable singular used in error messages.
        entity_model: ORM class of the content being reacted to.
        reaction_model: ORM class of the (user, entity) join table.
        entity_column: Name of the join table column referencing the entity.
        counter_column: Counter on the entity kept in step with the join table,
            or None when the join table has no denormalized count.
        comments_column: Comment counter reported by status queries, if any.
        notification_type: Notification sent to the owner on a new reaction.
    """

    name: str
    label: str
    entity_model: type[Any]
    reaction_model: type[Any]
    entity_column: str
    counter_column: str | None = "likes_count"
    comments_column: str | None = None
    notification_type: str | None = None

    @property
    def entity_fk(self) -> Any:
        """Return the join table column referencing the entity."""
        return getattr(self.reaction_model, self.entity_column)


LIKE_KINDS: dict[str, ReactionKind] = {
    "posts": ReactionKind(
        name="posts",
        label="Post",
        entity_model=Post,
        reaction_model=PostLike,
        entity_column="post_id",
        comments_column="comments_count",
        notification_type=NOTIFICATION_POST_LIKE,
    ),
    "recordings": ReactionKind(
        name="recordings",
        label="Recording",
        entity_model=Recording,
        reaction_model=RecordingLike,
        entity_column="recording_id",
        comments_column="comments_count",
        notification_type=NOTIFICATION_RECORDING_LIKE,
    ),
    "beats": ReactionKind(
        name="beats",
        label="Beat",
        entity_model=Beat,
        reaction_model=BeatLike,
        entity_column="beat_id",
        notification_type=NOTIFICATION_BEAT_LIKE,
    ),
    "comments": ReactionKind(
        name="comments",
        label="Comment",
        entity_model=Comment,
        reaction_model=CommentLike,
        entity_column="comment_id",
    ),
}

FAVORITE_KINDS: dict[str, ReactionKind] = {
    "posts": ReactionKind(
        name="posts",
        label="Post",
        entity_model=Post,
        reaction_model=FavoritePost,
        entity_column="post_id",
        counter_column=None,
    ),
    "recordings": ReactionKind(
        name="recordings",
        label="Recording",
        entity_model=Recording,
        reaction_model=FavoriteRecording,
        entity_column="recording_id",
        counter_column=None,
    ),
    "beats": ReactionKind(
        name="beats",
        label="Beat",
        entity_model=Beat,
        reaction_model=FavoriteBeat,
        entity_column="beat_id",
        counter_column=None,
    ),
}


def resolve_kind(registry: dict[str, ReactionKind], name: str) -> ReactionKind:
    """Look up a kind by URL name, raising NotFoundError for unknown kinds."""
    kind = registry.get(name)
    if kind is None:
        raise NotFoundError(f"Unknown content kind '{name}'")
    return kind
