"""Saving posts, recordings and beats to a user's favorites."""
from __future__ import annotations

import logging

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rap_arena.core.errors import ConflictError, NotFoundError
from rap_arena.models import Recording, User
from rap_arena.services.content import hidden_from
from rap_arena.services.kinds import FAVORITE_KINDS, ReactionKind
from rap_arena.services.reactions import ReactionStore

logger = logging.getLogger(__name__)


class FavoriteService:
    """Toggle favorites for one content kind. Favorites carry no counter."""

    def __init__(self, db: Session, kind: ReactionKind) -> None:
        self.db = db
        self.kind = kind
        self.store = ReactionStore(db, kind)

    def _check_visible(self, entity_id: str, viewer_id: str | None) -> None:
        entity = self.db.get(self.kind.entity_model, entity_id)
        if entity is None or hidden_from(self.db, entity, viewer_id):
            raise NotFoundError(f"{self.kind.label} not found")

    def toggle(self, user_id: str, entity_id: str) -> bool:
        """Flip the favorite and return whether the entity is now favorited."""
        self._check_visible(entity_id, user_id)

        try:
            if self.store.exists(user_id, entity_id):
                favorited = self._remove(user_id, entity_id)
            else:
                try:
                    self.store.create(user_id, entity_id)
                    favorited = True
                except ConflictError:
                    self.db.rollback()
                    favorited = self._remove(user_id, entity_id)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return favorited

    def _remove(self, user_id: str, entity_id: str) -> bool:
        try:
            self.store.remove(user_id, entity_id)
        except NotFoundError:
            logger.info("Favorite on %s %s already removed", self.kind.name, entity_id)
        return False

    def is_favorited(self, user_id: str | None, entity_id: str) -> bool:
        self._check_visible(entity_id, user_id)
        return user_id is not None and self.store.exists(user_id, entity_id)


def list_user_favorites(
    db: Session, user_id: str, viewer_id: str | None = None
) -> dict[str, list[str]]:
    """Return favorited entity ids for every kind, newest first.

    Private recordings are left out unless ``viewer_id`` owns them.
    """
    if db.get(User, user_id) is None:
        raise NotFoundError("User not found")
    favorites = {
        name: ReactionStore(db, kind).entity_ids_for_user(user_id)
        for name, kind in FAVORITE_KINDS.items()
    }
    if favorites["recordings"]:
        visible = set(
            db.execute(
                select(Recording.id).where(
                    Recording.id.in_(favorites["recordings"]),
                    or_(Recording.is_public.is_(True), Recording.user_id == viewer_id),
                )
            ).scalars()
        )
        favorites["recordings"] = [rid for rid in favorites["recordings"] if rid in visible]
    return favorites
