"""Toggleable likes with a denormalized counter.

The pieces are layered leaves-first:

- ``ReactionStore`` tracks which (user, entity) pairs exist.
- ``CounterMaintainer`` moves the entity's counter with single UPDATE
  statements so concurrent likes from different users never lose updates.
- ``ReactionService`` is the coordinator the API calls. It runs the existence
  check, the join-row mutation and the counter mutation in one transaction and
  reports the counter as re-read after commit.

Two toggles racing on the same pair are not serialized. The composite primary
key on the join table lets exactly one insert win; the loser is retried as a
toggle-off, so the final state is whichever request commits last.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from rap_arena.core.errors import ConflictError, NotFoundError
from rap_arena.db.time import utcnow
from rap_arena.services.content import hidden_from
from rap_arena.services.kinds import ReactionKind
from rap_arena.services.notifications import NotificationService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToggleResult:
    """State of a (user, entity) pair after a toggle."""

    is_reacted: bool
    reaction_count: int


@dataclass(frozen=True)
class ReactionStatus:
    """Read-only view of an entity's reactions from one caller's perspective."""

    is_reacted: bool
    reaction_count: int
    comments_count: int | None = None


class ReactionStore:
    """Existence tracking for (user, entity) pairs in a join table."""

    def __init__(self, db: Session, kind: ReactionKind) -> None:
        self.db = db
        self.kind = kind
        self.model = kind.reaction_model

    def _pair(self, user_id: str, entity_id: str) -> tuple[Any, Any]:
        return self.model.user_id == user_id, self.kind.entity_fk == entity_id

    def exists(self, user_id: str, entity_id: str) -> bool:
        """Return True when the user has reacted to the entity."""
        stmt = select(self.model.user_id).where(*self._pair(user_id, entity_id)).limit(1)
        return self.db.execute(stmt).first() is not None

    def create(self, user_id: str, entity_id: str) -> Any:
        """Insert the pair and return the new row.

        Raises:
            ConflictError: If the pair already exists. The caller must roll back
                the session before issuing further statements.
        """
        stmt = insert(self.model).values(
            {
                "user_id": user_id,
                self.kind.entity_column: entity_id,
                "created_at": utcnow(),
            }
        )
        try:
            self.db.execute(stmt)
        except IntegrityError as err:
            raise ConflictError(f"{self.kind.label} already liked") from err
        return self.db.get(self.model, (user_id, entity_id))

    def remove(self, user_id: str, entity_id: str) -> None:
        """Delete the pair.

        Raises:
            NotFoundError: If no row matched.
        """
        result = self.db.execute(
            delete(self.model)
            .where(*self._pair(user_id, entity_id))
            .execution_options(synchronize_session="evaluate")
        )
        if result.rowcount == 0:
            raise NotFoundError(f"{self.kind.label} reaction not found")

    def count(self, entity_id: str) -> int:
        """Return the number of join rows referencing the entity."""
        stmt = select(func.count()).select_from(self.model).where(self.kind.entity_fk == entity_id)
        return int(self.db.execute(stmt).scalar_one())

    def entity_ids_for_user(self, user_id: str) -> list[str]:
        """Return ids of entities the user has reacted to, newest first."""
        stmt = (
            select(self.kind.entity_fk)
            .where(self.model.user_id == user_id)
            .order_by(self.model.created_at.desc())
        )
        return list(self.db.execute(stmt).scalars())


class CounterMaintainer:
    """Atomic +1/-1 arithmetic on one integer column of an entity table."""

    def __init__(self, db: Session, model: type[Any], column_name: str) -> None:
        self.db = db
        self.model = model
        self.column = getattr(model, column_name)

    def increment(self, entity_id: str) -> None:
        """Add one to the counter in a single UPDATE statement."""
        self.db.execute(
            update(self.model)
            .where(self.model.id == entity_id)
            .values({self.column: self.column + 1})
        )

    def decrement(self, entity_id: str) -> None:
        """Subtract one from the counter, never going below zero."""
        self.db.execute(
            update(self.model)
            .where(self.model.id == entity_id, self.column > 0)
            .values({self.column: self.column - 1})
        )

    def current(self, entity_id: str) -> int:
        """Read the stored counter value."""
        value = self.db.execute(
            select(self.column).where(self.model.id == entity_id)
        ).scalar_one_or_none()
        if value is None:
            raise NotFoundError("Counter owner not found")
        return int(value)

    def reconcile(self, entity_id: str, source: Any) -> int:
        """Overwrite the counter with a fresh count of ``source`` rows.

        ``source`` is the foreign key column referencing this entity; the count
        is taken in the same UPDATE statement as a correlated subquery.
        """
        tally = (
            select(func.count())
            .where(source == self.model.id)
            .correlate(self.model)
            .scalar_subquery()
        )
        self.db.execute(
            update(self.model)
            .where(self.model.id == entity_id)
            .values({self.column: tally})
            .execution_options(synchronize_session="fetch")
        )
        return self.current(entity_id)


class ReactionService:
    """Toggle and query likes for one content kind."""

    def __init__(
        self,
        db: Session,
        kind: ReactionKind,
        notifications: NotificationService | None = None,
    ) -> None:
        if kind.counter_column is None:
            raise ValueError(f"Kind '{kind.name}' has no counter to maintain")
        self.db = db
        self.kind = kind
        self.store = ReactionStore(db, kind)
        self.counter = CounterMaintainer(db, kind.entity_model, kind.counter_column)
        self.notifications = notifications

    def _get_entity_or_404(self, entity_id: str, viewer_id: str | None = None) -> Any:
        entity = self.db.get(self.kind.entity_model, entity_id)
        if entity is None or hidden_from(self.db, entity, viewer_id):
            raise NotFoundError(f"{self.kind.label} not found")
        return entity

    def toggle(self, user_id: str, entity_id: str) -> ToggleResult:
        """Flip the caller's like on an entity.

        Args:
            user_id: Identifier of the authenticated caller.
            entity_id: Identifier of the entity being liked or unliked.

        Returns:
            The pair's new state and the entity's counter as stored after commit.

        Raises:
            NotFoundError: If the entity does not exist or is a private recording
                (or a comment on one) the caller does not own. Nothing is written.
        """
        entity = self._get_entity_or_404(entity_id, user_id)
        owner_id = entity.user_id

        try:
            if self.store.exists(user_id, entity_id):
                reacted = self._toggle_off(user_id, entity_id)
            else:
                reacted = self._toggle_on(user_id, entity_id)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        count = self.counter.current(entity_id)
        logger.debug(
            "User %s %s %s %s (count=%d)",
            user_id,
            "liked" if reacted else "unliked",
            self.kind.label.lower(),
            entity_id,
            count,
        )

        if reacted and self.notifications is not None and self.kind.notification_type:
            self.notifications.notify_like(
                self.kind.notification_type,
                liker_id=user_id,
                owner_id=owner_id,
                entity=entity,
            )

        return ToggleResult(is_reacted=reacted, reaction_count=count)

    def _toggle_on(self, user_id: str, entity_id: str) -> bool:
        try:
            self.store.create(user_id, entity_id)
        except ConflictError:
            # Another request for the same pair inserted first.
            logger.info(
                "Concurrent like on %s %s by %s; treating as unlike",
                self.kind.name,
                entity_id,
                user_id,
            )
            self.db.rollback()
            return self._toggle_off(user_id, entity_id)
        self.counter.increment(entity_id)
        return True

    def _toggle_off(self, user_id: str, entity_id: str) -> bool:
        try:
            self.store.remove(user_id, entity_id)
        except NotFoundError:
            # Another request for the same pair already removed it.
            logger.info(
                "Concurrent unlike on %s %s by %s; counter left unchanged",
                self.kind.name,
                entity_id,
                user_id,
            )
            return False
        self.counter.decrement(entity_id)
        return False

    def status(self, user_id: str | None, entity_id: str) -> ReactionStatus:
        """Return like state for the caller; anonymous callers never have liked."""
        self._get_entity_or_404(entity_id, user_id)
        is_reacted = user_id is not None and self.store.exists(user_id, entity_id)
        comments_count = None
        if self.kind.comments_column:
            comments_count = CounterMaintainer(
                self.db, self.kind.entity_model, self.kind.comments_column
            ).current(entity_id)
        return ReactionStatus(
            is_reacted=is_reacted,
            reaction_count=self.counter.current(entity_id),
            comments_count=comments_count,
        )

    def reconcile(self, entity_id: str) -> int:
        """Recount the entity's likes from the join table and commit."""
        if self.db.get(self.kind.entity_model, entity_id) is None:
            raise NotFoundError(f"{self.kind.label} not found")
        try:
            count = self.counter.reconcile(entity_id, self.kind.entity_fk)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return count

    def reconcile_all(self) -> int:
        """Recount every entity of this kind whose counter has drifted.

        Returns:
            Number of entities whose counter was corrected.
        """
        model = self.kind.entity_model
        tally = (
            select(func.count())
            .where(self.kind.entity_fk == model.id)
            .correlate(model)
            .scalar_subquery()
        )
        drifted = list(
            self.db.execute(select(model.id).where(self.counter.column != tally)).scalars()
        )
        for entity_id in drifted:
            self.counter.reconcile(entity_id, self.kind.entity_fk)
            logger.warning("Corrected drifted %s counter on %s", self.kind.name, entity_id)
        self.db.commit()
        return len(drifted)
