from __future__ import annotations

import pytest
from sqlalchemy import func, select

from rap_arena.core.errors import ConflictError, NotFoundError
from rap_arena.models import Post, PostLike
from rap_arena.services.kinds import FAVORITE_KINDS, LIKE_KINDS, resolve_kind
from rap_arena.services.reactions import CounterMaintainer, ReactionService, ReactionStore
from tests.conftest import make_user, refreshed

POSTS = LIKE_KINDS["posts"]


def test_store_rejects_duplicate_pair(db_session, test_post, other_user):
    store = ReactionStore(db_session, POSTS)
    row = store.create(other_user.id, test_post.id)
    assert row.post_id == test_post.id
    db_session.commit()

    with pytest.raises(ConflictError):
        store.create(other_user.id, test_post.id)
    db_session.rollback()

    assert store.exists(other_user.id, test_post.id)
    assert store.count(test_post.id) == 1


def test_store_remove_missing_pair_raises(db_session, test_post, other_user):
    with pytest.raises(NotFoundError):
        ReactionStore(db_session, POSTS).remove(other_user.id, test_post.id)


def test_entity_ids_for_user(db_session, test_user, other_user):
    posts = [Post(user_id=test_user.id, content=f"post {i}") for i in range(3)]
    db_session.add_all(posts)
    db_session.commit()
    store = ReactionStore(db_session, POSTS)
    for post in posts[:2]:
        store.create(other_user.id, post.id)
    db_session.commit()

    assert set(store.entity_ids_for_user(other_user.id)) == {posts[0].id, posts[1].id}
    assert store.entity_ids_for_user(test_user.id) == []


def test_counter_never_goes_negative(db_session, test_post):
    counter = CounterMaintainer(db_session, Post, "likes_count")
    counter.decrement(test_post.id)
    db_session.commit()
    assert counter.current(test_post.id) == 0

    counter.increment(test_post.id)
    counter.increment(test_post.id)
    counter.decrement(test_post.id)
    db_session.commit()
    assert counter.current(test_post.id) == 1


def test_counter_current_for_missing_entity(db_session):
    with pytest.raises(NotFoundError):
        CounterMaintainer(db_session, Post, "likes_count").current("missing")


def test_concurrent_insert_is_retried_as_unlike(db_session, test_post, other_user, mocker):
    # Another request inserted the pair between our existence check and our insert.
    ReactionStore(db_session, POSTS).create(other_user.id, test_post.id)
    CounterMaintainer(db_session, Post, "likes_count").increment(test_post.id)
    db_session.commit()

    service = ReactionService(db_session, POSTS)
    mocker.patch.object(service.store, "exists", return_value=False)

    result = service.toggle(other_user.id, test_post.id)

    assert result.is_reacted is False
    assert result.reaction_count == 0
    assert service.store.count(test_post.id) == 0


def test_concurrent_delete_leaves_counter_alone(db_session, test_post, other_user, mocker):
    test_post.likes_count = 3
    db_session.commit()

    service = ReactionService(db_session, POSTS)
    # The pair looked present but another request removed it first.
    mocker.patch.object(service.store, "exists", return_value=True)

    result = service.toggle(other_user.id, test_post.id)

    assert result.is_reacted is False
    assert result.reaction_count == 3


def test_losing_insert_increments_counter_only_once(db_session, test_post, other_user):
    store = ReactionStore(db_session, POSTS)
    counter = CounterMaintainer(db_session, Post, "likes_count")

    store.create(other_user.id, test_post.id)
    counter.increment(test_post.id)
    db_session.commit()

    with pytest.raises(ConflictError):
        store.create(other_user.id, test_post.id)
    db_session.rollback()

    assert counter.current(test_post.id) == 1


def test_status_for_anonymous_and_liker(db_session, test_post, other_user):
    service = ReactionService(db_session, POSTS)
    service.toggle(other_user.id, test_post.id)

    anonymous = service.status(None, test_post.id)
    liker = service.status(other_user.id, test_post.id)

    assert (anonymous.is_reacted, anonymous.reaction_count) == (False, 1)
    assert (liker.is_reacted, liker.reaction_count) == (True, 1)
    assert liker.comments_count == 0


def test_reconcile_repairs_drifted_counter(db_session, test_post):
    for user in (make_user(db_session), make_user(db_session)):
        db_session.add(PostLike(user_id=user.id, post_id=test_post.id))
    test_post.likes_count = 17
    db_session.commit()

    assert ReactionService(db_session, POSTS).reconcile(test_post.id) == 2
    assert refreshed(db_session, test_post).likes_count == 2


def test_reconcile_all_only_touches_drifted_rows(db_session, test_user, other_user):
    clean = Post(user_id=test_user.id, content="in sync")
    drifted = Post(user_id=test_user.id, content="drifted", likes_count=4)
    db_session.add_all([clean, drifted])
    db_session.commit()
    ReactionService(db_session, POSTS).toggle(other_user.id, clean.id)

    assert ReactionService(db_session, POSTS).reconcile_all() == 1
    assert refreshed(db_session, drifted).likes_count == 0
    assert refreshed(db_session, clean).likes_count == 1


def test_service_requires_counter_column():
    with pytest.raises(ValueError):
        ReactionService(None, FAVORITE_KINDS["posts"])  # type: ignore[arg-type]


def test_resolve_kind_unknown_name():
    with pytest.raises(NotFoundError):
        resolve_kind(LIKE_KINDS, "albums")


def test_toggle_missing_entity_writes_nothing(db_session, other_user):
    with pytest.raises(NotFoundError):
        ReactionService(db_session, POSTS).toggle(other_user.id, "missing")
    assert db_session.execute(select(func.count()).select_from(PostLike)).scalar_one() == 0
