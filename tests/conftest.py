# tests/conftest.py
from __future__ import annotations

import base64
import os
from collections.abc import Generator, Iterator
from itertools import count
from typing import Any
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("STORAGE_CLEANUP_ENABLED", "false")

from rap_arena.api.v1.dependencies import get_storage_service_dep
from rap_arena.core.security import create_access_token
from rap_arena.db.session import Base, enable_sqlite_foreign_keys
from rap_arena.db.session import get_db as app_get_session
from rap_arena.main import app as fastapi_app
from rap_arena.models import Beat, Comment, Post, Recording, User
from rap_arena.services.storage import StorageService

TEST_DB_URL = "sqlite://"

_USERNAME_COUNTER = count(1)

AUDIO_B64 = base64.b64encode(b"ID3\x03\x00fake-audio-bytes").decode()


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Services commit, so every test clears the tables it touched.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def storage_client() -> MagicMock:
    """Stand-in for the boto3 S3 client."""
    client = MagicMock()
    client.generate_presigned_url.return_value = "https://storage.test/signed"
    return client


@pytest.fixture()
def storage_service(storage_client: MagicMock) -> StorageService:
    return StorageService(client=storage_client)


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    storage_service: StorageService,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_storage_service_dep] = lambda: storage_service
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_storage_service_dep, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def make_user(db: Session, name: str | None = None, *, is_active: bool = True) -> User:
    """Persist a user with a unique username."""
    username = f"rapper{next(_USERNAME_COUNTER)}"
    user = User(username=username, name=name, is_active=is_active)
    db.add(user)
    db.commit()
    return user


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def test_user(db_session: Session) -> User:
    """Primary user; owns the content fixtures."""
    return make_user(db_session, "MC Test")


@pytest.fixture()
def other_user(db_session: Session) -> User:
    return make_user(db_session, "Lil Other")


@pytest.fixture()
def auth_token(test_user: User) -> dict[str, str]:
    """Return authorization headers for the primary test user."""
    return auth_headers(test_user)


@pytest.fixture()
def other_auth_token(other_user: User) -> dict[str, str]:
    """Return authorization headers for the secondary test user."""
    return auth_headers(other_user)


@pytest.fixture()
def test_post(db_session: Session, test_user: User) -> Post:
    post = Post(user_id=test_user.id, content="Sixteen bars about nothing")
    db_session.add(post)
    db_session.commit()
    return post


@pytest.fixture()
def test_recording(db_session: Session, test_user: User) -> Recording:
    recording = Recording(
        user_id=test_user.id,
        title="Late Night Freestyle",
        file_path=f"{test_user.id}/take1.webm",
    )
    db_session.add(recording)
    db_session.commit()
    return recording


@pytest.fixture()
def test_beat(db_session: Session, test_user: User) -> Beat:
    beat = Beat(
        user_id=test_user.id,
        title="Boom Bap 92",
        bpm=92,
        file_path=f"{test_user.id}/beat.mp3",
    )
    db_session.add(beat)
    db_session.commit()
    return beat


@pytest.fixture()
def test_comment(db_session: Session, test_post: Post, other_user: User) -> Comment:
    comment = Comment(user_id=other_user.id, post_id=test_post.id, content="Hard verse")
    db_session.add(comment)
    db_session.commit()
    return comment


def refreshed(db: Session, entity: Any) -> Any:
    """Reload ``entity`` so counter columns reflect committed UPDATEs."""
    db.refresh(entity)
    return entity
