from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from jose import jwt

from rap_arena.core.errors import UnauthorizedError
from rap_arena.core.security import create_access_token, decode_subject
from rap_arena.core.settings import settings
from tests.conftest import auth_headers, make_user


def test_token_round_trip():
    assert decode_subject(create_access_token("abc123")) == "abc123"


def test_expired_token_rejected():
    token = jwt.encode(
        {"sub": "abc123", "exp": datetime.now(UTC) - timedelta(minutes=1)},
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    with pytest.raises(UnauthorizedError):
        decode_subject(token)


def test_token_without_subject_rejected():
    token = jwt.encode({"scope": "x"}, settings.secret_key, algorithm=settings.jwt_algorithm)
    with pytest.raises(UnauthorizedError):
        decode_subject(token)


def test_deactivated_user_is_unauthorized(client, db_session, test_post):
    inactive = make_user(db_session, is_active=False)
    response = client.post(
        f"/api/v1/reactions/posts/{test_post.id}", headers=auth_headers(inactive)
    )
    assert response.status_code == 401


def test_token_for_unknown_user(client, test_post):
    headers = {"Authorization": f"Bearer {create_access_token('nobody')}"}
    response = client.get(f"/api/v1/reactions/posts/{test_post.id}/status", headers=headers)
    assert response.status_code == 401
