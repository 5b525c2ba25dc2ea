from __future__ import annotations

from datetime import datetime, timedelta, timezone

from botocore.exceptions import ClientError
from sqlalchemy import func, select

from rap_arena.models import (
    Beat,
    Comment,
    Notification,
    Post,
    PostLike,
    Recording,
    StorageDeletion,
    User,
)
from tests.conftest import make_user, refreshed


def _count(db_session, model) -> int:
    return db_session.execute(select(func.count()).select_from(model)).scalar_one()


def test_deactivate_and_reactivate(client, db_session, test_user, test_post, auth_token):
    response = client.patch("/api/v1/users/account/deactivate", headers=auth_token)
    assert response.status_code == 200
    assert response.json() == {"message": "Account deactivated successfully", "isActive": False}
    assert refreshed(db_session, test_user).is_active is False

    response = client.patch("/api/v1/users/account/deactivate", headers=auth_token)
    assert response.status_code == 400
    assert response.json()["detail"] == "Account is already deactivated"

    # A deactivated account cannot act or be browsed.
    like_url = f"/api/v1/reactions/posts/{test_post.id}"
    assert client.post(like_url, headers=auth_token).status_code == 401
    assert client.get(f"/api/v1/users/{test_user.id}/posts").status_code == 404

    response = client.patch("/api/v1/users/account/reactivate", headers=auth_token)
    assert response.status_code == 200
    assert response.json() == {"message": "Account reactivated successfully", "isActive": True}
    assert client.post(like_url, headers=auth_token).status_code == 200


def test_reactivate_active_account(client, auth_token):
    response = client.patch("/api/v1/users/account/reactivate", headers=auth_token)
    assert response.status_code == 400
    assert response.json()["detail"] == "Account is already active"


def test_account_routes_require_auth(client):
    assert client.patch("/api/v1/users/account/deactivate").status_code == 401
    assert client.patch("/api/v1/users/account/reactivate").status_code == 401
    assert client.delete("/api/v1/users/account").status_code == 401


def test_deactivated_user_gets_no_notifications(
    client, db_session, test_post, auth_token, other_auth_token
):
    client.patch("/api/v1/users/account/deactivate", headers=auth_token)

    response = client.post(f"/api/v1/reactions/posts/{test_post.id}", headers=other_auth_token)
    assert response.status_code == 200
    assert _count(db_session, Notification) == 0


def test_delete_account_removes_files_and_content(
    client,
    db_session,
    storage_client,
    test_user,
    other_user,
    test_post,
    test_recording,
    test_beat,
    auth_token,
    other_auth_token,
):
    recording_path = test_recording.file_path
    beat_path = test_beat.file_path
    other_post = Post(user_id=other_user.id, content="Reply verse")
    db_session.add(other_post)
    db_session.commit()

    client.post(f"/api/v1/reactions/posts/{test_post.id}", headers=other_auth_token)
    client.post(f"/api/v1/reactions/posts/{other_post.id}", headers=auth_token)
    client.post(
        f"/api/v1/posts/{other_post.id}/comments", json={"content": "Cold"}, headers=auth_token
    )
    client.post(f"/api/v1/users/{other_user.id}/follow", headers=auth_token)
    assert refreshed(db_session, other_post).likes_count == 1
    assert refreshed(db_session, other_post).comments_count == 1

    storage_client.delete_object.side_effect = [
        None,
        ClientError({"Error": {"Code": "503", "Message": "Slow Down"}}, "DeleteObject"),
    ]

    response = client.delete("/api/v1/users/account", headers=auth_token)

    assert response.status_code == 200
    assert response.json() == {"message": "Account deleted successfully"}
    assert [c.kwargs for c in storage_client.delete_object.call_args_list] == [
        {"Bucket": "recordings", "Key": recording_path},
        {"Bucket": "beats", "Key": beat_path},
    ]

    db_session.expire_all()
    assert db_session.execute(select(User.id)).scalars().all() == [other_user.id]
    assert _count(db_session, Recording) == 0
    assert _count(db_session, Beat) == 0
    assert db_session.execute(select(Post.id)).scalars().all() == [other_post.id]
    assert _count(db_session, PostLike) == 0
    assert _count(db_session, Comment) == 0
    assert client.get(f"/api/v1/users/{other_user.id}/follow-status").json()["followersCount"] == 0

    assert refreshed(db_session, other_post).likes_count == 0
    assert refreshed(db_session, other_post).comments_count == 0

    queued = db_session.execute(select(StorageDeletion)).scalar_one()
    assert (queued.bucket, queued.path) == ("beats", beat_path)


def test_deleted_account_token_is_rejected(client, auth_token):
    assert client.delete("/api/v1/users/account", headers=auth_token).status_code == 200
    assert client.delete("/api/v1/users/account", headers=auth_token).status_code == 401


def test_list_user_posts_paginates(client, db_session, test_user):
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    posts = [
        Post(user_id=test_user.id, content=f"verse {i}", created_at=start + timedelta(minutes=i))
        for i in range(3)
    ]
    db_session.add_all(posts)
    db_session.commit()

    response = client.get(f"/api/v1/users/{test_user.id}/posts", params={"limit": 2})
    assert response.status_code == 200
    body = response.json()
    assert [p["content"] for p in body["posts"]] == ["verse 2", "verse 1"]
    assert body["pagination"] == {
        "page": 1,
        "limit": 2,
        "total": 3,
        "totalPages": 2,
        "hasNext": True,
        "hasPrev": False,
    }

    body = client.get(
        f"/api/v1/users/{test_user.id}/posts", params={"page": 2, "limit": 2}
    ).json()
    assert [p["content"] for p in body["posts"]] == ["verse 0"]
    assert body["pagination"]["hasNext"] is False
    assert body["pagination"]["hasPrev"] is True


def test_list_posts_unknown_user(client):
    assert client.get("/api/v1/users/nobody/posts").status_code == 404


def test_update_profile(client, db_session, test_user, auth_token):
    response = client.patch(
        f"/api/v1/users/{test_user.id}/profile",
        json={"name": "  MC Renamed ", "username": "renamed"},
        headers=auth_token,
    )
    assert response.status_code == 200
    user = response.json()["user"]
    assert (user["name"], user["username"]) == ("MC Renamed", "renamed")
    assert refreshed(db_session, test_user).username == "renamed"


def test_update_profile_rejects_taken_username(client, db_session, test_user, auth_token):
    taken = make_user(db_session, "Taken")
    response = client.patch(
        f"/api/v1/users/{test_user.id}/profile",
        json={"username": taken.username},
        headers=auth_token,
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Username already taken"

    response = client.patch(
        f"/api/v1/users/{test_user.id}/profile", json={"username": "   "}, headers=auth_token
    )
    assert response.status_code == 400


def test_cannot_edit_another_profile(client, test_user, other_auth_token):
    response = client.patch(
        f"/api/v1/users/{test_user.id}/profile", json={"name": "Hijacked"}, headers=other_auth_token
    )
    assert response.status_code == 403


def test_hidden_full_name(client, db_session, test_user, other_user, auth_token, other_auth_token):
    response = client.patch(
        f"/api/v1/users/{test_user.id}/privacy", json={"hideFullName": True}, headers=auth_token
    )
    assert response.status_code == 200
    assert response.json()["user"]["hideFullName"] is True
    assert response.json()["user"]["name"] == "MC Test"

    client.post(f"/api/v1/users/{other_user.id}/follow", headers=auth_token)
    followers = client.get(f"/api/v1/users/{other_user.id}/followers").json()
    assert followers == [
        {"id": test_user.id, "username": test_user.username, "name": None, "image": None}
    ]

    inbox = client.get("/api/v1/notifications/", headers=other_auth_token).json()
    assert inbox["notifications"][0]["message"] == f"{test_user.username} started following you"
    assert inbox["notifications"][0]["sender"]["name"] is None


def test_cannot_edit_another_users_privacy(client, test_user, other_auth_token):
    response = client.patch(
        f"/api/v1/users/{test_user.id}/privacy", json={"hideFullName": True}, headers=other_auth_token
    )
    assert response.status_code == 403
