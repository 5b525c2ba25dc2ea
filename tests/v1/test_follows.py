from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from rap_arena.models import Notification
from tests.conftest import make_user


def test_follow_and_unfollow(client, test_user, other_user, other_auth_token):
    response = client.post(f"/api/v1/users/{test_user.id}/follow", headers=other_auth_token)
    assert response.status_code == 200
    assert response.json() == {"message": "Successfully followed user", "isFollowing": True}

    status = client.get(
        f"/api/v1/users/{test_user.id}/follow-status", headers=other_auth_token
    ).json()
    assert status == {"isFollowing": True, "followersCount": 1, "followingCount": 0}

    followers = client.get(f"/api/v1/users/{test_user.id}/followers").json()
    assert [user["id"] for user in followers] == [other_user.id]
    following = client.get(f"/api/v1/users/{other_user.id}/following").json()
    assert [user["username"] for user in following] == [test_user.username]

    response = client.delete(f"/api/v1/users/{test_user.id}/follow", headers=other_auth_token)
    assert response.json()["isFollowing"] is False
    assert client.get(f"/api/v1/users/{test_user.id}/followers").json() == []


def test_follow_sends_notification(client, db_session, test_user, other_auth_token):
    client.post(f"/api/v1/users/{test_user.id}/follow", headers=other_auth_token)
    notification = db_session.execute(
        select(Notification).where(Notification.receiver_id == test_user.id)
    ).scalar_one()
    assert notification.type == "follow"
    assert notification.message == "Lil Other started following you"


def test_cannot_follow_self(client, test_user, auth_token):
    response = client.post(f"/api/v1/users/{test_user.id}/follow", headers=auth_token)
    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot follow yourself"


def test_cannot_follow_twice(client, test_user, other_auth_token):
    client.post(f"/api/v1/users/{test_user.id}/follow", headers=other_auth_token)
    response = client.post(f"/api/v1/users/{test_user.id}/follow", headers=other_auth_token)
    assert response.status_code == 400
    assert response.json()["detail"] == "Already following this user"


def test_cannot_follow_deactivated_user(client, db_session, other_auth_token):
    inactive = make_user(db_session, "Retired", is_active=False)
    response = client.post(f"/api/v1/users/{inactive.id}/follow", headers=other_auth_token)
    assert response.status_code == 400


def test_follow_unknown_user(client, other_auth_token):
    response = client.post("/api/v1/users/ghost/follow", headers=other_auth_token)
    assert response.status_code == 404


def test_unfollow_without_following(client, test_user, other_auth_token):
    response = client.delete(f"/api/v1/users/{test_user.id}/follow", headers=other_auth_token)
    assert response.status_code == 400
    assert response.json()["detail"] == "Not following this user"


def test_anonymous_follow_status(client, test_user):
    response = client.get(f"/api/v1/users/{test_user.id}/follow-status")
    assert response.json()["isFollowing"] is False


def test_sender_lookup_failure_does_not_fail_follow(
    client, db_session, test_user, other_auth_token, mocker
):
    mocker.patch(
        "rap_arena.services.notifications.NotificationService._display_name",
        side_effect=OperationalError("SELECT user_account", {}, Exception("connection reset")),
    )
    response = client.post(f"/api/v1/users/{test_user.id}/follow", headers=other_auth_token)
    assert response.status_code == 200
    assert response.json()["isFollowing"] is True
    assert db_session.execute(select(func.count()).select_from(Notification)).scalar_one() == 0
