from __future__ import annotations

from rap_arena.models import Notification
from rap_arena.services.notifications import NotificationService
from tests.conftest import make_user


def _seed(db_session, receiver, sender, count: int) -> list[Notification]:
    service = NotificationService(db_session)
    return [service.notify_follow(sender.id, receiver.id) for _ in range(count)]


def test_list_notifications_with_pagination(client, db_session, test_user, other_user, auth_token):
    _seed(db_session, test_user, other_user, 3)

    response = client.get("/api/v1/notifications/?page=1&limit=2", headers=auth_token)
    assert response.status_code == 200
    body = response.json()
    assert len(body["notifications"]) == 2
    assert body["unreadCount"] == 3
    assert body["pagination"] == {
        "page": 1,
        "limit": 2,
        "total": 3,
        "totalPages": 2,
        "hasNext": True,
        "hasPrev": False,
    }
    assert body["notifications"][0]["sender"]["id"] == other_user.id


def test_mark_read_and_unread_filter(client, db_session, test_user, other_user, auth_token):
    first, second = _seed(db_session, test_user, other_user, 2)

    response = client.post(f"/api/v1/notifications/{first.id}/read", headers=auth_token)
    assert response.json() == {"message": "Notification marked as read"}
    response = client.post(f"/api/v1/notifications/{first.id}/read", headers=auth_token)
    assert response.json() == {"message": "Notification already read"}

    body = client.get("/api/v1/notifications/?unread_only=true", headers=auth_token).json()
    assert [n["id"] for n in body["notifications"]] == [second.id]
    assert body["unreadCount"] == 1


def test_cannot_mark_someone_elses_notification(
    client, db_session, test_user, other_user, other_auth_token
):
    (notification,) = _seed(db_session, test_user, other_user, 1)
    response = client.post(f"/api/v1/notifications/{notification.id}/read", headers=other_auth_token)
    assert response.status_code == 403


def test_mark_missing_notification(client, auth_token):
    response = client.post("/api/v1/notifications/missing/read", headers=auth_token)
    assert response.status_code == 404


def test_mark_all_read(client, db_session, test_user, other_user, auth_token):
    _seed(db_session, test_user, other_user, 3)
    response = client.post("/api/v1/notifications/mark-all-read", headers=auth_token)
    assert response.json() == {"message": "All notifications marked as read", "updated": 3}
    body = client.get("/api/v1/notifications/", headers=auth_token).json()
    assert body["unreadCount"] == 0


def test_notifications_require_auth(client):
    assert client.get("/api/v1/notifications/").status_code == 401


def test_no_notification_for_self_or_inactive_receiver(db_session, test_user):
    service = NotificationService(db_session)
    assert service.notify_follow(test_user.id, test_user.id) is None

    inactive = make_user(db_session, is_active=False)
    assert service.notify_follow(test_user.id, inactive.id) is None


def test_comment_preview_is_truncated(db_session, test_user, other_user, test_post):
    notification = NotificationService(db_session).notify_comment(
        commenter_id=other_user.id,
        owner_id=test_user.id,
        content="x" * 80,
        post_id=test_post.id,
    )
    assert notification.message == f'Lil Other commented: "{"x" * 50}..."'
