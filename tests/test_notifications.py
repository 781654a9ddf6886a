from spendwise.crud import crud_notification, crud_user
from spendwise.db.core import NotificationType
from conftest import TestingSession


def notify(user_id: int, title: str):
    db = TestingSession()
    try:
        return crud_notification.create_db_notification(
            db, user_id=user_id, title=title, message="message", notification_type=NotificationType.INFO
        ).id
    finally:
        db.close()


def current_user_id(client) -> int:
    db = TestingSession()
    try:
        username = client.get("/auth/user").json()["username"]
        return crud_user.read_db_user_by_login(db, username).db_id
    finally:
        db.close()


def test_list_newest_first_and_unread_filter(client):
    user_id = current_user_id(client)
    first = notify(user_id, "first")
    second = notify(user_id, "second")

    assert [n["title"] for n in client.get("/notifications/").json()] == ["second", "first"]

    assert client.put(f"/notifications/{second}/read").status_code == 204
    unread = client.get("/notifications/", params={"unread_only": True}).json()
    assert [n["id"] for n in unread] == [first]


def test_mark_all_read(client):
    user_id = current_user_id(client)
    notify(user_id, "a")
    notify(user_id, "b")

    response = client.put("/notifications/read-all")
    assert response.status_code == 200
    assert response.json() == {"updated": 2}
    assert client.get("/notifications/", params={"unread_only": True}).json() == []
    assert client.put("/notifications/read-all").json() == {"updated": 0}


def test_delete_notification(client):
    notification_id = notify(current_user_id(client), "a")
    assert client.delete(f"/notifications/{notification_id}").status_code == 204
    assert client.get("/notifications/").json() == []
    assert client.delete(f"/notifications/{notification_id}").status_code == 404


def test_notifications_are_private(make_client):
    alice = make_client("alice")
    bob = make_client("bob")
    notification_id = notify(current_user_id(alice), "alice only")

    assert bob.get("/notifications/").json() == []
    assert bob.put(f"/notifications/{notification_id}/read").status_code == 404
    assert bob.delete(f"/notifications/{notification_id}").status_code == 404
    assert bob.put("/notifications/read-all").json() == {"updated": 0}
    assert alice.get("/notifications/", params={"unread_only": True}).json()[0]["title"] == "alice only"
