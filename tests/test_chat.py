"""
Tests for client/specialist chat threads.

This test suite covers:
- Opening threads (link required, one thread per pair)
- Posting and listing messages with the `after` cursor
- Unread flags and read markers
- Participant-only access
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
import uuid

from test_fixtures import client, auth, register, linked_pair
from domain.models import ChatMessage, SessionLocal
from services.chat_service import has_unread, to_naive_utc


def open_thread(user, counterpart):
    resp = client.post(
        "/chat/threads", json={"counterpart_id": counterpart["user_id"]}, headers=auth(user)
    )
    assert resp.status_code == 200, resp.text
    return resp.json()


def post(user, thread, body):
    resp = client.post(
        f"/chat/threads/{thread['thread_id']}/messages", json={"body": body}, headers=auth(user)
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


# =============================================================================
# THREADS
# =============================================================================


def test_open_thread_is_idempotent_for_both_sides():
    specialist, client_user = linked_pair()

    first = open_thread(client_user, specialist)
    again = open_thread(specialist, client_user)

    assert first["thread_id"] == again["thread_id"]
    assert first["client_id"] == client_user["user_id"]
    assert first["specialist_id"] == specialist["user_id"]
    assert first["has_unread"] is False
    assert first["last_message_at"] is None


def test_open_thread_requires_link():
    specialist = register("specialist")
    client_user = register("client")
    resp = client.post(
        "/chat/threads", json={"counterpart_id": specialist["user_id"]}, headers=auth(client_user)
    )
    assert resp.status_code == 403


def test_open_thread_between_same_roles():
    a = register("client")
    b = register("client", profile_type="athlete")
    resp = client.post("/chat/threads", json={"counterpart_id": b["user_id"]}, headers=auth(a))
    assert resp.status_code == 400


def test_open_thread_with_unknown_user():
    client_user = register("client")
    resp = client.post(
        "/chat/threads", json={"counterpart_id": str(uuid.uuid4())}, headers=auth(client_user)
    )
    assert resp.status_code == 404


# =============================================================================
# MESSAGES
# =============================================================================


def test_post_and_list_messages():
    specialist, client_user = linked_pair()
    thread = open_thread(client_user, specialist)

    first = post(client_user, thread, "  Hello! Can I eat bananas?  ")
    second = post(specialist, thread, "Yes, one a day.")

    assert first["body"] == "Hello! Can I eat bananas?"
    assert first["sender_id"] == client_user["user_id"]

    path = f"/chat/threads/{thread['thread_id']}/messages"
    messages = client.get(path, headers=auth(specialist)).json()
    assert [m["message_id"] for m in messages] == [first["message_id"], second["message_id"]]

    newer = client.get(path, params={"after": first["created_at"]}, headers=auth(client_user)).json()
    assert [m["message_id"] for m in newer] == [second["message_id"]]

    limited = client.get(path, params={"limit": 1}, headers=auth(client_user)).json()
    assert len(limited) == 1


def test_paging_through_messages_with_equal_timestamps():
    specialist, client_user = linked_pair()
    thread = open_thread(client_user, specialist)
    stamp = datetime(2025, 3, 1, 12, 0)
    with SessionLocal() as db:
        for body in ("one", "two", "three"):
            db.add(
                ChatMessage(
                    thread_id=uuid.UUID(thread["thread_id"]),
                    sender_id=uuid.UUID(client_user["user_id"]),
                    body=body,
                    created_at=stamp,
                )
            )
        db.commit()

    path = f"/chat/threads/{thread['thread_id']}/messages"
    seen = []
    params = {"limit": 1}
    for _ in range(5):
        page = client.get(path, params=params, headers=auth(specialist)).json()
        if not page:
            break
        seen.extend(page)
        last = page[-1]
        params = {"limit": 1, "after": last["created_at"], "after_id": last["message_id"]}

    assert sorted(m["body"] for m in seen) == ["one", "three", "two"]
    assert len({m["message_id"] for m in seen}) == 3

    # the timestamp alone skips every message sharing it
    resp = client.get(path, params={"after": seen[0]["created_at"]}, headers=auth(specialist))
    assert resp.json() == []


def test_blank_message_is_rejected():
    specialist, client_user = linked_pair()
    thread = open_thread(client_user, specialist)
    resp = client.post(
        f"/chat/threads/{thread['thread_id']}/messages",
        json={"body": "   "},
        headers=auth(client_user),
    )
    assert resp.status_code == 400


def test_unread_flags_and_mark_read():
    specialist, client_user = linked_pair()
    thread = open_thread(client_user, specialist)
    post(client_user, thread, "x" * 300)

    specialist_view = client.get("/chat/threads", headers=auth(specialist)).json()
    assert len(specialist_view) == 1
    assert specialist_view[0]["has_unread"] is True
    assert specialist_view[0]["last_message_preview"] == "x" * 140
    assert specialist_view[0]["last_message_sender_id"] == client_user["user_id"]

    client_view = client.get("/chat/threads", headers=auth(client_user)).json()
    assert client_view[0]["has_unread"] is False

    resp = client.post(f"/chat/threads/{thread['thread_id']}/read", headers=auth(specialist))
    assert resp.status_code == 200
    assert resp.json()["has_unread"] is False
    assert client.get("/chat/threads", headers=auth(specialist)).json()[0]["has_unread"] is False


def test_non_participants_are_forbidden():
    specialist, client_user = linked_pair()
    thread = open_thread(client_user, specialist)
    outsider = register("client", profile_type="athlete")

    path = f"/chat/threads/{thread['thread_id']}/messages"
    assert client.get(path, headers=auth(outsider)).status_code == 403
    assert client.post(path, json={"body": "hi"}, headers=auth(outsider)).status_code == 403
    assert client.get(f"/chat/threads/{uuid.uuid4()}/messages", headers=auth(outsider)).status_code == 404


# =============================================================================
# HELPERS
# =============================================================================


def test_has_unread_rules():
    client_id, specialist_id = uuid.uuid4(), uuid.uuid4()
    now = datetime(2025, 3, 1, 12, 0)
    thread = SimpleNamespace(
        client_id=client_id,
        specialist_id=specialist_id,
        last_message_at=now,
        last_message_sender_id=specialist_id,
        client_last_read_at=None,
        specialist_last_read_at=None,
    )

    assert has_unread(thread, client_id) is True
    assert has_unread(thread, specialist_id) is False

    thread.client_last_read_at = now + timedelta(seconds=1)
    assert has_unread(thread, client_id) is False

    thread.last_message_at = None
    assert has_unread(thread, client_id) is False


def test_to_naive_utc():
    aware = datetime(2025, 3, 1, 15, 0, tzinfo=timezone(timedelta(hours=3)))
    assert to_naive_utc(aware) == datetime(2025, 3, 1, 12, 0)
    assert to_naive_utc(datetime(2025, 3, 1, 12, 0)) == datetime(2025, 3, 1, 12, 0)
    assert to_naive_utc(None) is None
