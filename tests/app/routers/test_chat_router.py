"""Tests for the customer chat router."""

from uuid import uuid4

from app.models.chat_message import ChatMessage


def test_send_message(client, session_id):
    """POST /chat/sessions/{id}/messages stores an anonymous customer message."""
    r = client.post(f"/chat/sessions/{session_id}/messages", json={"body": "Hello"})
    assert r.status_code == 201
    data = r.json()
    assert data["success"] is True
    assert "id" in data


def test_send_message_records_forwarded_ip(db, client, session_id):
    r = client.post(
        f"/chat/sessions/{session_id}/messages",
        json={"body": "Hello"},
        headers={"X-Forwarded-For": "198.51.100.4, 10.0.0.1"},
    )
    assert r.status_code == 201
    message = db.query(ChatMessage).one()
    assert message.origin_ip == "198.51.100.4"


def test_send_message_as_signed_in_customer(
    client, session_id, customer_headers, setup_user
):
    r = client.post(
        f"/chat/sessions/{session_id}/messages",
        json={"body": "Order #1234"},
        headers=customer_headers,
    )
    assert r.status_code == 201
    r = client.get(f"/chat/sessions/{session_id}/messages", headers=customer_headers)
    assert r.json()[0]["author_account_id"] == str(setup_user.id)


def test_send_message_too_long(client, session_id):
    r = client.post(
        f"/chat/sessions/{session_id}/messages", json={"body": "x" * 1001}
    )
    assert r.status_code == 422
    assert r.json()["code"] == "validation_error"


def test_send_empty_message(client, session_id):
    r = client.post(f"/chat/sessions/{session_id}/messages", json={"body": ""})
    assert r.status_code == 422


def test_get_messages(client, session_id):
    """GET /chat/sessions/{id}/messages returns the transcript oldest first."""
    for body in ["first", "second"]:
        client.post(f"/chat/sessions/{session_id}/messages", json={"body": body})
    r = client.get(f"/chat/sessions/{session_id}/messages")
    assert r.status_code == 200
    data = r.json()
    assert [m["body"] for m in data] == ["first", "second"]
    assert all(m["role"] == "customer" for m in data)
    assert all(m["is_read"] is False for m in data)
    assert data[0]["origin_ip"] is None


def test_get_messages_unknown_session(client):
    r = client.get(f"/chat/sessions/{uuid4()}/messages")
    assert r.status_code == 200
    assert r.json() == []


def test_mark_as_read(client, session_id):
    r = client.post(f"/chat/sessions/{session_id}/read")
    assert r.status_code == 200
    data = r.json()
    assert data["success"] is True
    assert data["last_read_at"] is not None


def test_unread_count_anonymous(client):
    r = client.get("/chat/unread-count")
    assert r.status_code == 200
    assert r.json() == {"count": 0}


def test_unread_count_after_staff_reply(
    client, session_id, customer_headers, staff_headers
):
    client.post(
        f"/chat/sessions/{session_id}/messages",
        json={"body": "Help"},
        headers=customer_headers,
    )
    client.post(
        f"/admin/chat/sessions/{session_id}/messages",
        json={"body": "On it"},
        headers=staff_headers,
    )
    r = client.get("/chat/unread-count", headers=customer_headers)
    assert r.json()["count"] == 1

    client.post(f"/chat/sessions/{session_id}/read", headers=customer_headers)
    r = client.get("/chat/unread-count", headers=customer_headers)
    assert r.json()["count"] == 0


def test_invalid_identity_headers(client):
    r = client.get("/chat/unread-count", headers={"X-Account-Id": "not-a-uuid"})
    assert r.status_code == 401
    r = client.get("/chat/unread-count", headers={"X-Account-Id": str(uuid4())})
    assert r.status_code == 401


def test_long_session_id(client, faker):
    """Session ids are opaque and unbounded; long keys round-trip intact."""
    session_id = faker.pystr(min_chars=400, max_chars=400)
    r = client.post(f"/chat/sessions/{session_id}/messages", json={"body": "Hello"})
    assert r.status_code == 201
    r = client.get(f"/chat/sessions/{session_id}/messages")
    assert r.json()[0]["session_id"] == session_id


def test_oversized_forwarded_ip_is_truncated(db, client, session_id):
    r = client.post(
        f"/chat/sessions/{session_id}/messages",
        json={"body": "Hello"},
        headers={"X-Forwarded-For": "a" * 200},
    )
    assert r.status_code == 201
    assert db.query(ChatMessage).one().origin_ip == "a" * 64
