"""Tests for ChatMessageService."""

import pytest

from app.exceptions import ValidationError
from app.schemas.chat import ActorRole
from app.services.chat_message_service import ChatMessageService
from app.utils.clock import as_utc


def test_append_message(message_service, session_id, setup_user):
    """Append stores the message with author, role and origin."""
    message = message_service.append(
        session_id, setup_user.id, ActorRole.CUSTOMER, "Hello", origin_ip="10.0.0.1"
    )
    assert message.id is not None
    assert message.session_id == session_id
    assert message.author_account_id == setup_user.id
    assert message.is_staff is False
    assert message.author_role is ActorRole.CUSTOMER
    assert message.body == "Hello"
    assert message.origin_ip == "10.0.0.1"
    assert message_service.get_message(message.id) is not None


def test_append_anonymous_message(message_service, session_id):
    message = message_service.append(session_id, None, ActorRole.CUSTOMER, "Hi there")
    assert message.author_account_id is None
    assert message.author is None


def test_append_accepts_max_length(message_service, session_id):
    """A body of exactly the limit is accepted."""
    message = message_service.append(session_id, None, ActorRole.CUSTOMER, "x" * 1000)
    assert len(message.body) == 1000


@pytest.mark.parametrize("body", ["", "x" * 1001])
def test_append_rejects_invalid_body(message_service, session_id, body):
    """Empty and oversized bodies are rejected and nothing is stored."""
    with pytest.raises(ValidationError):
        message_service.append(session_id, None, ActorRole.CUSTOMER, body)
    assert message_service.count_by_session(session_id) == 0


def test_max_length_is_configurable(db, clock, session_id):
    svc = ChatMessageService(db, clock=clock, max_length=5)
    svc.append(session_id, None, ActorRole.CUSTOMER, "short")
    with pytest.raises(ValidationError):
        svc.append(session_id, None, ActorRole.CUSTOMER, "longer")


def test_list_by_session_oldest_first(message_service, session_id):
    """Without newest_first the oldest messages are kept, ascending."""
    for i in range(5):
        message_service.append(session_id, None, ActorRole.CUSTOMER, f"m{i}")
    messages = message_service.list_by_session(session_id, limit=3)
    assert [m.body for m in messages] == ["m0", "m1", "m2"]


def test_list_by_session_newest_first_keeps_latest(message_service, session_id):
    """newest_first keeps the most recent messages but still returns ascending."""
    for i in range(5):
        message_service.append(session_id, None, ActorRole.CUSTOMER, f"m{i}")
    messages = message_service.list_by_session(session_id, limit=3, newest_first=True)
    assert [m.body for m in messages] == ["m2", "m3", "m4"]


def test_list_by_session_is_scoped(message_service, session_id):
    message_service.append(session_id, None, ActorRole.CUSTOMER, "mine")
    message_service.append("other-session", None, ActorRole.CUSTOMER, "theirs")
    messages = message_service.list_by_session(session_id)
    assert [m.body for m in messages] == ["mine"]


def test_list_by_session_unknown_session(message_service):
    assert message_service.list_by_session("missing") == []


def test_list_session_identifiers(message_service, setup_staff_user):
    message_service.append("s1", None, ActorRole.CUSTOMER, "hi")
    message_service.append("s2", setup_staff_user.id, ActorRole.STAFF, "proactive")
    assert message_service.list_session_identifiers() == {"s1", "s2"}
    assert message_service.list_session_identifiers(only_customer_authored=True) == {
        "s1"
    }


def test_list_session_identifiers_for_account(message_service, setup_user):
    message_service.append("s1", setup_user.id, ActorRole.CUSTOMER, "hi")
    message_service.append("s2", None, ActorRole.CUSTOMER, "anon")
    assert message_service.list_session_identifiers_for_account(setup_user.id) == {
        "s1"
    }


def test_has_message_after(message_service, session_id, clock):
    message = message_service.append(session_id, None, ActorRole.CUSTOMER, "hi")
    assert message_service.has_message_after(
        session_id, ActorRole.CUSTOMER, clock.current.replace(year=2000)
    )
    assert not message_service.has_message_after(
        session_id, ActorRole.CUSTOMER, message.created_at
    )
    assert not message_service.has_message_after(
        session_id, ActorRole.STAFF, clock.current.replace(year=2000)
    )


def test_latest_message_per_session(message_service, setup_staff_user):
    message_service.append("s1", None, ActorRole.CUSTOMER, "first")
    message_service.append("s1", setup_staff_user.id, ActorRole.STAFF, "reply")
    message_service.append("s2", None, ActorRole.CUSTOMER, "only")
    latest = message_service.latest_message_per_session(["s1", "s2"])
    assert latest["s1"].body == "reply"
    assert latest["s2"].body == "only"


def test_latest_created_at_per_session_by_role(message_service, setup_staff_user):
    message_service.append("s1", None, ActorRole.CUSTOMER, "q")
    reply = message_service.append("s1", setup_staff_user.id, ActorRole.STAFF, "a")
    message_service.append("s1", None, ActorRole.CUSTOMER, "follow-up")
    latest = message_service.latest_created_at_per_session(["s1"], role=ActorRole.STAFF)
    assert latest == {"s1": as_utc(reply.created_at)}


def test_customer_identity_per_session(
    message_service, setup_user, setup_other_user, setup_staff_user
):
    """The latest authenticated customer author wins; anonymous and staff are skipped."""
    message_service.append("s1", setup_other_user.id, ActorRole.CUSTOMER, "first")
    message_service.append("s1", setup_user.id, ActorRole.CUSTOMER, "second")
    message_service.append("s1", setup_staff_user.id, ActorRole.STAFF, "reply")
    message_service.append("s2", None, ActorRole.CUSTOMER, "anon")
    identities = message_service.customer_identity_per_session(["s1", "s2"])
    assert identities["s1"].id == setup_user.id
    assert "s2" not in identities
