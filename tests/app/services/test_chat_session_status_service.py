"""Tests for ChatSessionStatusService."""

from app.models.chat_session_status import ChatSessionStatus


def test_status_defaults_to_open(db, status_service, session_id):
    """Reading a session without a row reports open and creates nothing."""
    status = status_service.get_status(session_id)
    assert status.is_completed is False
    assert status.completed_at is None
    assert status.completed_by_account_id is None
    assert db.query(ChatSessionStatus).count() == 0


def test_set_completed(status_service, session_id, setup_staff_user):
    status = status_service.set_completed(session_id, True, setup_staff_user.id)
    assert status.is_completed is True
    assert status.completed_at is not None
    assert status.completed_by_account_id == setup_staff_user.id
    assert status_service.is_completed(session_id) is True


def test_set_completed_twice_keeps_one_row(
    db, status_service, session_id, setup_staff_user, setup_second_staff_user
):
    """Re-completing is idempotent on the flag; the latest stamp wins."""
    first = status_service.set_completed(session_id, True, setup_staff_user.id)
    second = status_service.set_completed(session_id, True, setup_second_staff_user.id)
    assert db.query(ChatSessionStatus).count() == 1
    assert second.is_completed is True
    assert second.completed_by_account_id == setup_second_staff_user.id
    assert second.completed_at > first.completed_at


def test_reopen_clears_completion(status_service, session_id, setup_staff_user):
    status_service.set_completed(session_id, True, setup_staff_user.id)
    status = status_service.set_completed(session_id, False, setup_staff_user.id)
    assert status.is_completed is False
    assert status.completed_at is None
    assert status.completed_by_account_id is None


def test_reopen_unknown_session_creates_open_row(db, status_service, session_id):
    status = status_service.set_completed(session_id, False, None)
    assert status.is_completed is False
    assert db.query(ChatSessionStatus).count() == 1


def test_get_statuses(status_service, setup_staff_user):
    status_service.set_completed("s1", True, setup_staff_user.id)
    status_service.set_completed("s2", False, setup_staff_user.id)
    statuses = status_service.get_statuses(["s1", "s2", "s3"])
    assert set(statuses) == {"s1", "s2"}
    assert statuses["s1"].is_completed is True
    assert statuses["s2"].is_completed is False
    assert status_service.get_statuses([]) == {}
