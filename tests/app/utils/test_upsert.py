"""Tests for the upsert helper, including the portable fallback."""

import pytest

from app.models.chat_session_status import ChatSessionStatus
from app.utils.db.upsert import _update_or_insert, upsert


@pytest.mark.parametrize("write", [upsert, _update_or_insert])
def test_second_write_updates_existing_row(db, clock, write):
    for completed in (False, True):
        now = clock()
        write(
            db,
            ChatSessionStatus,
            {
                "session_id": "s1",
                "is_completed": completed,
                "created_at": now,
                "updated_at": now,
            },
            ["session_id"],
            {"is_completed": completed, "updated_at": now},
        )
    db.commit()
    rows = db.query(ChatSessionStatus).all()
    assert len(rows) == 1
    assert rows[0].is_completed is True
