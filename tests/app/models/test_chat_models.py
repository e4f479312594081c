"""Tests for chat model column definitions."""

import pytest
from sqlalchemy import Text

from app.models.chat_message import ChatMessage
from app.models.chat_read_cursor import ChatReadCursor
from app.models.chat_session_status import ChatSessionStatus


@pytest.mark.parametrize("model", [ChatMessage, ChatReadCursor, ChatSessionStatus])
def test_session_id_is_unbounded_text(model):
    column_type = model.__table__.c.session_id.type
    assert isinstance(column_type, Text)
    assert column_type.length is None
