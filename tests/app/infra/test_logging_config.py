"""Tests for the structured log formatter."""

import json
import logging

from app.infra.logging_config import StructuredFormatter, get_logger


def test_structured_formatter_renders_json():
    record = logging.LogRecord(
        "support_chat.test", logging.INFO, __file__, 1, "hello %s", ("world",), None
    )
    record.session_id = "s1"
    payload = json.loads(StructuredFormatter().format(record))
    assert payload["level"] == "INFO"
    assert payload["message"] == "hello world"
    assert payload["extra"] == {"session_id": "s1"}


def test_get_logger_namespace():
    assert get_logger().name == "support_chat"
    assert get_logger("conversation").name == "support_chat.conversation"
