"""Process-wide logging setup and named logger access."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from app.config import get_settings

_RESERVED_ATTRS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "exc_info",
    "exc_text",
    "stack_info",
    "taskName",
    "message",
}

DEFAULT_LOGGER_NAME = "support_chat"


class StructuredFormatter(logging.Formatter):
    """Render records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS
        }
        if extra:
            log_data["extra"] = extra
        return json.dumps(log_data, ensure_ascii=False, default=str)


class LoggingConfig:
    """Configure the root logger once per process.

    JSON lines in production, a readable single-line format elsewhere.
    """

    _configured = False

    def __init__(self, level: Optional[str] = None, force: bool = False) -> None:
        if LoggingConfig._configured and not force:
            return
        settings = get_settings()
        level_name = (level or settings.log_level or "INFO").upper()
        root = logging.getLogger()
        root.setLevel(getattr(logging, level_name, logging.INFO))
        for handler in list(root.handlers):
            root.removeHandler(handler)
        handler = logging.StreamHandler()
        if settings.is_production:
            handler.setFormatter(StructuredFormatter())
        else:
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
            )
        root.addHandler(handler)
        # uvicorn installs its own handlers; route them through ours
        for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
            logging.getLogger(name).handlers.clear()
            logging.getLogger(name).propagate = True
        LoggingConfig._configured = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a named logger under the service namespace."""
    if not name:
        return logging.getLogger(DEFAULT_LOGGER_NAME)
    return logging.getLogger(f"{DEFAULT_LOGGER_NAME}.{name}")
