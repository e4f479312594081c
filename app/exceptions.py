"""
Domain errors raised by the chat stores and the conversation service.

Each error carries the HTTP status the API layer renders it with; services
never build HTTP responses themselves.
"""

from __future__ import annotations

from typing import Optional


class ChatError(Exception):
    """Base class for support chat errors."""

    status_code: int = 400
    code: str = "chat_error"
    default_message: str = "Chat operation failed"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ChatError):
    """Message body is empty or exceeds the maximum length."""

    status_code = 422
    code = "validation_error"
    default_message = "Invalid message"


class ForbiddenError(ChatError):
    """Caller lacks staff privilege for a staff-only operation."""

    status_code = 403
    code = "forbidden"
    default_message = "Staff access required"


class SessionClosedError(ChatError):
    """Staff tried to reply into a completed conversation."""

    status_code = 409
    code = "session_closed"
    default_message = "Conversation is completed"


class NotFoundError(ChatError):
    """Referenced aggregate does not exist."""

    status_code = 404
    code = "not_found"
    default_message = "Not found"
