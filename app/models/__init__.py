from app.models.chat_message import ChatMessage
from app.models.chat_read_cursor import ChatReadCursor
from app.models.chat_session_status import ChatSessionStatus
from app.models.user import User

__all__ = [
    "ChatMessage",
    "ChatReadCursor",
    "ChatSessionStatus",
    "User",
]
