from app.services.chat_message_service import ChatMessageService
from app.services.chat_read_cursor_service import ChatReadCursorService
from app.services.chat_session_status_service import ChatSessionStatusService
from app.services.conversation_service import ConversationService
from app.services.unread_aggregator import ScanUnreadAggregator, UnreadAggregator
from app.services.user_service import UserService

__all__ = [
    "ChatMessageService",
    "ChatReadCursorService",
    "ChatSessionStatusService",
    "ConversationService",
    "ScanUnreadAggregator",
    "UnreadAggregator",
    "UserService",
]
