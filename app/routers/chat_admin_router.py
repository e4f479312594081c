"""Back-office chat API: inbox, transcripts, replies, read tracking, completion."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query, Request
from fastapi_pagination import Page, Params, paginate
from sqlalchemy.orm import Session

from app.auth.identity import get_client_ip, get_identity
from app.db import get_db
from app.schemas.chat import (
    CompletionUpdate,
    Identity,
    InboxCounts,
    InboxFilter,
    InboxSessionSummary,
    MarkReadResult,
    MessageCreate,
    MessageRead,
    SendResult,
    SessionStatusRead,
    UnreadCount,
)
from app.services.conversation_service import ConversationService

chat_admin_router = APIRouter(prefix="/admin/chat", tags=["Chat admin"])


@chat_admin_router.get("/inbox", response_model=Page[InboxSessionSummary])
def list_inbox(
    params: Params = Depends(),
    inbox_filter: InboxFilter = Query(InboxFilter.ALL, alias="filter"),
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> Page[InboxSessionSummary]:
    """List conversations, most recent activity first."""
    svc = ConversationService(db)
    return paginate(svc.list_inbox(identity, inbox_filter), params=params)


@chat_admin_router.get("/inbox/counts", response_model=InboxCounts)
def get_inbox_counts(
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> InboxCounts:
    svc = ConversationService(db)
    return svc.inbox_counts(identity)


@chat_admin_router.get("/unread-count", response_model=UnreadCount)
def get_unread_count(
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> UnreadCount:
    """Number of sessions with customer messages this staff member has not seen."""
    svc = ConversationService(db)
    return UnreadCount(count=svc.staff_unread_count(identity))


@chat_admin_router.get(
    "/sessions/{session_id}/messages", response_model=List[MessageRead]
)
def get_session_messages(
    session_id: str,
    mark_read: bool = Query(True),
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> List[MessageRead]:
    """Open a transcript; by default this marks it read for the caller."""
    svc = ConversationService(db)
    return svc.staff_transcript(session_id, identity, mark_read=mark_read)


@chat_admin_router.post(
    "/sessions/{session_id}/messages", response_model=SendResult, status_code=201
)
def send_reply(
    session_id: str,
    data: MessageCreate,
    request: Request,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> SendResult:
    """Reply as staff. Rejected with 409 while the session is completed."""
    svc = ConversationService(db)
    message = svc.send_as_staff(
        session_id, identity, data.body, origin_ip=get_client_ip(request)
    )
    return SendResult(id=message.id)


@chat_admin_router.post("/sessions/{session_id}/read", response_model=MarkReadResult)
def mark_as_read(
    session_id: str,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> MarkReadResult:
    svc = ConversationService(db)
    at = svc.mark_read_as_staff(session_id, identity)
    return MarkReadResult(success=True, last_read_at=at)


@chat_admin_router.get(
    "/sessions/{session_id}/status", response_model=SessionStatusRead
)
def get_session_status(
    session_id: str,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> SessionStatusRead:
    svc = ConversationService(db)
    return svc.get_session_status(session_id, identity)


@chat_admin_router.put(
    "/sessions/{session_id}/status", response_model=SessionStatusRead
)
def update_session_status(
    session_id: str,
    data: CompletionUpdate,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> SessionStatusRead:
    """Mark a conversation completed, or reopen it."""
    svc = ConversationService(db)
    return svc.mark_completed(session_id, data.completed, identity)
