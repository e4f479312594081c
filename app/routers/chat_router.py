"""Customer-facing chat API: send, read transcript, mark read, unread badge."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.auth.identity import get_client_ip, get_identity
from app.db import get_db
from app.schemas.chat import (
    ActorKey,
    Identity,
    MarkReadResult,
    MessageCreate,
    MessageRead,
    SendResult,
    UnreadCount,
)
from app.services.conversation_service import ConversationService

chat_router = APIRouter(prefix="/chat", tags=["Chat"])


@chat_router.post(
    "/sessions/{session_id}/messages", response_model=SendResult, status_code=201
)
def send_message(
    session_id: str,
    data: MessageCreate,
    request: Request,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> SendResult:
    """Post a customer message into a session."""
    svc = ConversationService(db)
    message = svc.send_as_customer(
        session_id,
        identity.account_id,
        data.body,
        origin_ip=get_client_ip(request),
    )
    return SendResult(id=message.id)


@chat_router.get("/sessions/{session_id}/messages", response_model=List[MessageRead])
def get_messages(
    session_id: str,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> List[MessageRead]:
    """Transcript for the customer widget, oldest first."""
    svc = ConversationService(db)
    return svc.customer_transcript(session_id, identity.account_id)


@chat_router.post("/sessions/{session_id}/read", response_model=MarkReadResult)
def mark_as_read(
    session_id: str,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> MarkReadResult:
    """Advance the customer's read cursor to now."""
    svc = ConversationService(db)
    at = svc.mark_read(session_id, ActorKey.customer(identity.account_id))
    return MarkReadResult(success=True, last_read_at=at)


@chat_router.get("/unread-count", response_model=UnreadCount)
def get_unread_count(
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> UnreadCount:
    """Sessions with an unread staff reply. Anonymous callers always get 0."""
    svc = ConversationService(db)
    return UnreadCount(count=svc.customer_unread_count(identity.account_id))
