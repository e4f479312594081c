"""
Request identity supplied by the upstream identity provider.

The gateway in front of this service authenticates callers and forwards
X-Account-Id. The header only names the account; staff privilege is read
from the account row (see the make-staff command). Requests without the
header are anonymous customers.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session

from app.config import get_settings
from app.db import get_db
from app.schemas.chat import Identity
from app.services.user_service import UserService

# Matches the chat_messages.origin_ip column
MAX_IP_LENGTH = 64


def get_identity(
    x_account_id: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> Identity:
    """FastAPI dependency resolving the caller's identity and staff flag."""
    if not x_account_id:
        return Identity()
    try:
        account_id = UUID(x_account_id)
    except ValueError as e:
        raise HTTPException(status_code=401, detail="Invalid account id") from e
    user = UserService(db).get_user(account_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Unknown account")
    return Identity(account_id=user.id, is_staff=bool(user.is_staff))


def get_client_ip(request: Request) -> Optional[str]:
    """First X-Forwarded-For hop, then X-Real-IP, then the socket peer."""
    ip = _client_ip(request)
    return ip[:MAX_IP_LENGTH] if ip else None


def _client_ip(request: Request) -> Optional[str]:
    if get_settings().chat_trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip() or None
        real_ip = request.headers.get("x-real-ip")
        if real_ip:
            return real_ip.strip()
    if request.client is not None:
        return request.client.host
    return None
