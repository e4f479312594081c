"""Pydantic schemas and value types for the support chat."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

# -----------------------------------------------------------------------------
# Actors
# -----------------------------------------------------------------------------


class ActorRole(str, Enum):
    """Which side of a conversation an actor is on."""

    CUSTOMER = "customer"
    STAFF = "staff"

    @property
    def is_staff(self) -> bool:
        return self is ActorRole.STAFF

    @property
    def other(self) -> "ActorRole":
        return ActorRole.CUSTOMER if self is ActorRole.STAFF else ActorRole.STAFF

    @classmethod
    def from_is_staff(cls, is_staff: bool) -> "ActorRole":
        return cls.STAFF if is_staff else cls.CUSTOMER


@dataclass(frozen=True)
class ActorKey:
    """Owner of a read cursor: a role plus the account, if any.

    Staff are always authenticated; customers may be anonymous, in which
    case the cursor is shared by everyone holding the session key.
    """

    role: ActorRole
    account_id: Optional[UUID] = None

    def __post_init__(self) -> None:
        if self.role is ActorRole.STAFF and self.account_id is None:
            raise ValueError("staff actor keys require an account id")

    @classmethod
    def staff(cls, account_id: UUID) -> "ActorKey":
        return cls(ActorRole.STAFF, account_id)

    @classmethod
    def customer(cls, account_id: Optional[UUID] = None) -> "ActorKey":
        return cls(ActorRole.CUSTOMER, account_id)


@dataclass(frozen=True)
class Identity:
    """Per-request caller identity supplied by the upstream identity provider."""

    account_id: Optional[UUID] = None
    is_staff: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.account_id is not None

    def actor_key(self, role: ActorRole) -> ActorKey:
        return ActorKey(role, self.account_id)


# -----------------------------------------------------------------------------
# Messages
# -----------------------------------------------------------------------------


class MessageCreate(BaseModel):
    """Body of a send-message request. Length is enforced by the message store."""

    body: str


class MessageRead(BaseModel):
    """A transcript entry with its read flag relative to the other side's cursor."""

    id: UUID
    session_id: str
    body: str
    role: ActorRole
    is_staff: bool
    author_account_id: Optional[UUID] = None
    created_at: datetime
    is_read: bool = False
    # Populated for the staff view only
    author_name: Optional[str] = None
    author_email: Optional[str] = None
    origin_ip: Optional[str] = None


class SendResult(BaseModel):
    success: bool = True
    id: UUID


class MarkReadResult(BaseModel):
    success: bool
    last_read_at: Optional[datetime] = None


class UnreadCount(BaseModel):
    count: int = 0


# -----------------------------------------------------------------------------
# Session status
# -----------------------------------------------------------------------------


class SessionStatusRead(BaseModel):
    """Completion state of a conversation. Defaults to open when no row exists."""

    session_id: str
    is_completed: bool = False
    completed_at: Optional[datetime] = None
    completed_by_account_id: Optional[UUID] = None


class CompletionUpdate(BaseModel):
    completed: bool


# -----------------------------------------------------------------------------
# Inbox
# -----------------------------------------------------------------------------


class InboxFilter(str, Enum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"


class InboxSessionSummary(BaseModel):
    """One row of the staff inbox; computed on read, never stored."""

    session_id: str
    last_message_preview: str
    last_message_at: datetime
    last_message_is_staff: bool = False
    customer_account_id: Optional[UUID] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    is_anonymous: bool = True
    is_completed: bool = False
    completed_at: Optional[datetime] = None
    has_unread: bool = False


class InboxCounts(BaseModel):
    total: int = Field(default=0, ge=0)
    active: int = Field(default=0, ge=0)
    completed: int = Field(default=0, ge=0)
    unread: int = Field(default=0, ge=0)
