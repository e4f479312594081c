"""Read cursor store: last-read timestamp per (session, actor)."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.infra.logging_config import get_logger
from app.models.chat_read_cursor import ChatReadCursor
from app.schemas.chat import ActorKey, ActorRole
from app.utils.clock import EPOCH, Clock, as_utc, utcnow
from app.utils.db.upsert import upsert

logger = get_logger("chat_read_cursor")


class ChatReadCursorService:
    """Lazily created, overwritten on every read. Missing cursors read as epoch."""

    def __init__(self, db: Session, *, clock: Optional[Clock] = None) -> None:
        self.db = db
        self._clock = clock or utcnow

    def _actor_filter(self, actor_key: ActorKey):
        criteria = [ChatReadCursor.is_staff == actor_key.role.is_staff]
        if actor_key.account_id is None:
            criteria.append(ChatReadCursor.account_id.is_(None))
        else:
            criteria.append(ChatReadCursor.account_id == actor_key.account_id)
        return criteria

    def get_cursor(
        self, session_id: str, actor_key: ActorKey
    ) -> Optional[ChatReadCursor]:
        return (
            self.db.query(ChatReadCursor)
            .filter(
                ChatReadCursor.session_id == session_id,
                *self._actor_filter(actor_key),
            )
            .first()
        )

    def get_last_read(self, session_id: str, actor_key: ActorKey) -> datetime:
        cursor = self.get_cursor(session_id, actor_key)
        if cursor is None:
            return EPOCH
        return as_utc(cursor.last_read_at)

    def get_cursors(
        self,
        actor_key: ActorKey,
        session_ids: Optional[Iterable[str]] = None,
    ) -> Dict[str, datetime]:
        """Cursors of one actor keyed by session. Sessions without one are absent."""
        query = self.db.query(
            ChatReadCursor.session_id, ChatReadCursor.last_read_at
        ).filter(*self._actor_filter(actor_key))
        if session_ids is not None:
            ids = list(session_ids)
            if not ids:
                return {}
            query = query.filter(ChatReadCursor.session_id.in_(ids))
        return {session_id: as_utc(last_read) for session_id, last_read in query.all()}

    def get_latest_for_role(self, session_id: str, role: ActorRole) -> datetime:
        """Furthest cursor any actor of `role` holds on the session, epoch if none."""
        latest = (
            self.db.query(func.max(ChatReadCursor.last_read_at))
            .filter(
                ChatReadCursor.session_id == session_id,
                ChatReadCursor.is_staff == role.is_staff,
            )
            .scalar()
        )
        if latest is None:
            return EPOCH
        return as_utc(latest)

    def mark_read(self, session_id: str, actor_key: ActorKey, at: datetime) -> None:
        """Upsert the cursor to `at`. Overwrites unconditionally, even backwards."""
        now = self._clock()
        values = {
            "session_id": session_id,
            "account_id": actor_key.account_id,
            "is_staff": actor_key.role.is_staff,
            "last_read_at": at,
            "created_at": now,
            "updated_at": now,
        }
        if actor_key.account_id is None:
            conflict_columns = ["session_id", "is_staff"]
            index_where = ChatReadCursor.account_id.is_(None)
        else:
            conflict_columns = ["session_id", "account_id", "is_staff"]
            index_where = ChatReadCursor.account_id.isnot(None)
        upsert(
            self.db,
            ChatReadCursor,
            values,
            conflict_columns,
            {"last_read_at": at, "updated_at": now},
            index_where=index_where,
        )
        self.db.commit()
        logger.debug(
            "Read cursor moved: session=%s role=%s account=%s at=%s",
            session_id,
            actor_key.role.value,
            actor_key.account_id,
            at.isoformat(),
        )
