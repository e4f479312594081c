"""Session status store: per-session completion flag."""

from __future__ import annotations

from typing import Dict, Iterable, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.models.chat_session_status import ChatSessionStatus
from app.schemas.chat import SessionStatusRead
from app.utils.clock import Clock, as_utc, utcnow
from app.utils.db.upsert import upsert


def _to_status(row: ChatSessionStatus) -> SessionStatusRead:
    return SessionStatusRead(
        session_id=row.session_id,
        is_completed=bool(row.is_completed),
        completed_at=as_utc(row.completed_at),
        completed_by_account_id=row.completed_by_account_id,
    )


class ChatSessionStatusService:
    """Reads default to open; the row is created on the first completion toggle."""

    def __init__(self, db: Session, *, clock: Optional[Clock] = None) -> None:
        self.db = db
        self._clock = clock or utcnow

    def get_status_row(self, session_id: str) -> Optional[ChatSessionStatus]:
        return (
            self.db.query(ChatSessionStatus)
            .filter(ChatSessionStatus.session_id == session_id)
            .first()
        )

    def get_status(self, session_id: str) -> SessionStatusRead:
        row = self.get_status_row(session_id)
        if row is None:
            return SessionStatusRead(session_id=session_id)
        return _to_status(row)

    def is_completed(self, session_id: str) -> bool:
        return self.get_status(session_id).is_completed

    def get_statuses(
        self, session_ids: Optional[Iterable[str]] = None
    ) -> Dict[str, SessionStatusRead]:
        """Stored statuses keyed by session. Sessions without a row are absent."""
        query = self.db.query(ChatSessionStatus)
        if session_ids is not None:
            ids = list(session_ids)
            if not ids:
                return {}
            query = query.filter(ChatSessionStatus.session_id.in_(ids))
        return {row.session_id: _to_status(row) for row in query.all()}

    def set_completed(
        self,
        session_id: str,
        completed: bool,
        by_account_id: Optional[UUID],
    ) -> SessionStatusRead:
        """
        Upsert the completion flag.

        completed=True stamps completed_at/completed_by (last write wins);
        completed=False clears both.
        """
        now = self._clock()
        completed_at = now if completed else None
        completed_by = by_account_id if completed else None
        upsert(
            self.db,
            ChatSessionStatus,
            {
                "session_id": session_id,
                "is_completed": completed,
                "completed_at": completed_at,
                "completed_by_account_id": completed_by,
                "created_at": now,
                "updated_at": now,
            },
            ["session_id"],
            {
                "is_completed": completed,
                "completed_at": completed_at,
                "completed_by_account_id": completed_by,
                "updated_at": now,
            },
        )
        self.db.commit()
        return self.get_status(session_id)
