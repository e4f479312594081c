"""Column mixins shared by models."""

from __future__ import annotations

from sqlalchemy import Column, DateTime

from app.utils.clock import utcnow


class TimestampMixin:
    """created_at / updated_at maintained by the ORM."""

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
