"""User model: storefront accounts, owned by the identity provider."""

from __future__ import annotations

import uuid

from sqlalchemy import Boolean, Column, String, Uuid

from app.db import Base
from app.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """Account row. This service only reads it, except for staff promotion."""

    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(256), nullable=False)
    email = Column(String(320), unique=True, nullable=False, index=True)
    is_staff = Column(Boolean, nullable=False, default=False)
