"""User lookups and staff promotion."""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from app.models.user import User


class UserService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_user(self, user_id: UUID) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def set_staff(self, email: str, is_staff: bool = True) -> Optional[User]:
        """Grant or revoke staff privilege. Returns None if no user has that email."""
        user = self.get_user_by_email(email)
        if user is None:
            return None
        user.is_staff = is_staff
        self.db.commit()
        self.db.refresh(user)
        return user
