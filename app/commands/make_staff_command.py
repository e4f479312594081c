"""
Command to grant staff privilege to an existing account.

Usage: python -m app.commands.make_staff_command user@example.com [--revoke]
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from app.db import SessionLocal
from app.exceptions import NotFoundError
from app.infra.logging_config import LoggingConfig, get_logger
from app.models.user import User
from app.services.user_service import UserService

logger = get_logger("commands.make_staff")


class MakeStaffCommand:
    """
    Command to promote (or demote) a user identified by email.
    """

    def __init__(self, db: Session) -> None:
        self.db = db
        self.user_service = UserService(db)
        self.logger = logger

    def execute(self, email: str, is_staff: bool = True) -> User:
        """
        Set the staff flag on the user with the given email.

        Raises:
            NotFoundError: If no user has that email.
        """
        user = self.user_service.set_staff(email, is_staff=is_staff)
        if user is None:
            raise NotFoundError(f'User with email "{email}" not found')
        self.logger.info(
            "%s is now %s", email, "staff" if is_staff else "a regular customer"
        )
        return user


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Grant staff privilege to a user")
    parser.add_argument("email")
    parser.add_argument("--revoke", action="store_true", help="remove staff privilege")
    args = parser.parse_args(argv)

    LoggingConfig()
    db = SessionLocal()
    try:
        MakeStaffCommand(db).execute(args.email, is_staff=not args.revoke)
    except NotFoundError as e:
        logger.error(e.message)
        return 1
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
