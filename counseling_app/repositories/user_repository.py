"""User repository - Database operations for users"""
import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import DuplicateKeyError, StorageError
from ..models.user import User

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(self, user: User) -> User:
        """Insert a user.

        A unique-constraint violation on the email surfaces as
        DuplicateKeyError; every other database failure as StorageError.
        """
        user.email = normalize_email(user.email)
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            # Classify by re-checking the unique key instead of parsing
            # dialect-specific error text
            if self.get_by_email(user.email) is not None:
                raise DuplicateKeyError("email", cause=exc) from exc
            logger.error(f"Failed to create user {user.email}: {exc}")
            raise StorageError("Failed to create user", cause=exc) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(f"Failed to create user {user.email}: {exc}")
            raise StorageError("Failed to create user", cause=exc) from exc

        self.db.refresh(user)
        return user

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(
            func.lower(User.email) == normalize_email(email)
        ).first()

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()
