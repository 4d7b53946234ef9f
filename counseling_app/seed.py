"""
Create the default admin account.

Usage: ``python -m counseling_app.seed`` (reads ADMIN_EMAIL, ADMIN_USERNAME
and ADMIN_PASSWORD from the environment or ``.env``).
"""
import logging
import sys

from .core.config import settings
from .core.database import SessionLocal, init_db
from .core.security import UserRole, get_password_hash
from .models.user import User
from .repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


def seed_admin(db, email: str, username: str, password: str) -> User:
    """Create the admin user unless one with that email already exists."""
    users = UserRepository(db)

    existing_user = users.get_by_email(email)
    if existing_user:
        logger.info(f"Admin user {email} already exists, nothing to do")
        return existing_user

    logger.info(f"Creating admin user {email}")
    return users.create(User(
        username=username,
        email=email,
        password_hash=get_password_hash(password),
        role=UserRole.ADMIN,
        is_active=True
    ))


def main() -> int:
    logging.basicConfig(level=settings.LOG_LEVEL)

    if not settings.ADMIN_PASSWORD:
        logger.error("ADMIN_PASSWORD is required to seed the admin user")
        return 1

    init_db()
    db = SessionLocal()
    try:
        seed_admin(db, settings.ADMIN_EMAIL, settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD)
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
