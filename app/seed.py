# app/seed.py
"""
Bootstrap data for a fresh database.

    ADMIN_PASSWORD=... python -m app.seed

Creates the tables and the first admin account. Further staff accounts,
groups and courses are managed through the /admin, /groups and /courses
endpoints by that admin.
"""
import logging
import sys

from sqlalchemy.orm import Session

from app.config import settings
from app.database import Base, SessionLocal, engine
from app.logging_config import setup_logging
from app.models.user import User
from app.utils.hashing import hash_password

# every model module must be imported before create_all
from app.models import course, group, room, schedule  # noqa: F401

logger = logging.getLogger("app.seed")


def seed_admin(db: Session, username: str, password: str) -> User:
    """Create the admin if missing; an existing user is promoted, never re-passworded."""
    user = db.query(User).filter(User.username == username).first()
    if user:
        if user.role != "admin":
            user.role = "admin"
            db.commit()
            logger.info("user %s promoted to admin", username)
        return user

    user = User(
        username=username,
        password_hash=hash_password(password),
        role="admin",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("admin %s created (id=%s)", username, user.id)
    return user


def main() -> int:
    setup_logging()
    if not settings.ADMIN_PASSWORD:
        logger.error("ADMIN_PASSWORD is not set")
        return 1

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_admin(db, settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD)
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
