"""
Seed script for the contact book database.

Creates the administrator account from SEED_ADMIN_* settings if it does not
exist yet.

Usage:
    SEED_ADMIN_PASSWORD=... python scripts/seed.py
"""
import logging
import sys

from contactbook.core.config import get_settings
from contactbook.core.security import hash_password
from contactbook.db.session import SessionLocal
from contactbook.models.user import User

logger = logging.getLogger(__name__)


def seed_admin(session) -> User | None:
    """Create the admin user. Returns None when it already exists."""
    settings = get_settings()
    if not settings.SEED_ADMIN_PASSWORD:
        raise ValueError("SEED_ADMIN_PASSWORD must be set to seed the admin user")

    existing = session.query(User).filter(User.email == settings.SEED_ADMIN_EMAIL).first()
    if existing:
        logger.info(f"Admin user already exists: {settings.SEED_ADMIN_EMAIL}")
        return None

    admin = User(
        name=settings.SEED_ADMIN_NAME,
        email=settings.SEED_ADMIN_EMAIL,
        hashed_password=hash_password(settings.SEED_ADMIN_PASSWORD),
        role="admin",
    )
    session.add(admin)
    session.commit()
    session.refresh(admin)
    logger.info(f"Seeded admin user: {admin.email}")
    return admin


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    session = SessionLocal()
    try:
        seed_admin(session)
    except Exception:
        session.rollback()
        logger.exception("Error seeding database")
        return 1
    finally:
        session.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
