"""
Create the tables and one account per role for a fresh local database:
  python -m app.scripts.seed
Existing emails are left untouched. Change the passwords before exposing the server.
"""
import logging
import sys

from app.core.config import settings
from app.core.database import SessionLocal, engine
from app.core.logging import configure_logging
from app.models import Base, User
from app.models.user import ROLE_ADMIN, ROLE_OWNER, ROLE_STAFF
from app.services.accounts import create_user, normalize_email

logger = logging.getLogger(__name__)

DEFAULT_ACCOUNTS = (
    ("Administrator", "admin@example.com", "admin123", ROLE_ADMIN),
    ("Permit Staff", "staff@example.com", "staff123", ROLE_STAFF),
    ("Sample Owner", "owner@example.com", "owner123", ROLE_OWNER),
)


def seed(db) -> int:
    """Create missing default accounts. Returns how many were created."""
    created = 0
    for name, email, password, role in DEFAULT_ACCOUNTS:
        if db.query(User.id).filter(User.email == normalize_email(email)).first() is not None:
            logger.info("Account exists, skipping", extra={"email": email})
            continue
        create_user(db, name, email, password, role)
        created += 1
    return created


def main() -> int:
    configure_logging(settings.LOG_LEVEL)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        created = seed(db)
    finally:
        db.close()
    print(f"Seeded {created} account(s).")
    return 0


if __name__ == "__main__":
    sys.exit(main())
