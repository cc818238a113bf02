"""
Create an account (e.g. the first admin). Run from project root:
  python -m app.scripts.create_user NAME EMAIL PASSWORD [role]
Example:
  python -m app.scripts.create_user "Permit Admin" admin@example.com your-secure-password admin
"""
import argparse
import sys

from app.core.config import settings
from app.core.database import SessionLocal
from app.core.logging import configure_logging
from app.core.security import NAME_MAX_LEN, PASSWORD_MAX_LEN, PASSWORD_MIN_LEN
from app.models.user import ROLE_OWNER, ROLES
from app.services.accounts import create_user
from app.services.errors import PortalError


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a permit portal account.")
    parser.add_argument("name", help=f"Display name (1-{NAME_MAX_LEN} chars)")
    parser.add_argument("email", help="Login email (unique)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("role", nargs="?", default=ROLE_OWNER, choices=list(ROLES))
    args = parser.parse_args(argv)

    configure_logging(settings.LOG_LEVEL)

    name = args.name.strip()
    if not name or len(name) > NAME_MAX_LEN:
        print("Invalid name length.", file=sys.stderr)
        return 1
    if "@" not in args.email:
        print("Invalid email address.", file=sys.stderr)
        return 1
    if not PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN:
        print(f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        user = create_user(db, name, args.email, args.password, args.role)
    except PortalError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created {user.role} '{user.email}' (id {user.id}).")
    return 0


if __name__ == "__main__":
    sys.exit(main())
