"""User accounts: registration, login, own-profile edits, and admin staff management."""

import logging

from sqlalchemy.orm import Session

from app.core.security import hash_password, verify_password
from app.models import User
from app.models.user import DEFAULT_PROFILE_PIC, ROLE_OWNER, ROLE_STAFF
from app.services.errors import NotFoundError, PermissionDeniedError, PreconditionError
from app.services.notifications import Notification, NotificationDispatcher

logger = logging.getLogger(__name__)


class InvalidCredentialsError(PermissionDeniedError):
    """Raised when the password does not match."""


def normalize_email(email: str) -> str:
    return email.strip().lower()


def load_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise NotFoundError("User not found")
    return user


def _ensure_email_free(db: Session, email: str, exclude_id: int | None = None) -> None:
    query = db.query(User.id).filter(User.email == email)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    if query.first() is not None:
        raise PreconditionError("Email already in use by another account")


def create_user(db: Session, name: str, email: str, password: str, role: str) -> User:
    email = normalize_email(email)
    _ensure_email_free(db, email)
    user = User(
        name=name.strip(),
        email=email,
        password_hash=hash_password(password),
        role=role,
        profile_pic=DEFAULT_PROFILE_PIC,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("User created", extra={"user_id": user.id, "role": role})
    return user


async def register(
    db: Session,
    notifier: NotificationDispatcher,
    name: str,
    email: str,
    password: str,
    role: str = ROLE_OWNER,
) -> User:
    """Self-registration. Staff are told about every new business owner."""
    user = create_user(db, name, email, password, role)
    if user.role == ROLE_OWNER:
        await notifier.notify_staff(
            Notification(message=f"New business owner registered: {user.name}")
        )
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    """Return the user for valid credentials. NotFoundError for an unknown email."""
    user = db.query(User).filter(User.email == normalize_email(email)).first()
    if user is None:
        raise NotFoundError("User not found")
    if not verify_password(password, user.password_hash):
        raise InvalidCredentialsError("Invalid credentials")
    return user


def update_profile(
    db: Session,
    actor_id: int,
    user_id: int,
    name: str,
    password: str | None = None,
    profile_pic: str | None = None,
) -> User:
    """Edit one's own profile. A blank password keeps the current hash."""
    if actor_id != user_id:
        raise PermissionDeniedError("Unauthorized")
    user = load_user(db, user_id)
    user.name = name.strip()
    if password and password.strip():
        user.password_hash = hash_password(password)
    if profile_pic:
        user.profile_pic = profile_pic
    db.commit()
    db.refresh(user)
    return user


def list_users(db: Session, viewer_role: str) -> list[User]:
    """Admins see every account; staff see business owners only."""
    query = db.query(User)
    if viewer_role == ROLE_STAFF:
        query = query.filter(User.role == ROLE_OWNER)
    return query.order_by(User.created_at.desc(), User.id.desc()).all()


def admin_update_user(db: Session, user_id: int, name: str, email: str, role: str) -> User:
    """Admin edit of name, email and role. The only path that changes a role."""
    user = load_user(db, user_id)
    email = normalize_email(email)
    _ensure_email_free(db, email, exclude_id=user_id)
    user.name = name.strip()
    user.email = email
    user.role = role
    db.commit()
    db.refresh(user)
    logger.info("User updated by admin", extra={"user_id": user.id, "role": role})
    return user


def admin_edit_staff(db: Session, user_id: int, name: str, email: str) -> User:
    user = load_user(db, user_id)
    if user.role != ROLE_STAFF:
        raise PreconditionError("Only staff can be edited")
    email = normalize_email(email)
    _ensure_email_free(db, email, exclude_id=user_id)
    user.name = name.strip()
    user.email = email
    db.commit()
    db.refresh(user)
    return user


def admin_reset_password(db: Session, user_id: int, password: str) -> None:
    user = load_user(db, user_id)
    user.password_hash = hash_password(password)
    db.commit()
    logger.info("Password reset by admin", extra={"user_id": user.id})
