"""Shared fixtures: in-memory database, row builders, and a recording notifier."""

from unittest.mock import AsyncMock, MagicMock

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import _enable_sqlite_foreign_keys
from app.models import Application, Base, User
from app.models.application import PAYMENT_NOT_PAID, STATUS_PENDING
from app.models.user import ROLE_OWNER


def make_engine() -> Engine:
    """Fresh in-memory SQLite database shared across threads, with FK enforcement."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    Base.metadata.create_all(engine)
    return engine


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


_user_seq = 0


def add_user(
    db: Session,
    role: str = ROLE_OWNER,
    name: str | None = None,
    email: str | None = None,
    password_hash: str = "not-a-real-hash",
) -> User:
    global _user_seq
    _user_seq += 1
    user = User(
        name=name or f"{role.title()} {_user_seq}",
        email=email or f"{role}{_user_seq}@example.com",
        password_hash=password_hash,
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def add_application(
    db: Session,
    owner: User,
    status: str = STATUS_PENDING,
    fee: float = 0.0,
    business_name: str = "Sari-Sari Store",
    **kwargs: object,
) -> Application:
    """Insert an application directly, bypassing the lifecycle rules."""
    defaults = {
        "business_type": "Retail",
        "address": "Brgy. 1, General MacArthur",
        "payment_status": PAYMENT_NOT_PAID,
    }
    defaults.update(kwargs)
    application = Application(
        user_id=owner.id,
        business_name=business_name,
        status=status,
        fee=fee,
        **defaults,
    )
    db.add(application)
    db.commit()
    db.refresh(application)
    return application


def make_notifier() -> MagicMock:
    """Notifier double whose notify_* coroutines record their calls."""
    notifier = MagicMock()
    notifier.notify_owner = AsyncMock(return_value=0)
    notifier.notify_staff = AsyncMock(return_value=0)
    return notifier
