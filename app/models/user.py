"""ORM model for portal users (business owners, staff, and administrators)."""

from sqlalchemy import Column, DateTime, Integer, String, func

from app.models.base import Base

ROLE_OWNER = "owner"
ROLE_STAFF = "staff"
ROLE_ADMIN = "admin"
ROLES = (ROLE_OWNER, ROLE_STAFF, ROLE_ADMIN)
STAFF_ROLES = frozenset({ROLE_STAFF, ROLE_ADMIN})

DEFAULT_PROFILE_PIC = "defaultProfile.png"


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    role: 'owner', 'staff' or 'admin'. Only an admin may change a role.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default=ROLE_OWNER)
    profile_pic = Column(String(1024), nullable=False, default=DEFAULT_PROFILE_PIC)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
