"""SQLAlchemy ORM models."""

from app.models.application import Application
from app.models.base import Base
from app.models.document import Document
from app.models.payment import Payment
from app.models.staff_action import StaffAction
from app.models.user import User

__all__ = ["Application", "Base", "Document", "Payment", "StaffAction", "User"]
