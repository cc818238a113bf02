"""ORM model for the append-only staff decision audit log."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, func

from app.models.base import Base


class StaffAction(Base):
    """
    One staff/admin decision on an application. Rows are never updated or deleted;
    application_id is nulled if the application itself is deleted.
    """

    __tablename__ = "staff_actions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    staff_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    application_id = Column(
        Integer,
        ForeignKey("applications.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    action = Column(String(32), nullable=False)
    remarks = Column(Text, nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
