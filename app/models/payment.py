"""ORM model for permit fee payments."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, func

from app.models.base import Base

PAYMENT_PENDING = "pending"
PAYMENT_COMPLETED = "completed"
PAYMENT_FAILED = "failed"


class Payment(Base):
    """One payment transaction against an application."""

    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    application_id = Column(
        Integer,
        ForeignKey("applications.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    amount = Column(Numeric(12, 2, asdecimal=False), nullable=False)
    status = Column(String(32), nullable=False, default=PAYMENT_PENDING)
    payment_date = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    transaction_id = Column(String(255), nullable=True)
