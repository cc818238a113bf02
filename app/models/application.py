"""ORM model for business permit applications."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, func

from app.models.base import Base

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"
STATUS_PERMIT_ISSUED = "permit_issued"
STATUSES = (STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED, STATUS_PERMIT_ISSUED)

PAYMENT_NOT_PAID = "not_paid"
PAYMENT_COMPLETED = "completed"


class Application(Base):
    """
    One business's request for a permit.

    The three document slots hold storage references, not file contents.
    payment_status is 'completed' only while status is 'permit_issued'.
    """

    __tablename__ = "applications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    business_name = Column(String(255), nullable=False)
    business_type = Column(String(255), nullable=False, default="")
    address = Column(String(1024), nullable=False, default="")
    barangay_clearance = Column(String(1024), nullable=True)
    dti_certificate = Column(String(1024), nullable=True)
    lease_contract = Column(String(1024), nullable=True)
    status = Column(String(32), nullable=False, default=STATUS_PENDING, index=True)
    fee = Column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    payment_status = Column(String(32), nullable=False, default=PAYMENT_NOT_PAID)
    permit_file = Column(String(1024), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
