"""Payment recording and permit issuance.

Recording a payment against an approved application renders the permit, stores it at
``permits/permit_<application id>.pdf`` (a later issuance for the same application
overwrites it), and only then commits the payment row together with the
permit_issued status. A render or storage failure leaves the database untouched.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models import Application, Payment, User
from app.models.application import PAYMENT_COMPLETED, STATUS_APPROVED
from app.models.payment import PAYMENT_COMPLETED as PAYMENT_ROW_COMPLETED
from app.services import card_payments
from app.services.errors import NotFoundError, PermitRenderError, PreconditionError
from app.services.lifecycle import ACTION_PAY, Actor, check_access, load_application, transition
from app.services.notifications import Notification, NotificationDispatcher
from app.services.permit_pdf import build_permit_content, render_permit_pdf
from app.services.storage import FileStorage

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

PERMITS_FOLDER = "permits"
MANUAL_TRANSACTION_PREFIX = "MANUAL-"
# Amounts closer than this to the assessed fee are treated as equal.
FEE_TOLERANCE = 0.005


@dataclass(frozen=True)
class PaymentReceipt:
    payment: Payment
    application: Application
    permit_file: str


def permit_file_name(application_id: int) -> str:
    return f"{PERMITS_FOLDER}/permit_{application_id}.pdf"


def mint_transaction_id() -> str:
    """Placeholder transaction id for payments taken outside the card processor."""
    return f"{MANUAL_TRANSACTION_PREFIX}{uuid.uuid4().hex[:12].upper()}"


def _load_with_owner(db: Session, application_id: int) -> tuple[Application, str]:
    row = (
        db.query(Application, User.name)
        .join(User, Application.user_id == User.id)
        .filter(Application.id == application_id)
        .first()
    )
    if row is None:
        raise NotFoundError("Application not found")
    application, owner_name = row
    return application, owner_name


async def record_payment(
    db: Session,
    notifier: NotificationDispatcher,
    storage: FileStorage,
    settings: "Settings",
    actor: Actor,
    application_id: int,
    amount: float,
    transaction_id: str | None = None,
    today: date | None = None,
) -> PaymentReceipt:
    """
    Record a completed payment and issue the permit.

    The application must exist (NotFoundError) and be approved (PreconditionError);
    an owner may only pay for their own application. The amount is not checked
    against the assessed fee; a mismatch is only logged.
    """
    application, owner_name = _load_with_owner(db, application_id)
    check_access(actor, application)
    new_status = transition(application.status, ACTION_PAY, actor.role)

    if abs(float(amount) - float(application.fee or 0)) > FEE_TOLERANCE:
        logger.warning(
            "Payment amount differs from assessed fee",
            extra={
                "application_id": application.id,
                "amount": amount,
                "fee": application.fee,
            },
        )

    permit = build_permit_content(
        application_id=application.id,
        owner_name=owner_name,
        business_name=application.business_name,
        business_type=application.business_type,
        address=application.address,
        validity_years=settings.PERMIT_VALIDITY_YEARS,
        today=today,
    )
    try:
        pdf_bytes = render_permit_pdf(permit, settings, assets_dir=storage.root)
    except Exception as e:
        logger.exception("Permit rendering failed", extra={"application_id": application.id})
        raise PermitRenderError("Failed to generate the permit document.") from e
    try:
        permit_file = storage.save(permit_file_name(application.id), pdf_bytes)
    except (OSError, ValueError) as e:
        logger.exception("Permit storage failed", extra={"application_id": application.id})
        raise PermitRenderError("Failed to store the permit document.") from e

    payment = Payment(
        application_id=application.id,
        amount=amount,
        status=PAYMENT_ROW_COMPLETED,
        transaction_id=transaction_id or mint_transaction_id(),
    )
    db.add(payment)
    application.status = new_status
    application.payment_status = PAYMENT_COMPLETED
    application.permit_file = permit_file
    application.updated_at = func.now()
    db.commit()
    db.refresh(payment)
    db.refresh(application)
    logger.info(
        "Permit issued",
        extra={
            "application_id": application.id,
            "payment_id": payment.id,
            "transaction_id": payment.transaction_id,
            "permit_file": permit_file,
        },
    )

    await notifier.notify_owner(
        application.user_id,
        Notification(
            message=(
                f'Your payment for "{application.business_name}" was received. '
                "Your business permit has been issued."
            ),
            application_id=application.id,
            status=new_status,
        ),
    )
    return PaymentReceipt(payment=payment, application=application, permit_file=permit_file)


def get_payment_status(db: Session, application_id: int) -> Payment | None:
    """Latest payment for an application, or None when nothing has been paid."""
    return (
        db.query(Payment)
        .filter(Payment.application_id == application_id)
        .order_by(Payment.payment_date.desc(), Payment.id.desc())
        .first()
    )


def list_payments(db: Session) -> list[tuple[Payment, str | None, str | None]]:
    """All payments with business and owner names, newest first."""
    rows = (
        db.query(Payment, Application.business_name, User.name)
        .outerjoin(Application, Payment.application_id == Application.id)
        .outerjoin(User, Application.user_id == User.id)
        .order_by(Payment.payment_date.desc(), Payment.id.desc())
        .all()
    )
    return [(payment, business_name, owner_name) for payment, business_name, owner_name in rows]


async def start_card_payment(
    db: Session,
    settings: "Settings",
    actor: Actor,
    application_id: int,
    amount: float,
) -> card_payments.PaymentIntent:
    """Create a card authorization for an approved application. Does not change the application."""
    application = load_application(db, application_id)
    check_access(actor, application)
    if application.status != STATUS_APPROVED:
        raise PreconditionError("Application not approved yet")
    return await card_payments.create_payment_intent(amount, application.id, settings)
