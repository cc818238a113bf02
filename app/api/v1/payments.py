"""Payments: record a completed payment (issues the permit), status lookup, card payment intents."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user, require_staff
from app.api.v1.deps import get_file_storage, get_notifier
from app.api.v1.errors import to_http_exception
from app.core.config import Settings, get_settings
from app.core.database import get_db
from app.models.application import PAYMENT_NOT_PAID
from app.schemas.auth import CurrentUser
from app.schemas.payment import (
    PaymentIntentRequest,
    PaymentIntentResponse,
    PaymentListItem,
    PaymentOut,
    PaymentRecordRequest,
    PaymentRecordResponse,
)
from app.services import permits
from app.services.errors import PortalError
from app.services.lifecycle import get_application
from app.services.notifications import NotificationDispatcher
from app.services.storage import FileStorage

router = APIRouter()


@router.post("", response_model=PaymentRecordResponse)
async def record_payment(
    body: PaymentRecordRequest,
    db: Annotated[Session, Depends(get_db)],
    notifier: Annotated[NotificationDispatcher, Depends(get_notifier)],
    storage: Annotated[FileStorage, Depends(get_file_storage)],
    settings: Annotated[Settings, Depends(get_settings)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> PaymentRecordResponse:
    """
    Record a completed payment for an approved application and issue its permit.

    Returns the permit location. 404 when the application does not exist, 400 when
    it is not approved, 500 when the permit cannot be generated (nothing is recorded).
    """
    try:
        receipt = await permits.record_payment(
            db,
            notifier,
            storage,
            settings,
            current_user,
            body.application_id,
            body.amount,
            transaction_id=body.transaction_id,
        )
    except PortalError as e:
        raise to_http_exception(e) from e
    return PaymentRecordResponse(
        message="Payment recorded and permit issued",
        permit_file=receipt.permit_file,
    )


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    body: PaymentIntentRequest,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> PaymentIntentResponse:
    """Start a card payment. The client confirms it and then posts the result to /payments."""
    try:
        intent = await permits.start_card_payment(
            db, settings, current_user, body.application_id, body.amount
        )
    except PortalError as e:
        raise to_http_exception(e) from e
    return PaymentIntentResponse(client_secret=intent.client_secret, payment_intent_id=intent.id)


@router.get("", response_model=list[PaymentListItem])
def list_payments(
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(require_staff)],
) -> list[PaymentListItem]:
    return [
        PaymentListItem(
            id=payment.id,
            transaction_id=payment.transaction_id,
            amount=payment.amount,
            status=payment.status,
            payment_date=payment.payment_date,
            business_name=business_name,
            owner_name=owner_name,
        )
        for payment, business_name, owner_name in permits.list_payments(db)
    ]


@router.get("/{application_id}", response_model=PaymentOut)
def get_payment_status(
    application_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> PaymentOut:
    """Latest payment for an application, or status 'not_paid' when none exists."""
    try:
        get_application(db, current_user, application_id)
    except PortalError as e:
        raise to_http_exception(e) from e
    payment = permits.get_payment_status(db, application_id)
    if payment is None:
        return PaymentOut(status=PAYMENT_NOT_PAID)
    return PaymentOut.model_validate(payment)
