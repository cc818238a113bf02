"""Request/response schemas for payments and card payment intents (camelCase on the wire)."""

import math
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

TRANSACTION_ID_MAX_LENGTH = 255


def _validate_amount(value: float) -> float:
    """Recorded amounts may be zero when the assessed fee is zero."""
    if not math.isfinite(value) or value < 0:
        raise ValueError("amount must be a non-negative number")
    return round(value, 2)


def _validate_charge(value: float) -> float:
    """A card charge must be strictly positive."""
    value = _validate_amount(value)
    if value <= 0:
        raise ValueError("amount must be a positive number")
    return value


class PaymentRecordRequest(BaseModel):
    """Confirmation of a completed payment (card or manual)."""

    model_config = ConfigDict(populate_by_name=True)

    application_id: int = Field(..., alias="applicationId", ge=1)
    amount: float
    transaction_id: str | None = Field(
        default=None,
        alias="transactionId",
        max_length=TRANSACTION_ID_MAX_LENGTH,
        description="Processor transaction id; omitted for manual payments.",
    )

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v: float) -> float:
        return _validate_amount(v)


class PaymentRecordResponse(BaseModel):
    success: bool = True
    message: str
    permit_file: str = Field(..., min_length=1, description="Location of the issued permit.")


class PaymentIntentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    application_id: int = Field(..., alias="applicationId", ge=1)
    amount: float

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, v: float) -> float:
        return _validate_charge(v)


class PaymentIntentResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    client_secret: str = Field(..., alias="clientSecret")
    payment_intent_id: str | None = Field(default=None, alias="paymentIntentId")


class PaymentOut(BaseModel):
    """Stored payment row; status is 'not_paid' with no other fields when nothing was paid."""

    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    application_id: int | None = None
    amount: float | None = None
    status: str
    payment_date: datetime | None = None
    transaction_id: str | None = None


class PaymentListItem(BaseModel):
    """Admin view of one payment with its business and owner."""

    id: int
    transaction_id: str | None = None
    amount: float
    status: str
    payment_date: datetime | None = None
    business_name: str | None = None
    owner_name: str | None = None
