"""Request/response schemas for permit applications, staff actions and documents."""

import math
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.application import Application

NAME_MAX_LENGTH = 255
ADDRESS_MAX_LENGTH = 1024
REFERENCE_MAX_LENGTH = 1024
REMARKS_MAX_LENGTH = 2_000


def _validate_fee(value: float | None) -> float | None:
    """Ensure a fee is a finite, non-negative amount when present."""
    if value is None:
        return None
    if not math.isfinite(value) or value < 0:
        raise ValueError("fee must be a non-negative amount")
    return round(value, 2)


class ApplicationCreate(BaseModel):
    """New application. Document slots carry storage references from a prior upload."""

    business_name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    business_type: str = Field(default="", max_length=NAME_MAX_LENGTH)
    address: str = Field(default="", max_length=ADDRESS_MAX_LENGTH)
    barangay_clearance: str | None = Field(default=None, max_length=REFERENCE_MAX_LENGTH)
    dti_certificate: str | None = Field(default=None, max_length=REFERENCE_MAX_LENGTH)
    lease_contract: str | None = Field(default=None, max_length=REFERENCE_MAX_LENGTH)


class ApplicationUpdate(BaseModel):
    """
    Edit of an existing application.

    Document slots left unset keep their current reference. fee is honoured only
    for staff/admin edits.
    """

    business_name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    business_type: str = Field(default="", max_length=NAME_MAX_LENGTH)
    address: str = Field(default="", max_length=ADDRESS_MAX_LENGTH)
    barangay_clearance: str | None = Field(default=None, max_length=REFERENCE_MAX_LENGTH)
    dti_certificate: str | None = Field(default=None, max_length=REFERENCE_MAX_LENGTH)
    lease_contract: str | None = Field(default=None, max_length=REFERENCE_MAX_LENGTH)
    fee: float | None = None

    @field_validator("fee")
    @classmethod
    def validate_fee(cls, v: float | None) -> float | None:
        return _validate_fee(v)


class StatusUpdateRequest(BaseModel):
    """Staff decision: approve with a fee, or reject with remarks."""

    status: Literal["approved", "rejected"]
    fee: float | None = None
    remarks: str | None = Field(default=None, max_length=REMARKS_MAX_LENGTH)

    @field_validator("fee")
    @classmethod
    def validate_fee(cls, v: float | None) -> float | None:
        return _validate_fee(v)


class ApplicationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    owner_name: str | None = None
    business_name: str
    business_type: str
    address: str
    barangay_clearance: str | None = None
    dti_certificate: str | None = None
    lease_contract: str | None = None
    status: str
    fee: float
    payment_status: str
    permit_file: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, application: Application, owner_name: str | None = None) -> "ApplicationOut":
        out = cls.model_validate(application)
        out.owner_name = owner_name
        return out


class ApplicationCreateResponse(BaseModel):
    message: str
    application: ApplicationOut


class StaffActionOut(BaseModel):
    """Audit entry with the acting staff member's display name."""

    id: int
    staff_id: int
    staff_name: str | None = None
    application_id: int | None = None
    action: str
    remarks: str | None = None
    created_at: datetime | None = None


class DocumentCreate(BaseModel):
    file_name: str = Field(..., min_length=1, max_length=512)
    file_path: str = Field(..., min_length=1, max_length=REFERENCE_MAX_LENGTH)


class DocumentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    application_id: int
    file_name: str
    file_path: str
    uploaded_at: datetime | None = None
