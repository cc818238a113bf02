"""Pydantic request/response schemas."""

from app.schemas.application import (
    ApplicationCreate,
    ApplicationCreateResponse,
    ApplicationOut,
    ApplicationUpdate,
    DocumentCreate,
    DocumentOut,
    StaffActionOut,
    StatusUpdateRequest,
)
from app.schemas.auth import CurrentUser, LoginRequest, RegisterRequest, TokenResponse
from app.schemas.common import MessageResponse
from app.schemas.health import HealthResponse
from app.schemas.payment import (
    PaymentIntentRequest,
    PaymentIntentResponse,
    PaymentListItem,
    PaymentOut,
    PaymentRecordRequest,
    PaymentRecordResponse,
)
from app.schemas.user import UserOut, UsersListResponse

__all__ = [
    "ApplicationCreate",
    "ApplicationCreateResponse",
    "ApplicationOut",
    "ApplicationUpdate",
    "CurrentUser",
    "DocumentCreate",
    "DocumentOut",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "PaymentIntentRequest",
    "PaymentIntentResponse",
    "PaymentListItem",
    "PaymentOut",
    "PaymentRecordRequest",
    "PaymentRecordResponse",
    "RegisterRequest",
    "StaffActionOut",
    "StatusUpdateRequest",
    "TokenResponse",
    "UserOut",
    "UsersListResponse",
]
