"""Permit applications: owner submissions and edits, staff decisions, supplementary documents."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user, require_staff
from app.api.v1.deps import get_notifier
from app.api.v1.errors import to_http_exception
from app.core.database import get_db
from app.schemas.application import (
    ApplicationCreate,
    ApplicationCreateResponse,
    ApplicationOut,
    ApplicationUpdate,
    DocumentCreate,
    DocumentOut,
    StatusUpdateRequest,
)
from app.schemas.auth import CurrentUser
from app.schemas.common import MessageResponse
from app.services import lifecycle
from app.services.errors import PortalError
from app.services.notifications import NotificationDispatcher

router = APIRouter()


@router.post("", response_model=ApplicationCreateResponse, status_code=201)
async def create_application(
    body: ApplicationCreate,
    db: Annotated[Session, Depends(get_db)],
    notifier: Annotated[NotificationDispatcher, Depends(get_notifier)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> ApplicationCreateResponse:
    """Submit a new application. Only business owners may apply; it starts as pending."""
    try:
        application = await lifecycle.create_application(db, notifier, current_user, body)
    except PortalError as e:
        raise to_http_exception(e) from e
    return ApplicationCreateResponse(
        message="Application submitted successfully",
        application=ApplicationOut.from_row(application, current_user.name),
    )


@router.get("", response_model=list[ApplicationOut])
def list_applications(
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> list[ApplicationOut]:
    """Owners get their own applications; staff and admins get all of them. Newest first."""
    rows = lifecycle.list_applications(db, current_user)
    return [ApplicationOut.from_row(application, owner_name) for application, owner_name in rows]


@router.get("/{application_id}", response_model=ApplicationOut)
def get_application(
    application_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> ApplicationOut:
    try:
        application = lifecycle.get_application(db, current_user, application_id)
    except PortalError as e:
        raise to_http_exception(e) from e
    return ApplicationOut.from_row(application)


@router.put("/{application_id}", response_model=ApplicationOut)
async def update_application(
    application_id: int,
    body: ApplicationUpdate,
    db: Annotated[Session, Depends(get_db)],
    notifier: Annotated[NotificationDispatcher, Depends(get_notifier)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> ApplicationOut:
    """
    Edit application details.

    An owner edit sends the application back to pending in any status. Staff and
    admin edits keep the status and may change the fee.
    """
    try:
        application = await lifecycle.update_application(
            db, notifier, current_user, application_id, body
        )
    except PortalError as e:
        raise to_http_exception(e) from e
    return ApplicationOut.from_row(application)


@router.delete("/{application_id}", response_model=MessageResponse)
def delete_application(
    application_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> MessageResponse:
    try:
        lifecycle.delete_application(db, current_user, application_id)
    except PortalError as e:
        raise to_http_exception(e) from e
    return MessageResponse(message="Application deleted successfully")


@router.put("/{application_id}/status", response_model=ApplicationOut)
async def decide_application(
    application_id: int,
    body: StatusUpdateRequest,
    db: Annotated[Session, Depends(get_db)],
    notifier: Annotated[NotificationDispatcher, Depends(get_notifier)],
    current_user: Annotated[CurrentUser, Depends(require_staff)],
) -> ApplicationOut:
    """Approve with a fee or reject with remarks. Records a staff action and notifies the owner."""
    try:
        application = await lifecycle.decide_application(
            db,
            notifier,
            current_user,
            application_id,
            body.status,
            fee=body.fee,
            remarks=body.remarks,
        )
    except PortalError as e:
        raise to_http_exception(e) from e
    return ApplicationOut.from_row(application)


@router.get("/{application_id}/documents", response_model=list[DocumentOut])
def list_documents(
    application_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> list[DocumentOut]:
    try:
        documents = lifecycle.list_documents(db, current_user, application_id)
    except PortalError as e:
        raise to_http_exception(e) from e
    return [DocumentOut.model_validate(d) for d in documents]


@router.post("/{application_id}/documents", response_model=DocumentOut, status_code=201)
def add_document(
    application_id: int,
    body: DocumentCreate,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> DocumentOut:
    try:
        document = lifecycle.add_document(
            db, current_user, application_id, body.file_name, body.file_path
        )
    except PortalError as e:
        raise to_http_exception(e) from e
    return DocumentOut.model_validate(document)
