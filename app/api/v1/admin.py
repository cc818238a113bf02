"""Staff dashboard: totals, recent activity, per-month analytics, owners, and decision shortcuts."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.v1.auth import require_staff
from app.api.v1.deps import get_notifier
from app.api.v1.errors import to_http_exception
from app.core.database import get_db
from app.schemas.analytics import (
    BusinessOwnerItem,
    OverviewResponse,
    RecentApplication,
    StaffAnalyticsResponse,
)
from app.schemas.application import ApplicationOut, StaffActionOut, StatusUpdateRequest
from app.schemas.auth import CurrentUser
from app.services import analytics, lifecycle
from app.services.errors import PortalError
from app.services.notifications import NotificationDispatcher

router = APIRouter()


@router.get("/overview", response_model=OverviewResponse)
def get_overview(
    _staff: Annotated[CurrentUser, Depends(require_staff)],
    db: Annotated[Session, Depends(get_db)],
) -> OverviewResponse:
    return analytics.overview(db)


@router.get("/recent-activity", response_model=list[RecentApplication])
def get_recent_activity(
    _staff: Annotated[CurrentUser, Depends(require_staff)],
    db: Annotated[Session, Depends(get_db)],
) -> list[RecentApplication]:
    return analytics.recent_activity(db)


@router.get("/analytics", response_model=StaffAnalyticsResponse)
def get_analytics(
    _staff: Annotated[CurrentUser, Depends(require_staff)],
    db: Annotated[Session, Depends(get_db)],
) -> StaffAnalyticsResponse:
    return analytics.staff_analytics(db)


@router.get("/business-owners", response_model=list[BusinessOwnerItem])
def get_business_owners(
    _staff: Annotated[CurrentUser, Depends(require_staff)],
    db: Annotated[Session, Depends(get_db)],
) -> list[BusinessOwnerItem]:
    return analytics.business_owners(db)


@router.get("/applications", response_model=list[ApplicationOut])
def get_applications(
    _staff: Annotated[CurrentUser, Depends(require_staff)],
    db: Annotated[Session, Depends(get_db)],
    start: Annotated[date | None, Query(description="Earliest creation date (inclusive)")] = None,
    end: Annotated[date | None, Query(description="Latest creation date (inclusive)")] = None,
) -> list[ApplicationOut]:
    rows = analytics.applications_between(db, start, end)
    return [ApplicationOut.from_row(application, owner_name) for application, owner_name in rows]


@router.put("/applications/{application_id}/status", response_model=ApplicationOut)
async def decide_application(
    application_id: int,
    body: StatusUpdateRequest,
    current_user: Annotated[CurrentUser, Depends(require_staff)],
    db: Annotated[Session, Depends(get_db)],
    notifier: Annotated[NotificationDispatcher, Depends(get_notifier)],
) -> ApplicationOut:
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


@router.get("/applications/{application_id}/actions", response_model=list[StaffActionOut])
def get_staff_actions(
    application_id: int,
    _staff: Annotated[CurrentUser, Depends(require_staff)],
    db: Annotated[Session, Depends(get_db)],
) -> list[StaffActionOut]:
    """Decision history for one application, newest first."""
    try:
        rows = lifecycle.list_staff_actions(db, application_id)
    except PortalError as e:
        raise to_http_exception(e) from e
    return [
        StaffActionOut(
            id=action.id,
            staff_id=action.staff_id,
            staff_name=staff_name,
            application_id=action.application_id,
            action=action.action,
            remarks=action.remarks,
            created_at=action.created_at,
        )
        for action, staff_name in rows
    ]
