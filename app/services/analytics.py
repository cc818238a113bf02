"""Dashboard aggregates for owners and staff.

Counts are aggregated in Python over (status, created_at) pairs so the same code runs
on SQLite and PostgreSQL without dialect-specific date functions.
"""

from collections import Counter
from datetime import date, datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models import Application, User
from app.models.application import STATUSES
from app.models.user import ROLE_OWNER
from app.schemas.analytics import (
    BusinessOwnerItem,
    MonthlyStatusRow,
    MonthlyTotal,
    OverviewResponse,
    OwnedBusiness,
    OwnerDashboardResponse,
    RecentApplication,
    StaffAnalyticsResponse,
    StatusCounts,
    StatusTotal,
)

OWNER_RECENT_LIMIT = 5
STAFF_RECENT_LIMIT = 10


def _status_counts(statuses: list[str]) -> StatusCounts:
    counter = Counter(statuses)
    return StatusCounts(
        total=len(statuses),
        **{status: counter.get(status, 0) for status in STATUSES},
    )


def owner_dashboard(db: Session, owner_id: int) -> OwnerDashboardResponse:
    """Per-status totals, a per-month chart split by status, and the latest applications."""
    rows = (
        db.query(Application.status, Application.created_at)
        .filter(Application.user_id == owner_id)
        .all()
    )
    stats = _status_counts([status for status, _ in rows])

    by_month: dict[str, Counter] = {}
    for status, created_at in rows:
        if created_at is None:
            continue
        month = f"{created_at.month:02d}"
        by_month.setdefault(month, Counter())[status] += 1
    chart = [
        MonthlyStatusRow(month=month, **{s: counts.get(s, 0) for s in STATUSES})
        for month, counts in sorted(by_month.items())
    ]

    recent = (
        db.query(Application)
        .filter(Application.user_id == owner_id)
        .order_by(Application.created_at.desc(), Application.id.desc())
        .limit(OWNER_RECENT_LIMIT)
        .all()
    )
    return OwnerDashboardResponse(
        stats=stats,
        chart=chart,
        recent=[
            RecentApplication(
                id=a.id,
                business_name=a.business_name,
                status=a.status,
                created_at=a.created_at,
            )
            for a in recent
        ],
    )


def overview(db: Session) -> OverviewResponse:
    statuses = [status for (status,) in db.query(Application.status).all()]
    counts = _status_counts(statuses)
    total_owners = db.query(func.count(User.id)).filter(User.role == ROLE_OWNER).scalar() or 0
    return OverviewResponse(
        totalApplications=counts.total,
        pendingApplications=counts.pending,
        approvedApplications=counts.approved,
        rejectedApplications=counts.rejected,
        permitIssuedApplications=counts.permit_issued,
        totalBusinessOwners=total_owners,
    )


def recent_activity(db: Session, limit: int = STAFF_RECENT_LIMIT) -> list[RecentApplication]:
    rows = (
        db.query(Application, User.name)
        .join(User, Application.user_id == User.id)
        .order_by(Application.created_at.desc(), Application.id.desc())
        .limit(limit)
        .all()
    )
    return [
        RecentApplication(
            id=a.id,
            business_name=a.business_name,
            status=a.status,
            created_at=a.created_at,
            owner_name=owner_name,
        )
        for a, owner_name in rows
    ]


def staff_analytics(db: Session) -> StaffAnalyticsResponse:
    """Applications per calendar month (YYYY-MM) and per current status."""
    rows = db.query(Application.status, Application.created_at).all()
    monthly = Counter(
        f"{created_at.year:04d}-{created_at.month:02d}"
        for _, created_at in rows
        if created_at is not None
    )
    per_status = Counter(status for status, _ in rows)
    return StaffAnalyticsResponse(
        monthly=[MonthlyTotal(month=m, total=n) for m, n in sorted(monthly.items())],
        perStatus=[StatusTotal(status=s, count=n) for s, n in sorted(per_status.items())],
    )


def business_owners(db: Session) -> list[BusinessOwnerItem]:
    """Every owner account with the businesses it has applied for."""
    owners = db.query(User).filter(User.role == ROLE_OWNER).order_by(User.name.asc()).all()
    applications = (
        db.query(Application)
        .filter(Application.user_id.in_([o.id for o in owners]))
        .order_by(Application.business_name.asc())
        .all()
        if owners
        else []
    )
    by_owner: dict[int, list[OwnedBusiness]] = {}
    for a in applications:
        by_owner.setdefault(a.user_id, []).append(
            OwnedBusiness(application_id=a.id, business_name=a.business_name, address=a.address)
        )
    return [
        BusinessOwnerItem(
            id=o.id,
            owner_name=o.name,
            email=o.email,
            businesses=by_owner.get(o.id, []),
        )
        for o in owners
    ]


def applications_between(
    db: Session,
    start: date | None = None,
    end: date | None = None,
) -> list[tuple[Application, str]]:
    """All applications created within [start, end] (inclusive, either bound optional)."""
    query = db.query(Application, User.name).join(User, Application.user_id == User.id)
    if start is not None:
        query = query.filter(Application.created_at >= datetime.combine(start, datetime.min.time()))
    if end is not None:
        query = query.filter(Application.created_at <= datetime.combine(end, datetime.max.time()))
    rows = query.order_by(Application.created_at.desc(), Application.id.desc()).all()
    return [(a, owner_name) for a, owner_name in rows]
