"""Response schemas for owner and staff dashboards."""

from datetime import datetime

from pydantic import BaseModel, Field


class StatusCounts(BaseModel):
    total: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0
    permit_issued: int = 0


class MonthlyStatusRow(BaseModel):
    """Owner chart row: applications created in a month, split by current status."""

    month: str = Field(..., description="Month number, zero-padded (01-12).")
    pending: int = 0
    approved: int = 0
    rejected: int = 0
    permit_issued: int = 0


class RecentApplication(BaseModel):
    id: int
    business_name: str
    status: str
    created_at: datetime | None = None
    owner_name: str | None = None


class OwnerDashboardResponse(BaseModel):
    stats: StatusCounts
    chart: list[MonthlyStatusRow]
    recent: list[RecentApplication]


class OverviewResponse(BaseModel):
    totalApplications: int
    pendingApplications: int
    approvedApplications: int
    rejectedApplications: int
    permitIssuedApplications: int
    totalBusinessOwners: int


class MonthlyTotal(BaseModel):
    month: str = Field(..., description="Year and month (YYYY-MM).")
    total: int


class StatusTotal(BaseModel):
    status: str
    count: int


class StaffAnalyticsResponse(BaseModel):
    monthly: list[MonthlyTotal]
    perStatus: list[StatusTotal]


class OwnedBusiness(BaseModel):
    application_id: int
    business_name: str
    address: str


class BusinessOwnerItem(BaseModel):
    id: int
    owner_name: str
    email: str
    businesses: list[OwnedBusiness]
