"""Owner dashboard analytics."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.auth import require_roles
from app.core.database import get_db
from app.models.user import ROLE_OWNER
from app.schemas.analytics import OwnerDashboardResponse
from app.schemas.auth import CurrentUser
from app.services import analytics

router = APIRouter()


@router.get("", response_model=OwnerDashboardResponse)
def get_owner_dashboard(
    current_user: Annotated[CurrentUser, Depends(require_roles(ROLE_OWNER))],
    db: Annotated[Session, Depends(get_db)],
) -> OwnerDashboardResponse:
    """Counts per status, a monthly chart split by status, and the five latest applications."""
    return analytics.owner_dashboard(db, current_user.id)
