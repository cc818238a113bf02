"""Admin-only account management. The only place a role can change."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.auth import require_admin
from app.api.v1.errors import to_http_exception
from app.core.database import get_db
from app.models.user import ROLE_ADMIN
from app.schemas.auth import CurrentUser
from app.schemas.user import (
    StaffCreateRequest,
    UserAdminUpdateRequest,
    UserOut,
    UsersListResponse,
    UserUpdateResponse,
)
from app.services import accounts
from app.services.errors import PortalError

router = APIRouter()


@router.get("", response_model=UsersListResponse)
def list_accounts(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UsersListResponse:
    users = accounts.list_users(db, ROLE_ADMIN)
    return UsersListResponse(data=[UserOut.model_validate(u) for u in users])


@router.post("", response_model=UserUpdateResponse, status_code=201)
def create_account(
    body: StaffCreateRequest,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserUpdateResponse:
    """Create an account of any role (staff by default). Duplicate email -> 400."""
    try:
        user = accounts.create_user(db, body.name, body.email, body.password, body.role)
    except PortalError as e:
        raise to_http_exception(e) from e
    return UserUpdateResponse(message="User created successfully", data=UserOut.model_validate(user))


@router.put("/{user_id}", response_model=UserUpdateResponse)
def update_account(
    user_id: int,
    body: UserAdminUpdateRequest,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserUpdateResponse:
    try:
        user = accounts.admin_update_user(db, user_id, body.name, body.email, body.role)
    except PortalError as e:
        raise to_http_exception(e) from e
    return UserUpdateResponse(message="User updated successfully", data=UserOut.model_validate(user))
