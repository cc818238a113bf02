"""User profiles and admin account maintenance."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.auth import get_current_user, require_admin, require_staff
from app.api.v1.errors import to_http_exception
from app.core.database import get_db
from app.schemas.auth import CurrentUser
from app.schemas.common import MessageResponse
from app.schemas.user import (
    PasswordResetRequest,
    ProfileUpdateRequest,
    StaffEditRequest,
    UserOut,
    UsersListResponse,
    UserUpdateResponse,
)
from app.services import accounts
from app.services.errors import PortalError

router = APIRouter()


@router.get("/me", response_model=UserOut)
def get_me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> UserOut:
    try:
        user = accounts.load_user(db, current_user.id)
    except PortalError as e:
        raise to_http_exception(e) from e
    return UserOut.model_validate(user)


@router.get("", response_model=UsersListResponse)
def list_users(
    current_user: Annotated[CurrentUser, Depends(require_staff)],
    db: Annotated[Session, Depends(get_db)],
) -> UsersListResponse:
    """Admins see every account; staff see business owners only."""
    users = accounts.list_users(db, current_user.role)
    return UsersListResponse(data=[UserOut.model_validate(u) for u in users])


@router.put("/{user_id}", response_model=UserUpdateResponse)
def update_profile(
    user_id: int,
    body: ProfileUpdateRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> UserUpdateResponse:
    """Edit your own name, password or profile picture. 403 for anyone else's profile."""
    try:
        user = accounts.update_profile(
            db,
            current_user.id,
            user_id,
            body.name,
            password=body.password,
            profile_pic=body.profile_pic,
        )
    except PortalError as e:
        raise to_http_exception(e) from e
    return UserUpdateResponse(message="Profile updated successfully", data=UserOut.model_validate(user))


@router.put("/admin/{user_id}", response_model=UserUpdateResponse)
def admin_edit_staff(
    user_id: int,
    body: StaffEditRequest,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserUpdateResponse:
    try:
        user = accounts.admin_edit_staff(db, user_id, body.name, body.email)
    except PortalError as e:
        raise to_http_exception(e) from e
    return UserUpdateResponse(message="Staff updated successfully", data=UserOut.model_validate(user))


@router.patch("/admin/{user_id}/password", response_model=MessageResponse)
def admin_reset_password(
    user_id: int,
    body: PasswordResetRequest,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    try:
        accounts.admin_reset_password(db, user_id, body.password)
    except PortalError as e:
        raise to_http_exception(e) from e
    return MessageResponse(message="Password reset successfully")
