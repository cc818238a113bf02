"""Request/response schemas for user profiles and staff management."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["owner", "staff", "admin"]


class UserOut(BaseModel):
    """User entry without the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: str
    profile_pic: str | None = None
    created_at: datetime | None = None


class UsersListResponse(BaseModel):
    data: list[UserOut]


class ProfileUpdateRequest(BaseModel):
    """Own-profile edit. A blank password keeps the current one."""

    name: str = Field(..., min_length=1, max_length=255)
    password: str | None = Field(default=None, max_length=128)
    profile_pic: str | None = Field(
        default=None,
        max_length=1024,
        description="Storage reference of an already uploaded profile picture.",
    )


class StaffCreateRequest(BaseModel):
    """Admin-initiated account creation; role defaults to staff."""

    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6, max_length=128)
    role: Role = "staff"


class UserAdminUpdateRequest(BaseModel):
    """Admin edit of name, email and role."""

    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    role: Role


class StaffEditRequest(BaseModel):
    """Admin edit of a staff member's name and email."""

    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)


class PasswordResetRequest(BaseModel):
    password: str = Field(..., min_length=6, max_length=128)


class UserUpdateResponse(BaseModel):
    message: str
    data: UserOut
