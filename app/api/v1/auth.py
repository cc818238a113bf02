"""Registration, JWT login, and auth dependencies (get_current_user, require_roles)."""

from collections.abc import Callable
from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.api.v1.deps import get_notifier
from app.api.v1.errors import to_http_exception
from app.core.database import get_db
from app.core.security import create_access_token, decode_access_token, parse_user_id
from app.models.user import ROLE_ADMIN, ROLE_STAFF, User
from app.schemas.auth import CurrentUser, LoginRequest, RegisterRequest, TokenResponse
from app.schemas.common import MessageResponse
from app.schemas.user import UserOut
from app.services import accounts
from app.services.accounts import InvalidCredentialsError
from app.services.errors import PortalError
from app.services.notifications import NotificationDispatcher

router = APIRouter()
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def resolve_token(db: Session, token: str) -> CurrentUser:
    """Resolve a bearer token to the stored user. Raises 401 HTTPException when invalid."""
    try:
        payload = decode_access_token(token)
    except jwt.PyJWTError:
        raise _unauthorized("Invalid or expired token")
    user_id = parse_user_id(payload)
    if user_id is None:
        raise _unauthorized("Invalid token payload")
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise _unauthorized("User not found")
    return CurrentUser.model_validate(user)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """Dependency: require valid Bearer JWT and return the current user. Raises 401 if missing or invalid."""
    if credentials is None:
        raise _unauthorized("No authorization token")
    return resolve_token(db, credentials.credentials)


def require_roles(*roles: str) -> Callable[[CurrentUser], CurrentUser]:
    """Dependency factory: require an authenticated user with one of roles. 403 otherwise."""
    allowed = frozenset(roles)

    def dependency(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        if current_user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden",
            )
        return current_user

    return dependency


require_admin = require_roles(ROLE_ADMIN)
require_staff = require_roles(ROLE_STAFF, ROLE_ADMIN)


@router.post("/register", response_model=MessageResponse)
async def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
    notifier: Annotated[NotificationDispatcher, Depends(get_notifier)],
) -> MessageResponse:
    """Create a business owner account. Staff accounts are created by an admin."""
    try:
        await accounts.register(db, notifier, body.name, body.email, body.password)
    except PortalError as e:
        raise to_http_exception(e) from e
    return MessageResponse(message="User registered successfully")


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> TokenResponse:
    """
    Authenticate with email and password; returns a JWT access token and the user.
    Include the token in the Authorization header as: Bearer <token>
    """
    try:
        user = accounts.authenticate(db, body.email, body.password)
    except InvalidCredentialsError as e:
        raise _unauthorized(e.message) from e
    except PortalError as e:
        raise to_http_exception(e) from e
    token = create_access_token(sub=user.id, role=user.role, name=user.name)
    return TokenResponse(token=token, user=UserOut.model_validate(user))


@router.get("/me", response_model=UserOut)
def me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> UserOut:
    """Validate the token and return the caller's account."""
    try:
        user = accounts.load_user(db, current_user.id)
    except PortalError as e:
        raise to_http_exception(e) from e
    return UserOut.model_validate(user)
