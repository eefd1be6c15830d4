"""Registration, login, activation and password endpoints plus auth dependencies."""

import logging
from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.database import get_db
from app.core.security import create_access_token, decode_access_token, verify_password
from app.models import ADMIN_ROLE, User
from app.models.user import role_scopes
from app.repositories.users import UserRepository
from app.schemas.auth import (
    AccountResponse,
    AdminCheckResponse,
    CurrentUser,
    LoginRequest,
    RegisterRequest,
    RegistrationResponse,
    ResetActivationRequest,
    ResetPasswordRequest,
    TokenResponse,
)
from app.services.accounts import (
    AccountNotActivatedError,
    AccountNotFoundError,
    AccountService,
    DuplicateIdentityError,
    InvalidActivationTokenError,
)

logger = logging.getLogger(__name__)
router = APIRouter()
security = HTTPBearer(auto_error=False)


def get_account_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AccountService:
    """Dependency: account service bound to the request's DB session."""
    return AccountService(UserRepository(db), get_settings())


def _account_response(user: User) -> AccountResponse:
    return AccountResponse(
        username=user.username,
        email=user.email,
        role=user.role,
        activated=user.is_activated,
    )


def _bearer_token(credentials: HTTPAuthorizationCredentials | None) -> str:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credentials.credentials


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CurrentUser:
    """Dependency: require valid Bearer JWT and return the current user. Raises 401 if missing or invalid."""
    token = _bearer_token(credentials)
    try:
        payload = decode_access_token(token)
    except jwt.PyJWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    sub = payload.get("sub")
    if not sub:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user = await UserRepository(db).find_by_username(str(sub))
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return CurrentUser(id=user.id, username=user.username, role=user.role)


def require_admin(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Dependency: require authenticated user with the 'Admin' role. Raises 403 for non-admin."""
    if ADMIN_ROLE not in role_scopes(current_user.role):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


@router.post("/register", response_model=RegistrationResponse, status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    service: Annotated[AccountService, Depends(get_account_service)],
) -> RegistrationResponse:
    """
    Create an account pending activation.
    The activation token is returned for delivery to the user's email.
    """
    try:
        user = await service.register(body.username, body.email, body.password)
    except DuplicateIdentityError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    return RegistrationResponse(
        **_account_response(user).model_dump(),
        activation_token=user.token,
    )


@router.post("/login", response_model=TokenResponse)
async def login(
    body: LoginRequest,
    service: Annotated[AccountService, Depends(get_account_service)],
) -> TokenResponse:
    """
    Authenticate with username (or email) and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    try:
        identity = await service.load_user_for_login(body.username)
    except AccountNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password.",
        )
    except AccountNotActivatedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message) from e
    if not verify_password(body.password, identity.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password.",
        )
    token = create_access_token(sub=identity.username, role=",".join(identity.scopes))
    return TokenResponse(access_token=token, token_type="bearer")


@router.get("/activate/{token}", response_model=AccountResponse)
async def activate(
    token: str,
    service: Annotated[AccountService, Depends(get_account_service)],
) -> AccountResponse:
    """Confirm an account with the activation token sent to its email."""
    try:
        user = await service.activate(token)
    except InvalidActivationTokenError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except AccountNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    return _account_response(user)


@router.post("/activation/reset", status_code=status.HTTP_202_ACCEPTED)
async def reset_activation(
    body: ResetActivationRequest,
    service: Annotated[AccountService, Depends(get_account_service)],
) -> dict[str, str]:
    """
    Re-issue the activation token of a pending account.
    Activated accounts are left as they are. Same response whether or not the email is registered.
    """
    await service.reset_activation(body.email, include_activated=False)
    return {"detail": "If the email is registered, a new activation token has been issued."}


@router.post("/password/reset", response_model=AccountResponse)
async def reset_password(
    body: ResetPasswordRequest,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> AccountResponse:
    """
    Set a new password; the account ends up activated.

    With an activation token in the body no login is needed (pending accounts
    cannot log in); otherwise the Bearer user resets their own password.
    """
    if body.token is not None:
        try:
            user = await service.reset_password_with_token(body.token, body.password)
        except InvalidActivationTokenError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
        except AccountNotFoundError as e:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
        return _account_response(user)

    current_user = await get_current_user(credentials, db)
    if not await service.reset_password(current_user.username, body.password):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    user = await service.users.find_by_username(current_user.username)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return _account_response(user)


@router.get("/is-admin", response_model=AdminCheckResponse)
async def is_admin(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> AdminCheckResponse:
    """Report whether the bearer token belongs to an administrator."""
    token = _bearer_token(credentials)
    try:
        admin = await service.is_admin(token)
    except jwt.PyJWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except AccountNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found") from e
    return AdminCheckResponse(admin=admin)
