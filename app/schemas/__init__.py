"""Pydantic request/response schemas."""

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
    UserIdentity,
    UsernamesResponse,
)
from app.schemas.health import HealthResponse

__all__ = [
    "AccountResponse",
    "AdminCheckResponse",
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "RegisterRequest",
    "RegistrationResponse",
    "ResetActivationRequest",
    "ResetPasswordRequest",
    "TokenResponse",
    "UserIdentity",
    "UsernamesResponse",
]
