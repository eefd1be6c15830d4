"""Request/response schemas for auth and account endpoints."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)


class LoginRequest(BaseModel):
    """Credentials for login; username may also be the account email."""

    username: str = Field(
        ..., min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN, description="Username or email"
    )
    password: str = Field(
        ..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password"
    )


class RegisterRequest(BaseModel):
    """New account details."""

    username: str = Field(
        ..., min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN, description="Username"
    )
    email: EmailStr = Field(..., description="Email address receiving the activation code")
    password: str = Field(
        ..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password"
    )

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        # Login accepts username or email, so a username must not look like an email.
        if "@" in v:
            raise ValueError("username must not contain '@'")
        if not v.strip():
            raise ValueError("username must not be blank")
        return v.strip()


class ResetActivationRequest(BaseModel):
    """Ask for a fresh activation code for the account with this email."""

    email: EmailStr


class ResetPasswordRequest(BaseModel):
    """New password, for the Bearer user or for the account holding the activation token."""

    token: str | None = Field(default=None, max_length=64, description="Pending activation token")
    password: str = Field(
        ..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="New password"
    )


class TokenResponse(BaseModel):
    """JWT access token returned after successful login."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")


class UserIdentity(BaseModel):
    """What the login pipeline needs to check a presented password."""

    username: str
    password_hash: str
    scopes: list[str]


class CurrentUser(BaseModel):
    """Authenticated user (id, username, role) for dependency injection."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: str


class AccountResponse(BaseModel):
    """Public view of an account (never includes the password hash)."""

    model_config = ConfigDict(from_attributes=True)

    username: str
    email: str
    role: str
    activated: bool = Field(..., description="True once the email has been confirmed")


class RegistrationResponse(AccountResponse):
    """Created account plus the code to deliver to the user's email."""

    activation_token: str


class AdminCheckResponse(BaseModel):
    admin: bool


class UsernamesResponse(BaseModel):
    """Response for GET /users (admin only)."""

    usernames: list[str]
