"""Account lifecycle: registration, login lookup, activation, password reset, roles."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError

from app.core.security import extract_username, hash_password
from app.models import ACTIVATED_TOKEN, DEFAULT_ROLE, User
from app.repositories.users import UserRepository, normalize_email, normalize_username
from app.schemas.auth import UserIdentity
from app.services.tokens import derive_activation_token, is_candidate_activation_token

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


class AccountError(Exception):
    """Base class for account lifecycle failures."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AccountNotFoundError(AccountError):
    """Raised when no account matches the lookup."""


class AccountNotActivatedError(AccountError):
    """Raised when login is attempted before the account's email is confirmed."""


class DuplicateIdentityError(AccountError):
    """Raised when registering a username or email that is already taken."""


class InvalidActivationTokenError(AccountError):
    """Raised for activation codes that can never match a pending account."""


class AccountService:
    """
    Stateless orchestration over the user repository, password hasher and
    bearer-token verifier. One instance per request/session.
    """

    def __init__(
        self,
        users: UserRepository,
        settings: "Settings",
        token_username: Callable[[str], str] = extract_username,
    ) -> None:
        self.users = users
        self.settings = settings
        self.token_username = token_username

    async def load_user_for_login(self, username_or_email: str) -> UserIdentity:
        """
        Resolve the account a login attempt refers to.

        Password comparison is left to the caller; this only enforces that the
        account exists and, when USER_VERIFICATION is on, that it is activated.
        """
        user = await self.users.find_by_username_or_email(username_or_email, username_or_email)
        if user is None:
            raise AccountNotFoundError(username_or_email)
        if self.settings.USER_VERIFICATION and not user.is_activated:
            logger.error(
                "User [%s] tried to login but account is not activated yet",
                username_or_email,
            )
            raise AccountNotActivatedError(f"{username_or_email} has not been activated yet")
        return UserIdentity(
            username=user.username,
            password_hash=user.password_hash,
            scopes=user.scopes,
        )

    async def register(self, username: str, email: str, password: str) -> User:
        """
        Create a pending account with the default role.

        Raises DuplicateIdentityError if the username or email is taken. The
        existence check and the insert are separate statements; a concurrent
        registration that wins the race is caught by the unique indexes.
        """
        username = normalize_username(username)
        email = normalize_email(email)
        if await self.users.find_by_username(username) is not None:
            raise DuplicateIdentityError(f"Username {username} is already registered")
        if await self.users.find_by_email(email) is not None:
            raise DuplicateIdentityError(f"Email {email} is already registered")

        user = User(
            username=username,
            email=email,
            password_hash=self.encode_password(password),
            role=DEFAULT_ROLE,
        )
        user.token = self.create_activation_token(user)
        try:
            await self.users.save(user)
        except IntegrityError as e:
            raise DuplicateIdentityError(
                f"Username {username} or email {email} is already registered"
            ) from e
        logger.info("Registered user", extra={"username": username})
        return user

    @staticmethod
    def encode_password(password: str) -> str:
        return hash_password(password)

    async def delete(self, username: str) -> None:
        """Remove the account; deleting an unknown username is not an error."""
        removed = await self.users.delete_by_username(username)
        logger.info("Delete user %s: rows_removed=%s", username, removed)

    async def activate(self, token: str) -> User:
        """
        Confirm the account holding this pending activation code.

        Raises InvalidActivationTokenError without querying the store for the
        activated sentinel or codes that are too short, and AccountNotFoundError
        when no pending account holds the code (including one already used).
        """
        if not is_candidate_activation_token(token):
            raise InvalidActivationTokenError("Invalid activation token")
        user = await self.users.find_by_token(token)
        if user is None:
            raise AccountNotFoundError("No account is pending activation with this token")
        user.token = ACTIVATED_TOKEN
        await self.users.save(user)
        logger.info("Activated user %s", user.username)
        return user

    def create_activation_token(self, user: User) -> str:
        """Derive the activation code for this account (no store write)."""
        return derive_activation_token(
            user.email,
            user.username,
            self.settings.ACTIVATION_SECRET.get_secret_value(),
        )

    async def issue_activation_token(self, user: User) -> str:
        """Derive a fresh activation code, store it on the account and return it."""
        token = self.create_activation_token(user)
        user.token = token
        await self.users.save(user)
        return token

    async def reset_activation(self, email: str, *, include_activated: bool = True) -> User | None:
        """
        Put the account with this email back into pending activation.

        Returns None for an unknown email so callers cannot probe which
        addresses are registered. With include_activated=False an already
        activated account is left untouched (and None is returned), which is
        what unauthenticated callers get.
        """
        user = await self.users.find_by_email(email)
        if user is None:
            logger.info("Activation reset requested for unknown email")
            return None
        if user.is_activated and not include_activated:
            logger.info("Activation reset skipped for activated user %s", user.username)
            return None
        await self.issue_activation_token(user)
        logger.info("Activation reset for user %s", user.username)
        return user

    async def reset_password(self, username: str, new_password: str) -> bool:
        """
        Replace the password and mark the account activated.

        Returns False, without writing, when the username is unknown.
        """
        user = await self.users.find_by_username(username)
        if user is None:
            return False
        user.password_hash = self.encode_password(new_password)
        user.token = ACTIVATED_TOKEN
        await self.users.save(user)
        logger.info("Password reset for user %s", username)
        return True

    async def reset_password_with_token(self, token: str, new_password: str) -> User:
        """
        Reset the password of the account holding this pending activation code.

        Lets a pending account, which cannot log in, prove control of its
        email and recover. Raises InvalidActivationTokenError/AccountNotFoundError
        like activate().
        """
        if not is_candidate_activation_token(token):
            raise InvalidActivationTokenError("Invalid activation token")
        user = await self.users.find_by_token(token)
        if user is None:
            raise AccountNotFoundError("No account is pending activation with this token")
        await self.reset_password(user.username, new_password)
        return user

    async def save_user(self, user: User) -> User:
        return await self.users.save(user)

    async def is_admin(self, auth_token: str) -> bool:
        """
        Whether the bearer of auth_token has the Admin role.

        Raises jwt.PyJWTError for an invalid token and AccountNotFoundError
        when the token's user no longer exists.
        """
        username = self.token_username(auth_token)
        user = await self.users.find_by_username(username)
        if user is None:
            raise AccountNotFoundError(username)
        return user.is_admin

    async def list_usernames(self) -> AsyncIterator[str]:
        """Yield each stored username once, in the store's natural order."""
        async for user in self.users.find_all():
            yield user.username
