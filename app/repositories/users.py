"""User repository over an async SQLAlchemy session."""

import logging
from collections.abc import AsyncIterator

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models import User

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def normalize_username(username: str) -> str:
    return username.strip()


class UserRepository:
    """Point lookups, upserts and deletes for user accounts.

    Lookups return None when nothing matches; callers decide whether that is
    an error.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _first(self, *criteria) -> User | None:
        result = await self.db.execute(select(User).where(*criteria).limit(1))
        return result.scalars().first()

    async def find_by_username_or_email(self, username: str, email: str) -> User | None:
        return await self._first(
            or_(
                User.username == normalize_username(username),
                User.email == normalize_email(email),
            )
        )

    async def find_by_username(self, username: str) -> User | None:
        return await self._first(User.username == normalize_username(username))

    async def find_by_email(self, email: str) -> User | None:
        return await self._first(User.email == normalize_email(email))

    async def find_by_token(self, token: str) -> User | None:
        return await self._first(User.token == token)

    async def save(self, user: User) -> User:
        """Insert or update the account and commit.

        Raises sqlalchemy.exc.IntegrityError (after rolling back) when a unique
        username/email constraint is violated.
        """
        if user.username:
            user.username = normalize_username(user.username)
        if user.email:
            user.email = normalize_email(user.email)
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.warning("Rejected save of user %s: unique constraint", user.username)
            raise
        return user

    async def delete_by_username(self, username: str) -> int:
        """Delete the account with this username; returns rows removed (0 or 1)."""
        result = await self.db.execute(delete(User).where(User.username == username))
        await self.db.commit()
        return result.rowcount or 0

    async def find_all(self) -> AsyncIterator[User]:
        """Stream every account in the store's natural order."""
        result = await self.db.stream_scalars(select(User))
        async for user in result:
            yield user
