"""Tests for app.scripts.create_user: activated accounts created from the shell."""

import unittest
from unittest.mock import patch

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.security import PASSWORD_MIN_LEN, USERNAME_MAX_LEN
from app.models import ACTIVATED_TOKEN, Base
from app.repositories.users import UserRepository
from app.scripts.create_user import create_user, main


class TestCreateUser(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.engine = create_async_engine(
            "sqlite+aiosqlite://",
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        self.session_factory = async_sessionmaker(bind=self.engine, expire_on_commit=False)
        self._patches = [
            patch("app.scripts.create_user.SessionLocal", self.session_factory),
            patch("app.core.security.BCRYPT_ROUNDS", 4),
        ]
        for p in self._patches:
            p.start()

    async def asyncTearDown(self) -> None:
        for p in self._patches:
            p.stop()
        await self.engine.dispose()

    async def test_creates_activated_admin(self) -> None:
        code = await create_user("root", "root@x.com", "password1", "Admin")
        self.assertEqual(code, 0)
        async with self.session_factory() as db:
            user = await UserRepository(db).find_by_username("root")
        self.assertIsNotNone(user)
        self.assertEqual(user.token, ACTIVATED_TOKEN)
        self.assertEqual(user.role, "Admin")

    async def test_duplicate_returns_1(self) -> None:
        await create_user("root", "root@x.com", "password1", "Admin")
        code = await create_user("root", "other@x.com", "password1", "User")
        self.assertEqual(code, 1)


class TestCreateUserArguments(unittest.TestCase):
    """main() rejects bad input before touching the database."""

    def _run(self, *argv: str) -> int:
        with patch("sys.argv", ["create_user", *argv]), patch(
            "app.scripts.create_user.asyncio.run"
        ) as run:
            code = main()
        run.assert_not_called()
        return code

    def test_at_sign_in_username(self) -> None:
        self.assertEqual(self._run("ana@x.com", "ana@x.com", "password1"), 1)

    def test_short_password(self) -> None:
        self.assertEqual(self._run("ana", "ana@x.com", "p" * (PASSWORD_MIN_LEN - 1)), 1)

    def test_long_username(self) -> None:
        self.assertEqual(self._run("a" * (USERNAME_MAX_LEN + 1), "ana@x.com", "password1"), 1)
