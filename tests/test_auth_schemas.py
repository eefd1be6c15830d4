"""Unit tests for app.schemas.auth: shared length limits and username rules."""

import unittest

from pydantic import ValidationError

from app.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
)
from app.schemas.auth import LoginRequest, RegisterRequest, ResetPasswordRequest


def _register(**overrides: object) -> RegisterRequest:
    data = {"username": "ana", "email": "ana@x.com", "password": "p" * PASSWORD_MIN_LEN}
    data.update(overrides)
    return RegisterRequest(**data)


class TestPasswordLimits(unittest.TestCase):
    """Password fields follow PASSWORD_MIN_LEN/PASSWORD_MAX_LEN."""

    def test_bounds_accepted(self) -> None:
        _register(password="p" * PASSWORD_MIN_LEN)
        _register(password="p" * PASSWORD_MAX_LEN)

    def test_too_short_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            _register(password="p" * (PASSWORD_MIN_LEN - 1))
        with self.assertRaises(ValidationError):
            ResetPasswordRequest(password="p" * (PASSWORD_MIN_LEN - 1))

    def test_too_long_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            LoginRequest(username="ana", password="p" * (PASSWORD_MAX_LEN + 1))


class TestUsernameRules(unittest.TestCase):
    """Usernames are trimmed, bounded by USERNAME_MAX_LEN, and may not contain '@'."""

    def test_trimmed(self) -> None:
        self.assertEqual(_register(username="  ana ").username, "ana")

    def test_at_sign_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            _register(username="ana@x.com")

    def test_blank_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            _register(username="   ")

    def test_too_long_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            _register(username="a" * (USERNAME_MAX_LEN + 1))


class TestResetPasswordRequest(unittest.TestCase):
    def test_token_optional(self) -> None:
        self.assertIsNone(ResetPasswordRequest(password="new-password").token)
        self.assertEqual(
            ResetPasswordRequest(token="abcdef", password="new-password").token, "abcdef"
        )
