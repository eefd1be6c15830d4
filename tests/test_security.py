"""Unit tests for app.core.security: bcrypt hashing and JWT subject extraction."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

import jwt

from app.core.config import settings
from app.core.security import (
    create_access_token,
    decode_access_token,
    extract_username,
    hash_password,
    verify_password,
)


@patch("app.core.security.BCRYPT_ROUNDS", 4)
class TestPasswordHashing(unittest.TestCase):
    """hash_password never returns the clear text; verify_password checks it."""

    def test_hash_differs_from_plain(self) -> None:
        hashed = hash_password("correct horse")
        self.assertNotEqual(hashed, "correct horse")
        self.assertTrue(hashed.startswith("$2"))

    def test_verify_accepts_correct_password(self) -> None:
        hashed = hash_password("correct horse")
        self.assertTrue(verify_password("correct horse", hashed))

    def test_verify_rejects_wrong_password(self) -> None:
        hashed = hash_password("correct horse")
        self.assertFalse(verify_password("battery staple", hashed))

    def test_verify_rejects_malformed_hash(self) -> None:
        self.assertFalse(verify_password("anything", "not-a-bcrypt-hash"))

    def test_same_password_hashes_differently(self) -> None:
        self.assertNotEqual(hash_password("pw"), hash_password("pw"))


class TestAccessTokens(unittest.TestCase):
    """Tokens carry the username as sub and round-trip through decode."""

    def test_payload_contains_sub_and_role(self) -> None:
        payload = decode_access_token(create_access_token(sub="ana", role="User"))
        self.assertEqual(payload["sub"], "ana")
        self.assertEqual(payload["role"], "User")

    def test_extract_username(self) -> None:
        self.assertEqual(extract_username(create_access_token(sub="ana", role="User")), "ana")

    def test_extract_username_rejects_garbage(self) -> None:
        with self.assertRaises(jwt.PyJWTError):
            extract_username("not.a.jwt")

    def test_extract_username_rejects_expired(self) -> None:
        past = datetime.now(UTC) - timedelta(hours=1)
        token = jwt.encode(
            {"sub": "ana", "exp": past},
            settings.JWT_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
        )
        with self.assertRaises(jwt.ExpiredSignatureError):
            extract_username(token)

    def test_extract_username_rejects_missing_sub(self) -> None:
        token = jwt.encode(
            {"role": "User"},
            settings.JWT_SECRET.get_secret_value(),
            algorithm=settings.JWT_ALGORITHM,
        )
        with self.assertRaises(jwt.InvalidTokenError):
            extract_username(token)
