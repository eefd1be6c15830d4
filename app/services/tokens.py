"""Activation codes: derived from account identity and the server-side secret."""

import hashlib

from app.models.user import ACTIVATED_TOKEN

# Codes shorter than this are never looked up; it also keeps the activated
# sentinel ("1") from matching a pending account.
MIN_ACTIVATION_TOKEN_LENGTH = 5


def derive_activation_token(email: str, username: str, secret: str) -> str:
    """
    Return the MD5 hex digest of email + username + secret (32 hex chars).

    Deterministic: the same account and secret always yield the same code, so
    the secret is what keeps codes unguessable.
    """
    to_encode = f"{email}{username}{secret}"
    return hashlib.md5(to_encode.encode("utf-8")).hexdigest()


def is_candidate_activation_token(token: str | None) -> bool:
    """False for the activated sentinel and for anything too short to be a code."""
    if not token or token == ACTIVATED_TOKEN:
        return False
    return len(token) >= MIN_ACTIVATION_TOKEN_LENGTH
