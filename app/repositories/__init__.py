"""Async data access for persisted records."""

from app.repositories.users import UserRepository

__all__ = ["UserRepository"]
