"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.user import ACTIVATED_TOKEN, ADMIN_ROLE, DEFAULT_ROLE, User

__all__ = ["ACTIVATED_TOKEN", "ADMIN_ROLE", "Base", "DEFAULT_ROLE", "User"]
