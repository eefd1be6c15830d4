"""ORM model for user accounts (credentials, activation state, roles)."""

from sqlalchemy import Column, Integer, String

from app.models.base import Base

# Token value of an account whose email has been confirmed.
ACTIVATED_TOKEN = "1"
DEFAULT_ROLE = "User"
ADMIN_ROLE = "Admin"


class User(Base):
    """
    User account for registration, login and role-based access control.

    token: ACTIVATED_TOKEN once the email is confirmed, else the pending activation code
    role: comma-separated role labels, e.g. 'User' or 'User,Admin'
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    token = Column(String(64), nullable=False, index=True)
    role = Column(String(64), nullable=False, default=DEFAULT_ROLE)

    @property
    def is_activated(self) -> bool:
        return self.token == ACTIVATED_TOKEN

    @property
    def scopes(self) -> list[str]:
        """Authorization scopes derived from the role labels."""
        return role_scopes(self.role)

    @property
    def is_admin(self) -> bool:
        return ADMIN_ROLE in self.scopes


def role_scopes(role: str | None) -> list[str]:
    """Split a comma-separated role string into trimmed, non-empty scopes."""
    if not role:
        return []
    return [part.strip() for part in role.split(",") if part.strip()]
