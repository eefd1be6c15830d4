"""
Create a user (e.g. first admin). Run from project root:
  python -m app.scripts.create_user USERNAME EMAIL PASSWORD [role]
Example:
  python -m app.scripts.create_user admin admin@example.com your-secure-password Admin

Accounts created here are already activated.
"""
import argparse
import asyncio
import logging
import sys

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)
from app.models import ACTIVATED_TOKEN, ADMIN_ROLE, DEFAULT_ROLE
from app.repositories.users import UserRepository
from app.services.accounts import AccountService, DuplicateIdentityError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


async def create_user(username: str, email: str, password: str, role: str) -> int:
    async with SessionLocal() as db:
        service = AccountService(UserRepository(db), get_settings())
        try:
            user = await service.register(username, email, password)
        except DuplicateIdentityError as e:
            print(e.message, file=sys.stderr)
            return 1
        user.token = ACTIVATED_TOKEN
        user.role = role
        await service.save_user(user)
    print(f"Created user '{username}' with role '{role}'.")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Create an activated account (bypasses email activation).")
    parser.add_argument("username", help=f"Username ({USERNAME_MIN_LEN}-{USERNAME_MAX_LEN} chars, no '@')")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument(
        "role",
        nargs="?",
        default=DEFAULT_ROLE,
        choices=[DEFAULT_ROLE, ADMIN_ROLE, f"{DEFAULT_ROLE},{ADMIN_ROLE}"],
    )
    args = parser.parse_args()

    username = args.username.strip()
    if not (USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN):
        print("Invalid username length.", file=sys.stderr)
        return 1
    if "@" in username:
        print("Username must not contain '@'.", file=sys.stderr)
        return 1
    if not (PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN):
        print(f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1

    try:
        return asyncio.run(create_user(username, args.email, args.password, args.role))
    except Exception as e:
        logger.exception("Creating user failed: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
