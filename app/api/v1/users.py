"""Admin-only account management: list usernames, delete accounts."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from app.api.v1.auth import get_account_service, require_admin
from app.schemas.auth import CurrentUser, UsernamesResponse
from app.services.accounts import AccountService

router = APIRouter()


@router.get("", response_model=UsernamesResponse)
async def list_users(
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> UsernamesResponse:
    """List every registered username (admin only)."""
    return UsernamesResponse(usernames=[name async for name in service.list_usernames()])


@router.delete("/{username}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    username: str,
    _admin: Annotated[CurrentUser, Depends(require_admin)],
    service: Annotated[AccountService, Depends(get_account_service)],
) -> Response:
    """Delete an account by username. Unknown usernames are not an error."""
    await service.delete(username)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
