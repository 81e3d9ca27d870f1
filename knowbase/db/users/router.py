"""
User administration API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from knowbase.auth.dependencies import require_admin_key
from knowbase.db.schemas import OkResponse
from knowbase.db.users.dependencies import get_user_service
from knowbase.db.users.schemas import (
    UserCreate,
    UserCredentialResponse,
    UserListResponse,
    UserResponse,
    UserUpdate,
)
from knowbase.db.users.service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=UserListResponse)
async def list_users(
    service: UserService = Depends(get_user_service),
) -> UserListResponse:
    """List all users without password hashes."""
    return UserListResponse(users=await service.list_users())


@router.post(
    "",
    response_model=UserCredentialResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin_key)],
)
async def create_user(
    data: UserCreate,
    service: UserService = Depends(get_user_service),
) -> UserCredentialResponse:
    """
    Create a user with a temporary password.

    The password is mailed to the user; it is only returned in the response
    when mailing did not happen.
    """
    user, temporary_password, mail_sent = await service.create_user(data)
    return UserCredentialResponse(
        user=user,
        mail_sent=mail_sent,
        temporary_password=None if mail_sent else temporary_password,
    )


@router.put(
    "",
    response_model=UserResponse,
    dependencies=[Depends(require_admin_key)],
)
async def update_user(
    data: UserUpdate,
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Update a user's profile (and optionally password)."""
    user = await service.update_user(data)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserResponse(user=user)


@router.delete(
    "",
    response_model=OkResponse,
    dependencies=[Depends(require_admin_key)],
)
async def delete_user(
    user_id: str | None = Query(default=None, alias="userId"),
    service: UserService = Depends(get_user_service),
) -> OkResponse:
    """Delete a user by ?userId=."""
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="userId is required"
        )
    await service.delete_user(user_id)
    return OkResponse()


@router.post(
    "/{user_id}/reset-password",
    response_model=UserCredentialResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(require_admin_key)],
)
async def reset_password(
    user_id: str,
    service: UserService = Depends(get_user_service),
) -> UserCredentialResponse:
    """Issue a new temporary password and force a change on next sign-in."""
    result = await service.reset_password(user_id)
    if not result:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    user, temporary_password, mail_sent = result
    return UserCredentialResponse(
        user=user,
        mail_sent=mail_sent,
        temporary_password=None if mail_sent else temporary_password,
    )
