"""
Session and self-service account endpoints.

Sign-in and sign-out are handled outside this service; these endpoints only
read the cookies it sets.
"""

from fastapi import APIRouter, Depends, Request

from knowbase.auth import schemas
from knowbase.auth.dependencies import (
    get_session_email,
    is_admin_session,
    require_session_email,
)
from knowbase.db.schemas import OkResponse
from knowbase.db.users.dependencies import get_user_service
from knowbase.db.users.schemas import UserResponse
from knowbase.db.users.service import UserService

router = APIRouter(tags=["Account"])


@router.get("/me", response_model=schemas.MeResponse)
async def get_me(request: Request) -> schemas.MeResponse:
    """Return the signed-in email and admin flag from the session cookies."""
    return schemas.MeResponse(
        email=get_session_email(request),
        is_admin=is_admin_session(request),
    )


@router.post("/account/name", response_model=UserResponse)
async def change_name(
    data: schemas.NameChangeRequest,
    email: str = Depends(require_session_email),
    service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Change the display name of the signed-in user."""
    user = await service.change_name(email, data.name)
    return UserResponse(user=user)


@router.post("/account/password", response_model=OkResponse)
async def change_password(
    data: schemas.PasswordChangeRequest,
    email: str = Depends(require_session_email),
    service: UserService = Depends(get_user_service),
) -> OkResponse:
    """Change the signed-in user's password and clear the forced-change flag."""
    await service.change_password(
        email,
        current_password=data.current_password,
        new_password=data.new_password,
        new_password_confirm=data.new_password2,
    )
    return OkResponse()
