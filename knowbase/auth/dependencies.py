"""
Authentication and authorization dependencies.

Admin-mutating endpoints are gated by a shared-secret header; read
endpoints identify the signed-in user from the session cookie set by the
portal's sign-in flow.
"""

import hmac

from fastapi import Depends, Header, HTTPException, Request, status

from knowbase.auth import schemas
from knowbase.auth.constants import ADMIN_KEY_HEADER, CookieNames
from knowbase.config import get_app_settings
from knowbase.db.users.dependencies import get_user_service
from knowbase.db.users.service import UserService
from knowbase.utils.logger import logger


async def require_admin_key(
    admin_key: str | None = Header(default=None, alias=ADMIN_KEY_HEADER),
) -> None:
    """
    Require the shared admin key on mutating requests.

    Raises:
        HTTPException: 403 if the key is not configured, missing or wrong
    """
    expected = get_app_settings().kb_admin_api_key
    if not expected:
        logger.warning("Admin request rejected: KB_ADMIN_API_KEY is not configured")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin API key is not configured",
        )
    if not admin_key or not hmac.compare_digest(
        admin_key.strip().encode("utf-8"), expected.encode("utf-8")
    ):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid admin key",
        )


def get_session_email(request: Request) -> str | None:
    """Email of the signed-in user from the session cookie, if present."""
    email = (request.cookies.get(CookieNames.SESSION_USER.value) or "").strip()
    return email or None


def is_admin_session(request: Request) -> bool:
    return request.cookies.get(CookieNames.ADMIN_FLAG.value) == "1"


async def require_session_email(request: Request) -> str:
    """
    Require a signed-in user.

    Raises:
        HTTPException: 401 if there is no session cookie
    """
    email = get_session_email(request)
    if not email:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return email


async def get_session_user_optional(
    request: Request,
    user_service: UserService = Depends(get_user_service),
) -> schemas.SessionUser | None:
    """
    Resolve the signed-in user and their groups, or None when signed out.

    The cookie is trusted as-is; an email without a user record yields a
    session user with no groups.
    """
    email = get_session_email(request)
    if not email:
        return None

    user = await user_service.find_by_email(email)
    return schemas.SessionUser(
        email=email,
        is_admin=is_admin_session(request),
        user_id=user.user_id if user else None,
        group_ids=user.group_ids if user else [],
    )
