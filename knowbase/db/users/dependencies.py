"""
Dependencies for user endpoints.
"""

from fastapi import Depends

from knowbase.db.users.service import UserService, build_user_service
from knowbase.integrations.mail.mailer import Mailer, get_mailer


async def get_user_service(mailer: Mailer = Depends(get_mailer)) -> UserService:
    """Get user service instance."""
    return build_user_service(mailer)
