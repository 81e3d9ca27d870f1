"""
Dependencies for news endpoints.
"""

from fastapi import Depends

from knowbase.db.news.service import NewsService, build_news_service
from knowbase.db.users.dependencies import get_user_service
from knowbase.db.users.service import UserService
from knowbase.integrations.mail.mailer import Mailer, get_mailer


async def get_news_service(
    user_service: UserService = Depends(get_user_service),
    mailer: Mailer = Depends(get_mailer),
) -> NewsService:
    """Get news service instance."""
    return build_news_service(user_service, mailer)
