"""
Service layer for news announcements and their notification mails.
"""

import uuid

from pydantic import ValidationError

from knowbase.db.constants import Entity
from knowbase.db.news.schemas import News, NewsWrite, NotificationResult
from knowbase.db.repository import DocumentRepository
from knowbase.db.users.service import UserService
from knowbase.integrations.mail.mailer import Mailer
from knowbase.utils.dates import today_ymd, utc_now_iso, within_window
from knowbase.utils.logger import logger

ADMIN_GROUP = "admin_attr"
# Announcements to these groups are copied to administrators
GROUPS_COPIED_TO_ADMIN = frozenset({"direct", "franchise"})


def expand_target_groups(group_ids: list[str]) -> set[str]:
    """Add the administrator group when a direct or franchise group is targeted."""
    expanded = set(group_ids)
    if expanded & GROUPS_COPIED_TO_ADMIN:
        expanded.add(ADMIN_GROUP)
    return expanded


class NewsService:
    """Service for managing news items in DynamoDB."""

    def __init__(
        self,
        repository: DocumentRepository,
        user_service: UserService | None = None,
        mailer: Mailer | None = None,
    ):
        self.repository = repository
        self.user_service = user_service
        self.mailer = mailer

    async def list_news(self, only_active: bool = False, today: str | None = None) -> list[News]:
        """
        List news newest first.

        Args:
            only_active: Drop hidden items and items outside fromDate..toDate
            today: Override for the current date (YYYY-MM-DD)
        """
        today = today or today_ymd()
        items: list[News] = []
        for item in await self.repository.scan():
            try:
                items.append(News.model_validate(item))
            except ValidationError as e:
                logger.warning(
                    "[NewsService] Skipping malformed news",
                    news_id=item.get("newsId"),
                    error=str(e),
                )

        if only_active:
            items = [
                n
                for n in items
                if not n.is_hidden and within_window(n.from_date, n.to_date, today)
            ]
        items.sort(key=News.sort_key, reverse=True)
        return items

    async def get_news(self, news_id: str) -> News | None:
        item = await self.repository.get(news_id)
        return News.model_validate(item) if item else None

    async def create_news(self, data: NewsWrite) -> News:
        now = utc_now_iso()
        news = News.model_validate(
            {
                **data.to_item(),
                "newsId": str(uuid.uuid4()),
                "isNotified": False,
                "createdAt": now,
                "updatedAt": now,
            }
        )
        await self.repository.put(news.to_item())
        logger.info("[NewsService] Created news", news_id=news.news_id)
        return news

    async def update_news(self, news_id: str, data: NewsWrite) -> News | None:
        """Replace a news item's content, keeping createdAt and isNotified."""
        existing = await self.get_news(news_id)
        if not existing:
            return None

        news = News.model_validate(
            {
                **data.to_item(),
                "newsId": news_id,
                "isNotified": existing.is_notified,
                "notifiedAt": existing.notified_at,
                "createdAt": existing.created_at,
                "updatedAt": utc_now_iso(),
            }
        )
        await self.repository.put(news.to_item())
        return news

    async def delete_news(self, news_id: str) -> None:
        await self.repository.delete(news_id)

    async def notify(self, news_id: str) -> NotificationResult | None:
        """
        Mail a news item to its target groups once.

        The isNotified flag is set only after a successful send; an item that
        is already flagged is skipped.

        Returns:
            NotificationResult, or None if the news item does not exist
        """
        if self.user_service is None or self.mailer is None:
            raise RuntimeError("NewsService.notify requires a user service and mailer")

        news = await self.get_news(news_id)
        if not news:
            return None
        if news.is_notified:
            logger.info("[NewsService] Already notified, skipping", news_id=news_id)
            return NotificationResult(skipped="already_notified")

        groups = expand_target_groups(news.target_group_ids)
        recipients = await self.user_service.recipients_for_groups(groups)
        if not recipients:
            logger.info("[NewsService] No recipients for news", news_id=news_id)
            return NotificationResult(skipped="no_recipients")

        sent = await self.mailer.send_news_notification(news.title, news.body, recipients)
        if not sent:
            return NotificationResult(recipients=len(recipients), skipped="not_sent")

        news.is_notified = True
        news.notified_at = utc_now_iso()
        await self.repository.put(news.to_item())
        logger.info(
            "[NewsService] News notified",
            news_id=news_id,
            recipients=len(recipients),
            messages=sent,
        )
        return NotificationResult(sent=sent, recipients=len(recipients))


def build_news_service(
    user_service: UserService | None = None, mailer: Mailer | None = None
) -> NewsService:
    return NewsService(DocumentRepository(Entity.NEWS), user_service, mailer)
