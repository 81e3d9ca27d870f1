"""
Pydantic schemas for news announcements.
"""

from typing import Any

from pydantic import Field, field_validator

from knowbase.db.constants import ALL_SCOPE
from knowbase.db.schemas import CamelModel, RequiredStr, StringList


class NewsFields(CamelModel):
    """Editable attributes of a news item."""

    from_date: str | None = None
    to_date: str | None = None
    publish_at: str | None = None
    brand_id: str = ALL_SCOPE
    dept_id: str = ALL_SCOPE
    target_group_ids: StringList = Field(default_factory=list)
    tags: StringList = Field(default_factory=list)
    is_hidden: bool = False

    @field_validator("brand_id", "dept_id", mode="before")
    @classmethod
    def _default_scope(cls, value: Any) -> str:
        return str(value) if value else ALL_SCOPE

    @field_validator("from_date", "to_date", "publish_at", mode="before")
    @classmethod
    def _blank_is_none(cls, value: Any) -> Any:
        return value or None

    @field_validator("is_hidden", mode="before")
    @classmethod
    def _truthy(cls, value: Any) -> bool:
        return bool(value)


class News(NewsFields):
    """A news item as stored and returned by the API."""

    news_id: str
    title: str = ""
    body: str = ""
    is_notified: bool = False
    notified_at: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    def sort_key(self) -> tuple[str, str]:
        return (self.from_date or "", self.created_at or "")


class NewsWrite(NewsFields):
    """Request schema for creating or updating a news item."""

    title: RequiredStr
    body: RequiredStr
    notify: bool = Field(
        default=False, description="Send the notification mail after saving"
    )


class NewsListResponse(CamelModel):
    news: list[News]


class NewsResponse(CamelModel):
    news: News


class NotificationResult(CamelModel):
    """Outcome of a notification request."""

    ok: bool = True
    sent: int = 0
    recipients: int = 0
    skipped: str | None = None
