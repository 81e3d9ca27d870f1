"""
Pydantic schemas for external links shown on the portal home.
"""

from typing import Any

from pydantic import Field, field_validator

from knowbase.db.constants import DEFAULT_SORT_ORDER
from knowbase.db.schemas import CamelModel, RequiredStr


class ExternalLink(CamelModel):
    link_id: str
    title: str = ""
    url: str = ""
    description: str = ""
    sort_order: int | None = None
    is_active: bool = True
    created_at: str | None = None
    updated_at: str | None = None

    @field_validator("sort_order", mode="before")
    @classmethod
    def lenient_sort_order(cls, value: Any) -> int | None:
        if value is None or value == "":
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            return None

    def sort_key(self) -> tuple[int, str]:
        order = DEFAULT_SORT_ORDER if self.sort_order is None else self.sort_order
        return order, self.title


class ExternalLinkUpsert(CamelModel):
    link_id: str | None = None
    title: RequiredStr
    url: RequiredStr
    description: str = ""
    sort_order: int = 0
    is_active: bool = True
    created_at: str | None = None

    @field_validator("sort_order", mode="before")
    @classmethod
    def lenient_sort_order(cls, value: Any) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return 0


class ExternalLinkListResponse(CamelModel):
    links: list[ExternalLink] = Field(default_factory=list)


class ExternalLinkResponse(CamelModel):
    link: ExternalLink
