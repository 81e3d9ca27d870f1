"""
Pydantic schemas for manuals.
"""

from enum import Enum
from typing import Any

from pydantic import Field, field_validator, model_validator

from knowbase.db.constants import ALL_SCOPE
from knowbase.db.schemas import CamelModel, RequiredStr, StringList
from knowbase.utils.dates import normalize_ymd


class ManualType(str, Enum):
    DOC = "doc"
    VIDEO = "video"


class ManualFields(CamelModel):
    """Attributes shared by stored manuals and upsert requests."""

    brand_id: str = ALL_SCOPE
    brand: str | None = None
    biz_id: str | None = None
    biz: str | None = None
    desc: str | None = None
    updated_at: str | None = None
    tags: StringList = Field(default_factory=list)
    embed_url: str | None = None
    external_url: str | None = None
    no_download: bool = False
    read_count: int = 0
    start_date: str | None = None
    end_date: str | None = None
    type: ManualType = ManualType.DOC
    view_scope: StringList = Field(default_factory=list)
    is_new: bool = False

    @model_validator(mode="before")
    @classmethod
    def _legacy_publish_window(cls, data: Any) -> Any:
        # Older records use publishStart/publishEnd for the window
        if isinstance(data, dict):
            data = dict(data)
            if not normalize_ymd(data.get("startDate")) and data.get("publishStart"):
                data["startDate"] = data.get("publishStart")
            if not normalize_ymd(data.get("endDate")) and data.get("publishEnd"):
                data["endDate"] = data.get("publishEnd")
        return data

    @field_validator("start_date", "end_date", "updated_at", mode="before")
    @classmethod
    def _normalize_date(cls, value: Any) -> str | None:
        return normalize_ymd(value)

    @field_validator("brand_id", mode="before")
    @classmethod
    def _default_brand(cls, value: Any) -> str:
        return str(value) if value else ALL_SCOPE

    @field_validator("type", mode="before")
    @classmethod
    def _lenient_type(cls, value: Any) -> str:
        text = str(getattr(value, "value", value) or "").lower()
        return text if text in {t.value for t in ManualType} else ManualType.DOC.value

    @field_validator("read_count", mode="before")
    @classmethod
    def _lenient_count(cls, value: Any) -> int:
        try:
            return int(value or 0)
        except (TypeError, ValueError):
            return 0

    @field_validator("no_download", "is_new", mode="before")
    @classmethod
    def _strict_true(cls, value: Any) -> bool:
        return value is True

    def is_scoped_for(self, group_ids: set[str]) -> bool:
        """Whether a viewer in the given groups may see this manual."""
        if not self.view_scope or ALL_SCOPE in self.view_scope:
            return True
        return bool(group_ids.intersection(self.view_scope))


class Manual(ManualFields):
    """A manual as stored and returned by the API."""

    manual_id: str
    title: str


class ManualUpsert(ManualFields):
    """Request schema for creating or replacing a manual."""

    manual_id: RequiredStr
    title: RequiredStr


class ManualListResponse(CamelModel):
    manuals: list[Manual]


class ManualResponse(CamelModel):
    manual: Manual


class ManualSavedResponse(CamelModel):
    ok: bool = True
    manual_id: str
