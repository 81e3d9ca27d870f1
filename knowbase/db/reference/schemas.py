"""
Pydantic schemas for the reference lists used to tag and scope content.
"""

from typing import Any, ClassVar

from pydantic import Field, field_validator, model_validator

from knowbase.db.constants import DEFAULT_SORT_ORDER
from knowbase.db.schemas import CamelModel, RequiredStr


class ReferenceItem(CamelModel):
    """Fields shared by brands, depts and groups."""

    # Attribute holding the primary key, set by each subclass
    key_field: ClassVar[str]

    name: str = ""
    sort_order: int | None = None
    is_active: bool = True

    @field_validator("sort_order", mode="before")
    @classmethod
    def lenient_sort_order(cls, value: Any) -> int | None:
        if value is None or value == "":
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            return None

    @property
    def item_id(self) -> str:
        return getattr(self, self.key_field)

    def sort_key(self) -> tuple[int, str]:
        order = DEFAULT_SORT_ORDER if self.sort_order is None else self.sort_order
        return order, self.item_id


class Brand(ReferenceItem):
    key_field: ClassVar[str] = "brand_id"

    brand_id: RequiredStr


class Dept(ReferenceItem):
    key_field: ClassVar[str] = "dept_id"

    dept_id: RequiredStr


class Group(ReferenceItem):
    key_field: ClassVar[str] = "group_id"

    group_id: RequiredStr

    @model_validator(mode="before")
    @classmethod
    def legacy_group_name(cls, data: Any) -> Any:
        """Older records store the label as groupName."""
        if isinstance(data, dict) and not data.get("name") and data.get("groupName"):
            return {**data, "name": data["groupName"]}
        return data


class ReferenceListResponse(CamelModel):
    """Set when the table could not be read and a built-in list is returned."""

    error: str | None = None
    detail: str | None = None


class BrandListResponse(ReferenceListResponse):
    brands: list[Brand] = Field(default_factory=list)


class DeptListResponse(ReferenceListResponse):
    depts: list[Dept] = Field(default_factory=list)


class GroupListResponse(ReferenceListResponse):
    groups: list[Group] = Field(default_factory=list)
