"""
Shared Pydantic building blocks for resource schemas.

Records travel over the wire and sit in DynamoDB with camelCase attribute
names; Python code uses snake_case via aliases.
"""

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel


def coerce_string_list(value: Any) -> list[str]:
    """Accept a list or a comma-separated string and return non-empty strings."""
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, (list, tuple, set)):
        return [str(part).strip() for part in value if str(part).strip()]
    return []


StringList = Annotated[list[str], BeforeValidator(coerce_string_list)]
RequiredStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class CamelModel(BaseModel):
    """Base model exposing camelCase aliases and accepting either spelling."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_item(self) -> dict[str, Any]:
        """Serialize to the camelCase dict stored in DynamoDB."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class OkResponse(CamelModel):
    """Acknowledgement returned by mutating endpoints."""

    ok: bool = True
