"""Request and response schemas for chat endpoints."""

from pydantic import Field, field_validator

from knowbase.ai.base import Citation
from knowbase.db.schemas import CamelModel


class ChatRequest(CamelModel):
    """A question, optionally continuing an earlier conversation."""

    prompt: str
    conversation_id: str | None = None
    parent_message_id: str | None = None

    @field_validator("prompt")
    @classmethod
    def prompt_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("prompt must not be empty")
        return value


class ChatResponse(CamelModel):
    """Buffered answer for clients that do not read event streams."""

    answer: str
    sources: list[Citation] = Field(default_factory=list)
    conversation_id: str | None = None
    parent_message_id: str | None = None
