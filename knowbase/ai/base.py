"""Shared types for the knowledge chat relay."""

from typing import Literal

from pydantic import BaseModel, Field


class Citation(BaseModel):
    """A source document attributed to an answer."""

    title: str = ""
    url: str = ""
    excerpt: str = ""

    def dedupe_key(self) -> tuple[str, str, str]:
        return self.url, self.title, self.excerpt


class ChatAnswer(BaseModel):
    """Complete answer returned by the knowledge backend."""

    text: str
    sources: list[Citation] = Field(default_factory=list)
    conversation_id: str | None = None
    system_message_id: str | None = None


class SSEEvent(BaseModel):
    """Server-Sent Event wrapper for type-safe SSE formatting.

    Follows the W3C Server-Sent Events specification:
    https://html.spec.whatwg.org/multipage/server-sent-events.html

    Multi-line data is written as one `data:` line per line so that a
    compliant reader rejoins it with newlines. A frame with `comment` and no
    data is a keep-alive that readers ignore.
    """

    data: str | None = None
    event: Literal["sources", "done", "error"] | None = None
    comment: str | None = None
    id: str | None = None
    retry: int | None = None

    def format(self) -> str:
        """Format as SSE protocol string.

        Returns:
            str: Properly formatted SSE event with trailing blank line
        """
        lines = []
        if self.comment is not None:
            lines.append(f": {self.comment}")
        if self.event:
            lines.append(f"event: {self.event}")
        if self.id:
            lines.append(f"id: {self.id}")
        if self.retry is not None:
            lines.append(f"retry: {self.retry}")
        if self.data is not None:
            lines.extend(f"data: {line}" for line in self.data.split("\n"))
        lines.append("")  # Empty line as event delimiter
        return "\n".join(lines) + "\n"
