"""
Incremental reader for the chat relay's event stream.

Text arrives in arbitrary pieces; frames are only interpreted once their
terminating blank line has arrived.
"""

import json
from dataclasses import dataclass, field

from pydantic import ValidationError

from knowbase.ai.base import Citation
from knowbase.utils.logger import logger

DONE_SENTINEL = "[DONE]"


@dataclass
class StreamFrame:
    """One parsed frame. `data` is None when the frame had no data lines."""

    event: str | None = None
    data: str | None = None


def parse_frame(raw: str) -> StreamFrame | None:
    """Parse the lines of one frame; comment-only and empty frames give None."""
    event: str | None = None
    data_lines: list[str] = []

    for line in raw.split("\n"):
        if not line or line.startswith(":"):
            continue
        name, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]
        if name == "data":
            data_lines.append(value)
        elif name == "event":
            event = value

    if event is None and not data_lines:
        return None
    return StreamFrame(event=event, data="\n".join(data_lines) if data_lines else None)


@dataclass
class StreamAssembler:
    """Rebuilds the answer text and source list from relay frames."""

    answer: str = ""
    sources: list[Citation] = field(default_factory=list)
    conversation_id: str | None = None
    parent_message_id: str | None = None
    done: bool = False
    error: str | None = None
    _buffer: str = field(default="", repr=False)

    @property
    def finished(self) -> bool:
        return self.done or self.error is not None

    def feed(self, text: str) -> list[StreamFrame]:
        """
        Consume a piece of the stream.

        Args:
            text: Any slice of the stream, possibly splitting a frame

        Returns:
            list[StreamFrame]: Frames completed and applied by this piece
        """
        self._buffer += text
        *complete, self._buffer = self._buffer.split("\n\n")

        applied: list[StreamFrame] = []
        for raw in complete:
            if self.finished:
                break
            frame = parse_frame(raw)
            if frame is None:
                continue
            self._apply(frame)
            applied.append(frame)
        return applied

    def _apply(self, frame: StreamFrame) -> None:
        data = frame.data or ""
        if frame.event == "sources":
            self._merge_sources(data)
        elif frame.event == "done":
            self.done = True
            self._read_done(data)
        elif frame.event == "error":
            self.error = self._read_error(data)
        elif frame.event is None:
            if data == DONE_SENTINEL:
                self.done = True
            else:
                self.answer += data

    def _merge_sources(self, data: str) -> None:
        try:
            items = json.loads(data) if data else []
        except json.JSONDecodeError:
            logger.warning("[StreamAssembler] Ignoring malformed sources frame")
            return

        seen = {source.dedupe_key() for source in self.sources}
        for item in items if isinstance(items, list) else []:
            try:
                source = Citation.model_validate(item)
            except ValidationError:
                continue
            if source.dedupe_key() not in seen:
                seen.add(source.dedupe_key())
                self.sources.append(source)

    def _read_done(self, data: str) -> None:
        try:
            payload = json.loads(data) if data else {}
        except json.JSONDecodeError:
            return
        if isinstance(payload, dict):
            self.conversation_id = payload.get("conversationId") or self.conversation_id
            self.parent_message_id = (
                payload.get("parentMessageId") or self.parent_message_id
            )

    @staticmethod
    def _read_error(data: str) -> str:
        try:
            payload = json.loads(data)
        except json.JSONDecodeError:
            return data or "unknown error"
        if isinstance(payload, dict) and payload.get("error"):
            return str(payload["error"])
        return data or "unknown error"
