"""
Server-Sent Events relay for one chat question.

The backend answers in one piece; the relay keeps the connection alive with
comment pings while waiting and then replays the answer as a frame sequence:

    : open
    : ping                      (zero or more)
    event: sources              (exactly once)
    data: <answer chunk>        (zero or more)
    event: done                 (terminal)

A failure at any point produces a single terminal `event: error` instead.
Nothing is emitted after a terminal frame.
"""

import asyncio
import json
from collections.abc import AsyncGenerator
from enum import Enum

from knowbase.ai.base import ChatAnswer, SSEEvent
from knowbase.ai.chat.reassembly import DONE_SENTINEL
from knowbase.ai.chat.service import KnowledgeChatService
from knowbase.utils.logger import logger


class RelayState(str, Enum):
    OPEN = "open"
    BACKEND_CALL = "backend_call"
    STREAMING = "streaming"
    DONE = "done"
    ERROR = "error"
    CLOSED = "closed"


def chunk_text(text: str, size: int) -> list[str]:
    """
    Split text into consecutive pieces of at most `size` characters.

    No piece is exactly the end-of-stream sentinel; such a piece is cut one
    character short and the rest carries over to the next piece.
    """
    if size < 1:
        raise ValueError("chunk size must be positive")
    chunks: list[str] = []
    start = 0
    while start < len(text):
        end = start + size
        if text[start:end] == DONE_SENTINEL:
            end -= 1
        chunks.append(text[start:end])
        start = end
    return chunks


class ChatRelay:
    """Relays one question to the chat service as an SSE frame stream."""

    def __init__(
        self,
        service: KnowledgeChatService,
        prompt: str,
        conversation_id: str | None = None,
        parent_message_id: str | None = None,
        user_id: str | None = None,
        ping_interval: float = 5.0,
        chunk_size: int = 300,
    ):
        self.service = service
        self.prompt = prompt
        self.conversation_id = conversation_id
        self.parent_message_id = parent_message_id
        self.user_id = user_id
        self.ping_interval = ping_interval
        self.chunk_size = chunk_size
        self.state = RelayState.OPEN
        self._task: asyncio.Task[ChatAnswer] | None = None

    @property
    def closed(self) -> bool:
        return self.state is RelayState.CLOSED

    def close(self) -> None:
        """Stop relaying. Safe to call more than once."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        if not self.closed:
            logger.debug("[ChatRelay] Closed", previous_state=self.state.value)
        self.state = RelayState.CLOSED

    async def stream(self) -> AsyncGenerator[str, None]:
        """
        Yield formatted SSE frames for the question.

        Yields:
            str: One complete frame, terminated by a blank line
        """
        if self.state is not RelayState.OPEN:
            return

        try:
            yield SSEEvent(comment="open").format()

            self.state = RelayState.BACKEND_CALL
            self._task = asyncio.create_task(
                self.service.ask(
                    self.prompt,
                    conversation_id=self.conversation_id,
                    parent_message_id=self.parent_message_id,
                    user_id=self.user_id,
                )
            )

            while True:
                done, _ = await asyncio.wait({self._task}, timeout=self.ping_interval)
                if self.closed:
                    return
                if self._task in done:
                    break
                yield SSEEvent(comment="ping").format()

            try:
                answer = self._task.result()
            except Exception as e:
                logger.error(
                    "[ChatRelay] Backend call failed",
                    error=str(e),
                    error_type=type(e).__name__,
                )
                self.state = RelayState.ERROR
                yield self._error_frame(e)
                return

            self.state = RelayState.STREAMING
            sources = [source.model_dump() for source in answer.sources]
            yield SSEEvent(
                event="sources", data=json.dumps(sources, ensure_ascii=False)
            ).format()

            for chunk in chunk_text(answer.text, self.chunk_size):
                if self.closed:
                    return
                yield SSEEvent(data=chunk).format()

            self.state = RelayState.DONE
            yield SSEEvent(
                event="done",
                data=json.dumps(
                    {
                        "conversationId": answer.conversation_id,
                        "parentMessageId": answer.system_message_id,
                    }
                ),
            ).format()
            logger.info(
                "[ChatRelay] Stream completed",
                conversation_id=answer.conversation_id,
                answer_length=len(answer.text),
            )
        finally:
            self.close()

    @staticmethod
    def _error_frame(error: Exception) -> str:
        message = getattr(error, "message", None) or str(error) or type(error).__name__
        return SSEEvent(
            event="error", data=json.dumps({"error": message}, ensure_ascii=False)
        ).format()
