"""Async client for the chat relay's event stream."""

from collections.abc import Callable

import httpx
from pydantic import BaseModel, Field

from knowbase.ai.base import Citation
from knowbase.ai.chat.reassembly import StreamAssembler
from knowbase.utils.logger import logger

STREAM_PATH = "/api/chat/stream"


class ChatStreamError(Exception):
    """Raised when the relay rejects the request or reports an error frame."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ChatResult(BaseModel):
    """Answer rebuilt from the stream. `completed` is False if it ended without done."""

    answer: str
    sources: list[Citation] = Field(default_factory=list)
    conversation_id: str | None = None
    parent_message_id: str | None = None
    completed: bool = False


class ChatStreamClient:
    """Posts questions to the relay and reassembles the streamed answer."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 120.0,
        cookies: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Relay base URL, e.g. http://localhost:8080
            timeout: Read timeout in seconds
            cookies: Session cookies forwarded to the relay
            transport: Optional httpx transport (tests)
        """
        self.base_url = base_url
        self.timeout = timeout
        self.cookies = cookies
        self.transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                cookies=self.cookies,
                timeout=self.timeout,
                transport=self.transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def ask(
        self,
        prompt: str,
        conversation_id: str | None = None,
        parent_message_id: str | None = None,
        on_update: Callable[[StreamAssembler], None] | None = None,
    ) -> ChatResult:
        """Ask a question and read the stream until done.

        Args:
            prompt: Question text
            conversation_id: Conversation to continue
            parent_message_id: Last answer id in that conversation
            on_update: Called with the assembler after each applied frame batch

        Returns:
            ChatResult: Reassembled answer and sources

        Raises:
            ChatStreamError: On a non-2xx status, an error frame or a transport failure
        """
        client = await self._ensure_client()
        payload = {
            "prompt": prompt,
            "conversationId": conversation_id,
            "parentMessageId": parent_message_id,
        }
        assembler = StreamAssembler()

        try:
            async with client.stream(
                "POST",
                STREAM_PATH,
                json={key: value for key, value in payload.items() if value},
                headers={"Accept": "text/event-stream"},
            ) as response:
                if response.status_code >= 400:
                    body = (await response.aread()).decode("utf-8", errors="replace")
                    raise ChatStreamError(
                        f"Chat request failed ({response.status_code}): {body}",
                        status_code=response.status_code,
                    )

                async for piece in response.aiter_text():
                    if assembler.feed(piece) and on_update:
                        on_update(assembler)
                    if assembler.finished:
                        break
        except httpx.HTTPError as e:
            logger.error("[ChatStreamClient] Stream failed", error=str(e))
            raise ChatStreamError(f"Stream failed: {e}") from e

        if assembler.error is not None:
            raise ChatStreamError(assembler.error)

        if not assembler.done:
            logger.warning(
                "[ChatStreamClient] Stream ended before done",
                answer_length=len(assembler.answer),
            )

        return ChatResult(
            answer=assembler.answer,
            sources=assembler.sources,
            conversation_id=assembler.conversation_id,
            parent_message_id=assembler.parent_message_id,
            completed=assembler.done,
        )
