"""Tests for the SSE chat relay and frame formatting."""

import asyncio
import json

import pytest

from knowbase.ai.base import ChatAnswer, Citation, SSEEvent
from knowbase.ai.chat.reassembly import StreamAssembler, parse_frame
from knowbase.ai.chat.relay import ChatRelay, RelayState, chunk_text
from knowbase.ai.qbusiness.exceptions import QBusinessError

LONG_ANSWER = "第一段落です。\n\n" + "a" * 25 + "\n  indented line\n" + "末尾"


class FakeChatService:
    """Stands in for KnowledgeChatService."""

    def __init__(self, answer=None, error=None, delay=0.0):
        self.answer = answer
        self.error = error
        self.delay = delay
        self.calls = []
        self.cancelled = False

    async def ask(self, prompt, conversation_id=None, parent_message_id=None, user_id=None):
        self.calls.append((prompt, conversation_id, parent_message_id, user_id))
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        if self.error:
            raise self.error
        return self.answer


def make_answer(text=LONG_ANSWER, sources=None):
    return ChatAnswer(
        text=text,
        sources=sources if sources is not None else [
            Citation(title="Manual", url="https://docs/1", excerpt="step")
        ],
        conversation_id="conv-1",
        system_message_id="msg-9",
    )


async def collect(relay):
    return [frame async for frame in relay.stream()]


def events(frames):
    return [parse_frame(frame.rstrip("\n")) for frame in frames]


class TestSSEEvent:
    def test_comment_frame(self):
        assert SSEEvent(comment="ping").format() == ": ping\n\n"

    def test_multiline_data(self):
        assert SSEEvent(data="a\n\nb").format() == "data: a\ndata: \ndata: b\n\n"

    def test_named_event(self):
        assert SSEEvent(event="done", data="{}").format() == "event: done\ndata: {}\n\n"


class TestChunkText:
    def test_chunks_are_bounded_and_lossless(self):
        chunks = chunk_text(LONG_ANSWER, 7)

        assert all(0 < len(chunk) <= 7 for chunk in chunks)
        assert "".join(chunks) == LONG_ANSWER

    def test_empty_text(self):
        assert chunk_text("", 10) == []

    def test_rejects_non_positive_size(self):
        with pytest.raises(ValueError):
            chunk_text("abc", 0)

    @pytest.mark.parametrize(
        "text, size",
        [("xxxxxx[DONE]tail", 6), ("[DONE]", 6), ("[DONE]", 300), ("ab[DONE]", 2)],
    )
    def test_no_chunk_is_the_end_sentinel(self, text, size):
        chunks = chunk_text(text, size)

        assert "[DONE]" not in chunks
        assert all(0 < len(chunk) <= size for chunk in chunks)
        assert "".join(chunks) == text


class TestChatRelay:
    @pytest.mark.asyncio
    async def test_frame_order(self):
        relay = ChatRelay(FakeChatService(make_answer()), "q", chunk_size=10, ping_interval=1)

        frames = await collect(relay)

        assert frames[0] == ": open\n\n"
        parsed = [frame for frame in events(frames) if frame is not None]
        assert parsed[0].event == "sources"
        assert parsed[-1].event == "done"
        assert [f.event for f in parsed].count("sources") == 1
        assert [f.event for f in parsed].count("done") == 1
        assert all(f.event is None for f in parsed[1:-1])
        assert relay.state is RelayState.CLOSED

    @pytest.mark.asyncio
    async def test_answer_reassembles_losslessly(self):
        relay = ChatRelay(FakeChatService(make_answer()), "q", chunk_size=4, ping_interval=1)

        assembler = StreamAssembler()
        assembler.feed("".join(await collect(relay)))

        assert assembler.done is True
        assert assembler.answer == LONG_ANSWER
        assert assembler.conversation_id == "conv-1"
        assert assembler.parent_message_id == "msg-9"
        assert [s.url for s in assembler.sources] == ["https://docs/1"]

    @pytest.mark.asyncio
    async def test_answer_containing_end_sentinel_reassembles(self):
        text = "xxxxxx[DONE]tail"
        relay = ChatRelay(
            FakeChatService(make_answer(text=text)), "q", chunk_size=6, ping_interval=1
        )

        assembler = StreamAssembler()
        assembler.feed("".join(await collect(relay)))

        assert assembler.answer == text
        assert assembler.conversation_id == "conv-1"

    @pytest.mark.asyncio
    async def test_answer_frames_respect_chunk_size(self):
        relay = ChatRelay(FakeChatService(make_answer()), "q", chunk_size=6, ping_interval=1)

        answer_frames = [f for f in events(await collect(relay)) if f and f.event is None]

        assert all(len(f.data) <= 6 for f in answer_frames)

    @pytest.mark.asyncio
    async def test_empty_sources_frame_is_still_sent(self):
        relay = ChatRelay(FakeChatService(make_answer(sources=[])), "q", ping_interval=1)

        parsed = [f for f in events(await collect(relay)) if f]

        assert parsed[0].event == "sources"
        assert json.loads(parsed[0].data) == []

    @pytest.mark.asyncio
    async def test_pings_while_backend_is_slow(self):
        service = FakeChatService(make_answer(), delay=0.2)
        relay = ChatRelay(service, "q", ping_interval=0.02)

        frames = await collect(relay)

        sources_index = next(i for i, f in enumerate(frames) if f.startswith("event: sources"))
        assert ": ping\n\n" in frames[1:sources_index]
        assert frames[sources_index:].count(": ping\n\n") == 0

    @pytest.mark.asyncio
    async def test_backend_error_sends_single_error_frame(self):
        service = FakeChatService(error=QBusinessError("backend unavailable"))
        relay = ChatRelay(service, "q", ping_interval=1)

        frames = await collect(relay)

        assert frames[0] == ": open\n\n"
        assert len(frames) == 2
        error = parse_frame(frames[1].rstrip("\n"))
        assert error.event == "error"
        assert json.loads(error.data) == {"error": "backend unavailable"}
        assert relay.state is RelayState.CLOSED

    @pytest.mark.asyncio
    async def test_passes_conversation_and_user(self):
        service = FakeChatService(make_answer())
        relay = ChatRelay(
            service,
            "q",
            conversation_id="conv-1",
            parent_message_id="msg-1",
            user_id="me@example.com",
        )

        await collect(relay)

        assert service.calls == [("q", "conv-1", "msg-1", "me@example.com")]

    @pytest.mark.asyncio
    async def test_close_is_idempotent_and_stops_stream(self):
        relay = ChatRelay(FakeChatService(make_answer()), "q")

        relay.close()
        relay.close()

        assert relay.state is RelayState.CLOSED
        assert await collect(relay) == []

    @pytest.mark.asyncio
    async def test_disconnect_cancels_wait(self):
        service = FakeChatService(make_answer(), delay=5)
        relay = ChatRelay(service, "q", ping_interval=0.01)
        stream = relay.stream()

        assert await stream.__anext__() == ": open\n\n"
        assert await stream.__anext__() == ": ping\n\n"
        await stream.aclose()
        await asyncio.sleep(0.01)

        assert relay.state is RelayState.CLOSED
        assert service.cancelled is True
