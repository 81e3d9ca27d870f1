"""Tests for the async relay client using an httpx mock transport."""

import json

import httpx
import pytest

from knowbase.ai.chat.client import STREAM_PATH, ChatStreamClient, ChatStreamError

FRAMES = [
    ": open\n\n",
    'event: sources\ndata: [{"title": "A", "url": "https://a", "excerpt": "x"}]\n\n',
    "data: Hel",
    "lo\n\ndata: !\n\n",
    'event: done\ndata: {"conversationId": "c1", "parentMessageId": "m1"}\n\n',
]


class PieceStream(httpx.AsyncByteStream):
    def __init__(self, pieces):
        self.pieces = pieces

    async def __aiter__(self):
        for piece in self.pieces:
            yield piece.encode("utf-8")


def transport_for(pieces, status_code=200, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(
            status_code,
            headers={"content-type": "text/event-stream"},
            stream=PieceStream(pieces),
        )

    return httpx.MockTransport(handler)


@pytest.mark.asyncio
async def test_reassembles_streamed_answer():
    seen = []
    updates = []
    client = ChatStreamClient("http://relay", transport=transport_for(FRAMES, seen=seen))

    result = await client.ask("hi", conversation_id="c0", on_update=lambda a: updates.append(a.answer))
    await client.close()

    assert result.answer == "Hello!"
    assert result.completed is True
    assert result.conversation_id == "c1"
    assert result.parent_message_id == "m1"
    assert [s.url for s in result.sources] == ["https://a"]
    assert updates[-1] == "Hello!"
    assert seen[0].url.path == STREAM_PATH
    assert json.loads(seen[0].content) == {"prompt": "hi", "conversationId": "c0"}


@pytest.mark.asyncio
async def test_stream_without_done_is_incomplete():
    client = ChatStreamClient("http://relay", transport=transport_for(FRAMES[:3] + ["\n\n"]))

    result = await client.ask("hi")

    assert result.answer == "Hel"
    assert result.completed is False


@pytest.mark.asyncio
async def test_error_frame_raises():
    pieces = [": open\n\n", 'event: error\ndata: {"error": "backend down"}\n\n']
    client = ChatStreamClient("http://relay", transport=transport_for(pieces))

    with pytest.raises(ChatStreamError) as exc_info:
        await client.ask("hi")

    assert exc_info.value.message == "backend down"


@pytest.mark.asyncio
async def test_http_error_status_raises():
    client = ChatStreamClient(
        "http://relay", transport=transport_for(['{"error": "Invalid request"}'], status_code=400)
    )

    with pytest.raises(ChatStreamError) as exc_info:
        await client.ask("  ")

    assert exc_info.value.status_code == 400
    assert "Invalid request" in exc_info.value.message
