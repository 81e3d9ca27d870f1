"""Tests for incremental reassembly of relay frames."""

import json

from knowbase.ai.chat.reassembly import StreamAssembler, parse_frame

STREAM = (
    ": open\n\n"
    ": ping\n\n"
    'event: sources\ndata: [{"title": "A", "url": "https://a", "excerpt": "x"}]\n\n'
    "data: Hello\n\n"
    "data: , world\ndata: second line\n\n"
    'event: done\ndata: {"conversationId": "c1", "parentMessageId": "m1"}\n\n'
)


def test_whole_stream():
    assembler = StreamAssembler()

    frames = assembler.feed(STREAM)

    assert [f.event for f in frames] == ["sources", None, None, "done"]
    assert assembler.answer == "Hello, world\nsecond line"
    assert assembler.done is True
    assert assembler.error is None
    assert assembler.conversation_id == "c1"
    assert assembler.parent_message_id == "m1"


def test_character_by_character_feed_matches_whole_feed():
    whole = StreamAssembler()
    whole.feed(STREAM)

    pieces = StreamAssembler()
    for char in STREAM:
        pieces.feed(char)

    assert pieces.answer == whole.answer
    assert pieces.sources == whole.sources
    assert pieces.done is True


def test_incomplete_frame_is_held_back():
    assembler = StreamAssembler()

    assert assembler.feed("data: partial") == []
    assert assembler.answer == ""
    assert [f.data for f in assembler.feed(" text\n\n")] == ["partial text"]


def test_sources_are_deduplicated():
    source = {"title": "A", "url": "https://a", "excerpt": "x"}
    other = {"title": "A", "url": "https://a", "excerpt": "different"}
    assembler = StreamAssembler()

    assembler.feed(f"event: sources\ndata: {json.dumps([source, source])}\n\n")
    assembler.feed(f"event: sources\ndata: {json.dumps([source, other])}\n\n")

    assert [s.excerpt for s in assembler.sources] == ["x", "different"]


def test_malformed_sources_frame_is_ignored():
    assembler = StreamAssembler()

    assembler.feed("event: sources\ndata: not json\n\ndata: ok\n\n")

    assert assembler.sources == []
    assert assembler.answer == "ok"


def test_done_sentinel_terminates():
    assembler = StreamAssembler()

    assembler.feed("data: a\n\ndata: [DONE]\n\ndata: b\n\n")

    assert assembler.answer == "a"
    assert assembler.done is True


def test_frames_after_done_are_ignored():
    assembler = StreamAssembler()
    assembler.feed("event: done\ndata: {}\n\n")

    assert assembler.feed("data: late\n\n") == []
    assert assembler.answer == ""


def test_error_frame_records_message_and_finishes():
    assembler = StreamAssembler()

    assembler.feed('data: part\n\nevent: error\ndata: {"error": "backend down"}\n\ndata: more\n\n')

    assert assembler.error == "backend down"
    assert assembler.finished is True
    assert assembler.done is False
    assert assembler.answer == "part"


def test_data_without_space_and_with_extra_spaces():
    assert parse_frame("data:x").data == "x"
    assert parse_frame("data:  two").data == " two"
    assert parse_frame(": comment only") is None
