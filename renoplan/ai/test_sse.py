"""
Tests for the incremental SSE decoder.
"""

import json

import pytest

from renoplan.ai.sse import SSEDecoder, extract_delta, iter_sse_deltas


def frame(content: str) -> str:
    payload = {"choices": [{"delta": {"content": content}}]}
    return "data: " + json.dumps(payload, ensure_ascii=False) + "\n"


def decode(chunks: list[bytes]) -> SSEDecoder:
    decoder = SSEDecoder()
    for chunk in chunks:
        decoder.feed(chunk)
    decoder.flush()
    return decoder


STREAM = (
    ": keep-alive\n"
    + frame("Hel")
    + "\n"
    + frame("lo")
    + "event: ping\n"
    + frame(" wörld 🏠")
    + "data: [DONE]\n"
).encode()


class TestSSEDecoder:
    def test_hello_example(self):
        decoder = decode([frame("Hel").encode(), frame("lo").encode(), b"data: [DONE]\n"])

        assert decoder.text == "Hello"
        assert decoder.done is True

    def test_feed_returns_deltas(self):
        decoder = SSEDecoder()

        assert decoder.feed((frame("a") + frame("b")).encode()) == ["a", "b"]
        assert decoder.text == "ab"

    @pytest.mark.parametrize("size", [1, 2, 3, 7, 16, 64])
    def test_chunk_boundaries_do_not_change_text(self, size):
        chunks = [STREAM[i : i + size] for i in range(0, len(STREAM), size)]

        assert decode(chunks).text == decode([STREAM]).text == "Hello wörld 🏠"

    def test_every_split_point_gives_same_text(self):
        expected = decode([STREAM]).text
        for cut in range(1, len(STREAM)):
            assert decode([STREAM[:cut], STREAM[cut:]]).text == expected

    def test_comments_and_blank_lines_are_ignored(self):
        decoder = decode([b": comment\n\n\r\n:another\n" + frame("x").encode()])

        assert decoder.text == "x"

    def test_non_data_lines_are_ignored(self):
        decoder = decode([b"event: message\nid: 4\nretry: 10\n" + frame("y").encode()])

        assert decoder.text == "y"

    def test_crlf_line_endings(self):
        decoder = decode([frame("a").replace("\n", "\r\n").encode(), b"data: [DONE]\r\n"])

        assert decoder.text == "a"
        assert decoder.done is True

    def test_done_halts_processing(self):
        decoder = SSEDecoder()
        decoder.feed((frame("a") + "data: [DONE]\n" + frame("b")).encode())

        assert decoder.feed(frame("c").encode()) == []
        assert decoder.flush() == []
        assert decoder.text == "a"

    def test_split_json_frame_is_not_lost_or_duplicated(self):
        raw = frame("split").encode()
        decoder = SSEDecoder()

        assert decoder.feed(raw[:20]) == []
        assert decoder.feed(raw[20:]) == ["split"]
        assert decoder.text == "split"

    def test_frame_split_after_newline_boundary(self):
        # The first chunk ends with a complete line whose JSON is truncated
        text = frame("abc")
        broken = text[:-8] + "\n"
        decoder = SSEDecoder()

        decoder.feed(broken.encode())
        assert decoder.text == ""

    def test_flush_processes_unterminated_last_line(self):
        decoder = SSEDecoder()
        decoder.feed(frame("a").encode() + frame("b").rstrip("\n").encode())

        assert decoder.flush() == ["b"]
        assert decoder.text == "ab"

    def test_flush_swallows_bad_json(self):
        decoder = SSEDecoder()
        decoder.feed(b'data: {"choices": [')

        assert decoder.flush() == []
        assert decoder.text == ""

    def test_multibyte_character_split_across_chunks(self):
        raw = frame("é").encode()
        cut = raw.index("é".encode()) + 1

        assert decode([raw[:cut], raw[cut:]]).text == "é"

    def test_frames_without_content_contribute_nothing(self):
        role_only = 'data: {"choices": [{"delta": {"role": "assistant"}}]}\n'
        empty = 'data: {"choices": []}\n'

        assert decode([(role_only + empty + frame("z")).encode()]).text == "z"

    def test_error_frame_is_recorded(self):
        decoder = decode([frame("par").encode(), b'data: {"error": "AI gateway error"}\n'])

        assert decoder.text == "par"
        assert decoder.error == "AI gateway error"


def test_extract_delta_handles_malformed_frames():
    assert extract_delta({"choices": [{"delta": {"content": "x"}}]}) == "x"
    assert extract_delta({"choices": "nope"}) is None
    assert extract_delta([1, 2]) is None
    assert extract_delta({"choices": [{"delta": {"content": 5}}]}) is None


@pytest.mark.asyncio
async def test_iter_sse_deltas_yields_in_order():
    async def stream():
        for chunk in (frame("Hel").encode()[:9], frame("Hel").encode()[9:], frame("lo").encode()):
            yield chunk
        yield b"data: [DONE]\n"
        yield frame("ignored").encode()

    decoder = SSEDecoder()
    deltas = [d async for d in iter_sse_deltas(stream(), decoder)]

    assert deltas == ["Hel", "lo"]
    assert decoder.text == "Hello"
