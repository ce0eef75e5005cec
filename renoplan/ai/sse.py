"""
Incremental decoder for OpenAI-style chat-completion streams.

The gateway sends `data: {json}` frames separated by newlines, `:` comment
lines as keep-alives and a final `data: [DONE]`. Network chunks may split a
frame (or a multi-byte UTF-8 sequence) anywhere, so the decoder buffers
partial lines and re-tries a frame whose JSON does not parse yet once more
bytes arrive.
"""

import codecs
import json
from collections.abc import AsyncIterable, AsyncIterator
from typing import Any

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


class SSEDecoder:
    """Accumulates assistant text from a chat-completion SSE byte stream.

    Usage:
        decoder = SSEDecoder()
        for chunk in chunks:
            for delta in decoder.feed(chunk):
                render(decoder.text)
        decoder.flush()
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self.text = ""
        self.done = False
        self.error: str | None = None

    def feed(self, chunk: bytes) -> list[str]:
        """Decode a network chunk and return the content deltas it completed.

        Everything after the `[DONE]` sentinel is ignored, including later
        chunks.
        """
        if self.done:
            return []

        self._buffer += self._decoder.decode(chunk)
        deltas: list[str] = []

        while not self.done:
            newline = self._buffer.find("\n")
            if newline == -1:
                break

            line = self._buffer[:newline]
            self._buffer = self._buffer[newline + 1 :]

            try:
                delta = self._process_line(line)
            except json.JSONDecodeError:
                # Frame is incomplete; wait for more bytes
                self._buffer = line + "\n" + self._buffer
                break

            if delta:
                deltas.append(delta)

        return deltas

    def flush(self) -> list[str]:
        """Process whatever is left at end of stream, best-effort.

        Lines that still fail to parse are dropped.
        """
        if self.done:
            return []

        self._buffer += self._decoder.decode(b"", final=True)
        remaining, self._buffer = self._buffer, ""
        deltas: list[str] = []

        for raw in remaining.split("\n"):
            if self.done:
                break
            try:
                delta = self._process_line(raw)
            except json.JSONDecodeError:
                continue
            if delta:
                deltas.append(delta)

        return deltas

    def _process_line(self, line: str) -> str | None:
        if line.endswith("\r"):
            line = line[:-1]

        if not line or line.startswith(":") or not line.strip():
            return None
        if not line.startswith(DATA_PREFIX):
            return None

        payload = line[len(DATA_PREFIX) :].strip()
        if payload == DONE_SENTINEL:
            self.done = True
            return None

        frame = json.loads(payload)
        if isinstance(frame, dict) and frame.get("error"):
            # Relay-side failure reported in-band
            self.error = str(frame["error"])
            return None

        delta = extract_delta(frame)
        if delta:
            self.text += delta
        return delta


def extract_delta(frame: Any) -> str | None:
    """Return `choices[0].delta.content` of a parsed frame, if present."""
    if not isinstance(frame, dict):
        return None
    choices = frame.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    delta = first.get("delta")
    if not isinstance(delta, dict):
        return None
    content = delta.get("content")
    return content if isinstance(content, str) else None


async def iter_sse_deltas(
    byte_stream: AsyncIterable[bytes], decoder: SSEDecoder | None = None
) -> AsyncIterator[str]:
    """Yield content deltas from an async byte stream, flushing at the end.

    Pass a decoder to read the accumulated `text` afterwards.
    """
    decoder = decoder or SSEDecoder()
    async for chunk in byte_stream:
        for delta in decoder.feed(chunk):
            yield delta
        if decoder.done:
            return
    for delta in decoder.flush():
        yield delta
