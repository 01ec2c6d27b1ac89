"""
Line splitting for live byte streams.

Implements:
- Utf8Decoder: Incremental bytes -> text decoding
- LineSplitter: Text chunks -> complete lines
- LineDecoder: Bytes -> lines, used for log tails and as the first
  stage of JSON Lines decoding
"""

from __future__ import annotations

import codecs
from typing import TYPE_CHECKING

from kubectl_rest.pipeline.base import Decoder

if TYPE_CHECKING:
    from collections.abc import AsyncIterable, AsyncIterator


class Utf8Decoder:
    """Incremental UTF-8 decoder.

    Multi-byte sequences split across chunk boundaries are held back
    until the rest arrives. Malformed bytes are replaced, not raised.
    """

    def __init__(self, errors: str = "replace") -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors=errors)

    def feed(self, chunk: bytes) -> str:
        """Decode a chunk, returning whatever text is complete."""
        return self._decoder.decode(chunk)

    def flush(self) -> str:
        """Decode any bytes still held at end of input."""
        return self._decoder.decode(b"", final=True)

    async def decode(self, byte_stream: AsyncIterable[bytes]) -> AsyncIterator[str]:
        """Decode a byte stream into text chunks."""
        async for chunk in byte_stream:
            text = self.feed(chunk)
            if text:
                yield text
        tail = self.flush()
        if tail:
            yield tail


class LineSplitter:
    """Stateful splitter from text chunks to complete lines.

    The unterminated tail of the current line is carried between chunks
    and only emitted at end of input. Both ``\\n`` and ``\\r\\n``
    terminators are stripped.

    Example:
        >>> splitter = LineSplitter()
        >>> splitter.feed("ab")
        []
        >>> splitter.feed("c\\nde")
        ['abc']
        >>> splitter.feed("f\\n")
        ['def']
        >>> splitter.flush()
        []
    """

    def __init__(self) -> None:
        self._residual = ""

    @property
    def residual(self) -> str:
        """The not-yet-terminated tail of the current line."""
        return self._residual

    def feed(self, chunk: str) -> list[str]:
        """Consume a chunk and return the lines it completed."""
        if "\n" not in chunk:
            self._residual += chunk
            return []

        parts = (self._residual + chunk).split("\n")
        self._residual = parts.pop()
        return [_strip_cr(line) for line in parts]

    def flush(self) -> list[str]:
        """Return the residual as a final line, if non-empty."""
        residual, self._residual = self._residual, ""
        if not residual:
            return []
        return [_strip_cr(residual)]

    async def split(self, chunks: AsyncIterable[str]) -> AsyncIterator[str]:
        """Split a stream of text chunks into lines.

        Lines are yielded as soon as the chunk completing them arrives.
        """
        async for chunk in chunks:
            for line in self.feed(chunk):
                yield line
        for line in self.flush():
            yield line


def _strip_cr(line: str) -> str:
    return line[:-1] if line.endswith("\r") else line


class LineDecoder(Decoder[str]):
    """Decode a byte stream into text lines.

    Example:
        >>> stream = await client.perform_request(
        ...     method="GET", path="/api/v1/namespaces/default/pods/web-0/log",
        ...     query={"follow": "1"}, expect_stream=True,
        ... )
        >>> async for line in LineDecoder().decode(stream):
        ...     print(line)
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        """Initialize the line decoder.

        Args:
            encoding: Text encoding of the stream (only utf-8 is supported)
        """
        if codecs.lookup(encoding).name != "utf-8":
            raise ValueError(f"Unsupported stream encoding: {encoding}")

    async def decode(self, byte_stream: AsyncIterable[bytes]) -> AsyncIterator[str]:
        """Decode bytes into lines, terminators stripped."""
        text = Utf8Decoder().decode(byte_stream)
        async for line in LineSplitter().split(text):
            yield line


def read_lines(byte_stream: AsyncIterable[bytes]) -> AsyncIterator[str]:
    """Read a byte stream as UTF-8 text lines."""
    return LineDecoder().decode(byte_stream)
