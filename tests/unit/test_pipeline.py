"""Tests for pipeline module."""

import asyncio

import pytest

from kubectl_rest.errors import DecodeError
from kubectl_rest.pipeline import (
    JsonLinesDecoder,
    LineDecoder,
    LineSplitter,
    Utf8Decoder,
    parse_json_lines,
    read_lines,
)


async def _aiter(items):
    for item in items:
        yield item


class TestLineSplitter:
    """Tests for LineSplitter."""

    def test_feed_across_boundaries(self) -> None:
        """Test lines split across chunks are reassembled."""
        splitter = LineSplitter()
        assert splitter.feed("ab") == []
        assert splitter.feed("c\nde") == ["abc"]
        assert splitter.feed("f\n") == ["def"]
        assert splitter.flush() == []

    def test_multiple_lines_in_one_chunk(self) -> None:
        """Test several complete lines in one chunk."""
        splitter = LineSplitter()
        assert splitter.feed("a\nb\nc") == ["a", "b"]
        assert splitter.residual == "c"

    def test_flush_residual(self) -> None:
        """Test the unterminated tail is emitted at end."""
        splitter = LineSplitter()
        splitter.feed("tail")
        assert splitter.flush() == ["tail"]
        assert splitter.flush() == []

    def test_crlf(self) -> None:
        """Test CRLF terminators, including a split CR/LF pair."""
        splitter = LineSplitter()
        assert splitter.feed("one\r") == []
        assert splitter.feed("\ntwo\r\n") == ["one", "two"]

    def test_empty_lines_kept(self) -> None:
        """Test that empty lines are emitted as empty strings."""
        assert LineSplitter().feed("\n\nx\n") == ["", "", "x"]

    @pytest.mark.asyncio
    async def test_split_async(self) -> None:
        """Test the async split over chunks."""
        lines = [line async for line in LineSplitter().split(_aiter(["ab", "c\nde", "f\n"]))]
        assert lines == ["abc", "def"]

    @pytest.mark.asyncio
    async def test_lines_emitted_before_next_chunk(self) -> None:
        """Test a completed line is available while the source is idle."""
        queue: asyncio.Queue = asyncio.Queue()

        async def source():
            while True:
                chunk = await queue.get()
                if chunk is None:
                    return
                yield chunk

        lines = LineSplitter().split(source())
        await queue.put("first\nsec")
        assert await asyncio.wait_for(lines.__anext__(), timeout=1) == "first"

        await queue.put("ond\n")
        await queue.put(None)
        assert [line async for line in lines] == ["second"]


class TestUtf8Decoder:
    """Tests for the incremental UTF-8 decoder."""

    def test_split_multibyte(self) -> None:
        """Test a multi-byte character split across chunks."""
        decoder = Utf8Decoder()
        data = "héllo".encode()
        assert decoder.feed(data[:2]) == "h"
        assert decoder.feed(data[2:]) == "éllo"
        assert decoder.flush() == ""

    def test_malformed_replaced(self) -> None:
        """Test malformed bytes are replaced."""
        decoder = Utf8Decoder()
        assert decoder.feed(b"a\xffb") == "a�b"


class TestLineDecoder:
    """Tests for LineDecoder."""

    @pytest.mark.asyncio
    async def test_decode_log_lines(self) -> None:
        """Test byte chunks decode into lines."""
        chunks = [b"2024-01-01 st", b"arted\n2024-01-01 re", "ady ✓".encode()]
        lines = [line async for line in LineDecoder().decode(_aiter(chunks))]
        assert lines == ["2024-01-01 started", "2024-01-01 ready ✓"]

    @pytest.mark.asyncio
    async def test_read_lines(self) -> None:
        """Test the read_lines helper."""
        lines = [line async for line in read_lines(_aiter([b"a\r\nb\n"]))]
        assert lines == ["a", "b"]

    def test_unsupported_encoding(self) -> None:
        """Test that only UTF-8 is accepted."""
        with pytest.raises(ValueError, match="Unsupported"):
            LineDecoder("latin-1")


class TestJsonLinesDecoder:
    """Tests for JSON Lines decoding."""

    @pytest.mark.asyncio
    async def test_decode_with_bad_line(self) -> None:
        """Test a malformed line is scoped to its own record."""
        lines = ['{"a":1}', "", "not-json", '{"b":2}']
        records = [r async for r in parse_json_lines(_aiter(lines))]

        assert len(records) == 3
        assert records[0].ok and records[0].value == {"a": 1}
        assert not records[1].ok
        assert isinstance(records[1].error, DecodeError)
        assert records[1].line == "not-json"
        assert records[1].line_number == 3
        assert records[2].ok and records[2].value == {"b": 2}

    @pytest.mark.asyncio
    async def test_decode_chunked_bytes(self) -> None:
        """Test JSON split at arbitrary byte boundaries."""
        chunks = [b'{"type": "ADD', b'ED"}\n{"type"', b': "DELETED"}\n']
        records = [r async for r in JsonLinesDecoder().decode(_aiter(chunks))]
        assert [r.unwrap()["type"] for r in records] == ["ADDED", "DELETED"]

    @pytest.mark.asyncio
    async def test_unterminated_last_line(self) -> None:
        """Test a final line without newline is still decoded."""
        records = [r async for r in JsonLinesDecoder().decode(_aiter([b'{"x": 1}\n{"x": 2}']))]
        assert [r.value for r in records] == [{"x": 1}, {"x": 2}]

    @pytest.mark.asyncio
    async def test_scalar_values(self) -> None:
        """Test that any JSON value is accepted, not only objects."""
        records = [r async for r in parse_json_lines(_aiter(["1", "null", '"s"']))]
        assert [r.value for r in records] == [1, None, "s"]
        assert all(r.ok for r in records)

    @pytest.mark.asyncio
    async def test_whitespace_line_is_an_error(self) -> None:
        """Test only empty lines are skipped; whitespace is a bad record."""
        records = [r async for r in parse_json_lines(_aiter(["", "   ", '{"a":1}']))]

        assert len(records) == 2
        assert not records[0].ok
        assert records[0].line_number == 2
        assert records[0].line == "   "
        assert records[1].value == {"a": 1}
