"""
JSON Lines decoding for watch streams.

Each non-empty line becomes one JsonRecord. A line that is not valid
JSON becomes a record carrying a DecodeError, and the stream goes on.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from kubectl_rest.errors import DecodeError
from kubectl_rest.pipeline.base import Decoder
from kubectl_rest.pipeline.lines import LineDecoder
from kubectl_rest.types.records import JsonRecord

if TYPE_CHECKING:
    from collections.abc import AsyncIterable, AsyncIterator


async def parse_json_lines(lines: AsyncIterable[str]) -> AsyncIterator[JsonRecord]:
    """Parse already-split lines into JSON records.

    Args:
        lines: Async iterable of text lines

    Yields:
        One JsonRecord per non-empty line; empty lines are skipped, and
        a whitespace-only line is reported as an error record
    """
    line_number = 0
    async for line in lines:
        line_number += 1
        if not line:
            continue

        try:
            value = json.loads(line)
        except json.JSONDecodeError as e:
            yield JsonRecord(
                line_number=line_number,
                line=line,
                error=DecodeError(
                    f"Invalid JSON on line {line_number}: {e.msg}",
                    line_number=line_number,
                    line=line,
                    cause=e,
                ),
            )
            continue

        yield JsonRecord(line_number=line_number, line=line, value=value)


class JsonLinesDecoder(Decoder[JsonRecord]):
    """JSON Lines (NDJSON) decoder.

    Parses newline-delimited JSON, as emitted by watch requests:
    ```
    {"type": "ADDED", "object": {...}}
    {"type": "MODIFIED", "object": {...}}
    ```
    """

    async def decode(self, byte_stream: AsyncIterable[bytes]) -> AsyncIterator[JsonRecord]:
        """Decode a byte stream into JSON records.

        Args:
            byte_stream: Async iterable of raw bytes

        Yields:
            JsonRecord per non-empty line
        """
        async for record in parse_json_lines(LineDecoder().decode(byte_stream)):
            yield record
