"""
Pipeline layer - Stream processing for kubectl output.

- Utf8Decoder / LineSplitter: Bytes -> text -> complete lines
- LineDecoder: Raw log tails as lines
- JsonLinesDecoder: Watch streams as JSON records
"""

from kubectl_rest.pipeline.base import Decoder
from kubectl_rest.pipeline.decode import JsonLinesDecoder, parse_json_lines
from kubectl_rest.pipeline.lines import LineDecoder, LineSplitter, Utf8Decoder, read_lines

__all__ = [
    "Decoder",
    "JsonLinesDecoder",
    "LineDecoder",
    "LineSplitter",
    "Utf8Decoder",
    "parse_json_lines",
    "read_lines",
]
