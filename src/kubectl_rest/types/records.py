"""
Record types produced by the streaming JSON decoder.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from kubectl_rest.errors import DecodeError


@dataclass(frozen=True)
class JsonRecord:
    """One non-empty line of a JSON Lines stream.

    Exactly one of ``value`` and ``error`` is meaningful: a record that
    failed to parse carries the DecodeError instead of raising it, so one
    malformed watch event does not end the stream.

    Attributes:
        line_number: 1-based line number within the stream
        line: The raw line text
        value: Parsed JSON value (None when decoding failed)
        error: Decode failure scoped to this line
    """

    line_number: int
    line: str
    value: Any = None
    error: DecodeError | None = None

    @property
    def ok(self) -> bool:
        """Whether the line parsed successfully."""
        return self.error is None

    def unwrap(self) -> Any:
        """Return the parsed value, raising this record's DecodeError."""
        if self.error is not None:
            raise self.error
        return self.value
