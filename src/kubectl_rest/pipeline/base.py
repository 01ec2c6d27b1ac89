"""
Base abstractions for the pipeline layer.

Defines the interface shared by the stream decoders that turn kubectl's
stdout into something a caller can iterate.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import AsyncIterable, AsyncIterator

T = TypeVar("T")


class Decoder(ABC, Generic[T]):
    """Abstract decoder that converts a byte stream into items.

    Decoders are pull-based: they only do work when the consumer asks
    for the next item, and only wait on the chunks the source delivers.
    """

    @abstractmethod
    def decode(self, byte_stream: AsyncIterable[bytes]) -> AsyncIterator[T]:
        """Decode a byte stream.

        Args:
            byte_stream: Async iterable of raw bytes

        Yields:
            Decoded items, in source order
        """
        ...
