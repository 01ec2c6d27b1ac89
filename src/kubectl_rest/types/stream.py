"""
Live response streams.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable

T = TypeVar("T")


class ResponseStream(Generic[T]):
    """An async iterator over a live response that owns a subprocess.

    Iterating to the end releases the subprocess on its own. Callers
    that stop early should close the stream, either explicitly or with
    ``async with``, so kubectl is stopped and its pipes are released.

    Example:
        >>> async with await client.perform_request(..., expect_stream=True) as stream:
        ...     async for chunk in stream:
        ...         sys.stdout.buffer.write(chunk)
    """

    def __init__(
        self,
        iterator: AsyncIterator[T],
        on_close: Callable[[], Awaitable[None]] | None = None,
    ) -> None:
        self._iterator = iterator
        self._on_close = on_close
        self._closed = False

    def __aiter__(self) -> ResponseStream[T]:
        return self

    async def __anext__(self) -> T:
        if self._closed:
            raise StopAsyncIteration
        return await self._iterator.__anext__()

    @property
    def closed(self) -> bool:
        """Whether aclose() was called."""
        return self._closed

    async def aclose(self) -> None:
        """Stop iteration and release the underlying process."""
        if self._closed:
            return
        self._closed = True
        aclose = getattr(self._iterator, "aclose", None)
        if aclose is not None:
            await aclose()
        if self._on_close is not None:
            await self._on_close()

    async def __aenter__(self) -> ResponseStream[T]:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()
