"""
Request cancellation control.

Provides cancellation tokens and handles. A token passed with a request
fails the request fast when already cancelled, and kills the kubectl
subprocess when cancelled while it runs.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from kubectl_rest.telemetry import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

logger = get_logger("kubectl_rest.client.cancel")


class CancelReason(str, Enum):
    """Reasons for cancellation."""

    USER_REQUEST = "user_request"
    TIMEOUT = "timeout"
    SHUTDOWN = "shutdown"


@dataclass
class CancelState:
    """State of a cancellation token.

    Attributes:
        cancelled: Whether cancellation was requested
        reason: Reason for cancellation
        timestamp: Time of cancellation
    """

    cancelled: bool = False
    reason: CancelReason | None = None
    timestamp: float | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


class CancelToken:
    """Cancellation token for aborting in-flight requests.

    Timeouts are the caller's business: pass ``timeout`` to have the
    token cancel itself, or cancel it from another task.

    Example:
        >>> token = CancelToken()
        >>> task = asyncio.create_task(
        ...     client.perform_request(method="GET", path="/api/v1/pods",
        ...                            expect_json=True, cancel_token=token)
        ... )
        >>> token.cancel(CancelReason.USER_REQUEST)
    """

    def __init__(self, timeout: float | None = None) -> None:
        """Initialize cancellation token.

        Args:
            timeout: Optional timeout in seconds
        """
        self._state = CancelState()
        self._event = asyncio.Event()
        self._callbacks: list[Callable[[CancelReason], Any]] = []
        self._timeout = timeout
        self._timeout_task: asyncio.Task[None] | None = None

        if timeout:
            self._start_timeout()

    def _start_timeout(self) -> None:
        """Start the timeout task."""
        async def timeout_handler() -> None:
            await asyncio.sleep(self._timeout)  # type: ignore[arg-type]
            if not self._state.cancelled:
                self.cancel(CancelReason.TIMEOUT)

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running loop, cancel timeout not armed", timeout=self._timeout)
            return
        self._timeout_task = loop.create_task(timeout_handler())

    def cancel(
        self,
        reason: CancelReason = CancelReason.USER_REQUEST,
        **metadata: Any,
    ) -> bool:
        """Request cancellation.

        Args:
            reason: Reason for cancellation
            **metadata: Additional metadata

        Returns:
            True if cancellation was newly requested, False if already cancelled
        """
        if self._state.cancelled:
            return False

        self._state.cancelled = True
        self._state.reason = reason
        self._state.timestamp = time.time()
        self._state.metadata.update(metadata)

        self._event.set()

        if self._timeout_task and not self._timeout_task.done():
            self._timeout_task.cancel()

        for callback in list(self._callbacks):
            self._invoke(callback, reason)

        return True

    @staticmethod
    def _invoke(callback: Callable[[CancelReason], Any], reason: CancelReason) -> None:
        try:
            callback(reason)
        except Exception:
            logger.exception("Cancel callback failed", reason=reason.value)

    @property
    def is_cancelled(self) -> bool:
        """Check if cancellation was requested."""
        return self._state.cancelled

    @property
    def reason(self) -> CancelReason | None:
        """Get cancellation reason."""
        return self._state.reason

    @property
    def state(self) -> CancelState:
        """Get full cancellation state."""
        return self._state

    async def wait(self) -> CancelReason:
        """Wait until cancellation is requested."""
        await self._event.wait()
        return self._state.reason or CancelReason.USER_REQUEST

    def on_cancel(self, callback: Callable[[CancelReason], Any]) -> CancelToken:
        """Register a callback to be called on cancellation.

        The callback runs immediately when the token is already cancelled.

        Returns:
            Self for chaining
        """
        self._callbacks.append(callback)
        if self._state.cancelled and self._state.reason:
            self._invoke(callback, self._state.reason)
        return self

    def remove_callback(self, callback: Callable[[CancelReason], Any]) -> None:
        """Unregister a callback added with on_cancel()."""
        if callback in self._callbacks:
            self._callbacks.remove(callback)


class CancelHandle:
    """Public handle for cancelling a request.

    Example:
        >>> handle, token = create_cancel_pair(timeout=30)
        >>> stream = await client.perform_request(..., cancel_token=token)
        >>> handle.cancel()
    """

    def __init__(self, token: CancelToken) -> None:
        self._token = token

    def cancel(
        self,
        reason: CancelReason = CancelReason.USER_REQUEST,
        **metadata: Any,
    ) -> bool:
        """Request cancellation.

        Returns:
            True if cancellation was newly requested
        """
        return self._token.cancel(reason, **metadata)

    @property
    def is_cancelled(self) -> bool:
        """Check if cancellation was requested."""
        return self._token.is_cancelled

    @property
    def reason(self) -> CancelReason | None:
        """Get cancellation reason."""
        return self._token.reason


def create_cancel_pair(
    timeout: float | None = None,
) -> tuple[CancelHandle, CancelToken]:
    """Create a cancel handle and token pair.

    Args:
        timeout: Optional timeout in seconds

    Returns:
        Tuple of (CancelHandle, CancelToken)
    """
    token = CancelToken(timeout=timeout)
    return CancelHandle(token), token
