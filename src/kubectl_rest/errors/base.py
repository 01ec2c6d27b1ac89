"""Base error classes for kubectl-rest-python.

Provides a layered error hierarchy:
- KubectlRestError: Base class for all library errors
- UnsupportedOperationError: Request cannot be expressed through kubectl
- TranslationError: Request path/content type cannot be translated
- SubprocessError: kubectl could not be spawned or exited non-zero
- DecodeError: A single streamed line is not valid JSON
- RequestCancelledError: The request was cancelled
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Broad error categories surfaced by the client."""

    UNSUPPORTED = "unsupported_operation"
    TRANSLATION = "translation"
    SUBPROCESS = "subprocess"
    DECODE = "decode"
    CANCELLED = "cancelled"


@dataclass
class ErrorContext:
    """Structured error context for diagnostics.

    Provides actionable information for debugging and error handling.
    """

    field_path: str | None = None
    """Path to the problematic request field (e.g., 'content_type')"""

    details: dict[str, Any] = field(default_factory=dict)
    """Additional details about the error"""

    source: str | None = None
    """Error source (e.g., 'translator', 'process', 'pipeline')"""

    hint: str | None = None
    """Actionable hint for resolving the error"""

    def __str__(self) -> str:
        parts = []
        if self.source:
            parts.append(f"[{self.source}]")
        if self.field_path:
            parts.append(f"at '{self.field_path}'")
        if self.hint:
            parts.append(f"(hint: {self.hint})")
        return " ".join(parts)


class KubectlRestError(Exception):
    """Base class for all kubectl-rest-python errors.

    None of these errors are retried by the library. Retry policy,
    if any, belongs to the caller.

    Attributes:
        message: Human-readable error message
        context: Optional structured error context
    """

    kind: ErrorKind | None = None
    retryable: bool = False

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
    ) -> None:
        self.message = message
        self.context = context or ErrorContext()
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the full error message."""
        ctx_str = str(self.context)
        if ctx_str:
            return f"{self.message} {ctx_str}"
        return self.message

    def with_hint(self, hint: str) -> KubectlRestError:
        """Add a hint to this error."""
        self.context.hint = hint
        self.args = (self._format_message(),)
        return self


class UnsupportedOperationError(KubectlRestError):
    """The request needs a capability kubectl does not offer.

    Raised when:
    - The HTTP method has no kubectl verb (HEAD, OPTIONS)
    - A tunnel/channel protocol is requested
    - A Content-Type or Accept header would have to be sent
    - Server-side apply is requested
    """

    kind = ErrorKind.UNSUPPORTED

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        field: str | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="translator")
        if field:
            ctx.field_path = field
        super().__init__(message, ctx)
        self.field = field


class TranslationError(KubectlRestError):
    """The request could not be translated into a kubectl command line.

    Deterministic: the same path and content type always fail the same way.
    """

    kind = ErrorKind.TRANSLATION

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        path: str | None = None,
        content_type: str | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="translator")
        if path is not None:
            ctx.details["path"] = path
        if content_type is not None:
            ctx.details["content_type"] = content_type
        super().__init__(message, ctx)
        self.path = path
        self.content_type = content_type


class SubprocessError(KubectlRestError):
    """kubectl failed to start or exited with a non-zero status."""

    kind = ErrorKind.SUBPROCESS

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        exit_code: int | None = None,
        args: tuple[str, ...] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="process")
        if exit_code is not None:
            ctx.details["exit_code"] = exit_code
        super().__init__(message, ctx)
        self.exit_code = exit_code
        self.command_args = args or ()
        self.__cause__ = cause


class DecodeError(KubectlRestError):
    """A streamed line could not be parsed as JSON.

    Scoped to a single record; the surrounding stream keeps going.
    """

    kind = ErrorKind.DECODE

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        *,
        line_number: int | None = None,
        line: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="pipeline")
        if line_number is not None:
            ctx.details["line_number"] = line_number
        super().__init__(message, ctx)
        self.line_number = line_number
        self.line = line
        self.__cause__ = cause


class RequestCancelledError(KubectlRestError):
    """The request's cancel token fired before or during the request."""

    kind = ErrorKind.CANCELLED

    def __init__(
        self,
        message: str = "Request was cancelled",
        context: ErrorContext | None = None,
        *,
        reason: str | None = None,
    ) -> None:
        ctx = context or ErrorContext(source="client")
        if reason:
            ctx.details["reason"] = reason
        super().__init__(message, ctx)
        self.reason = reason
