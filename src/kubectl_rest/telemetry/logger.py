"""
Structured logging for kubectl-rest-python.

Log records carry keyword fields plus the context of the request being
dispatched. Credentials that may show up on a kubectl command line or in
a request body are masked before anything is written.
"""

from __future__ import annotations

import json
import logging
import re
import sys
import time
from contextvars import ContextVar
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, ClassVar

_log_context: ContextVar[dict[str, Any] | None] = ContextVar("log_context", default=None)

REDACTED = "***REDACTED***"


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"

    def to_logging_level(self) -> int:
        return getattr(logging, self.value)


@dataclass
class LogContext:
    """The request currently being dispatched.

    Attributes:
        request_id: Short random id, one per perform_request() call
        method: HTTP method of the request
        path: API path of the request
        kube_context: kubeconfig context name, if one was chosen
    """

    request_id: str | None = None
    method: str | None = None
    path: str | None = None
    kube_context: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Fields that are set, in declaration order."""
        return {k: v for k, v in asdict(self).items() if v}


def get_log_context() -> LogContext:
    """Get current logging context."""
    data = _log_context.get()
    return LogContext(**data) if data else LogContext()


def set_log_context(context: LogContext) -> None:
    """Set logging context for current async context."""
    _log_context.set(context.to_dict())


def clear_log_context() -> None:
    _log_context.set(None)


class SensitiveDataMasker:
    """Masks credentials in log messages and fields."""

    DEFAULT_PATTERNS: ClassVar[list[tuple[str, str]]] = [
        (r"(Bearer\s+)([^\s]+)", rf"\1{REDACTED}"),
        # kubectl credential flags, both --flag=value and --flag value
        (r"(--(?:token|password|client-key|username)[=\s]+)([^\s]+)", rf"\1{REDACTED}"),
        (r"(Authorization[\"']?\s*[:=]\s*[\"']?)([^\"'\s]+)", rf"\1{REDACTED}"),
        (r"(\"(?:token|password|secret)\"\s*:\s*\")([^\"]*)", rf"\1{REDACTED}"),
    ]

    SENSITIVE_KEYS: ClassVar[tuple[str, ...]] = ("token", "secret", "password", "auth")

    def __init__(self, patterns: list[tuple[str, str]] | None = None) -> None:
        """Initialize masker with patterns.

        Args:
            patterns: List of (pattern, replacement) tuples
        """
        self._patterns = [
            (re.compile(p, re.IGNORECASE), r)
            for p, r in (patterns or self.DEFAULT_PATTERNS)
        ]

    def mask(self, text: str) -> str:
        for pattern, replacement in self._patterns:
            text = pattern.sub(replacement, text)
        return text

    def mask_value(self, value: Any) -> Any:
        """Mask strings, recursing into dicts, lists and tuples."""
        if isinstance(value, str):
            return self.mask(value)
        if isinstance(value, dict):
            return self.mask_dict(value)
        if isinstance(value, (list, tuple)):
            return [self.mask_value(v) for v in value]
        return value

    def mask_dict(self, data: dict[str, Any]) -> dict[str, Any]:
        """Redact sensitive keys and mask the remaining values."""
        return {
            key: REDACTED
            if any(s in key.lower() for s in self.SENSITIVE_KEYS)
            else self.mask_value(value)
            for key, value in data.items()
        }


class _MaskingFormatter(logging.Formatter):
    """Base formatter that masks the message and collects structured fields."""

    def __init__(self, masker: SensitiveDataMasker | None = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._masker = masker or SensitiveDataMasker()

    def message(self, record: logging.LogRecord) -> str:
        return self._masker.mask(record.getMessage())

    def fields(self, record: logging.LogRecord) -> dict[str, Any]:
        return self._masker.mask_dict(getattr(record, "extra_fields", {}))


class JsonFormatter(_MaskingFormatter):
    """One JSON object per record."""

    def __init__(
        self,
        masker: SensitiveDataMasker | None = None,
        include_timestamp: bool = True,
    ) -> None:
        super().__init__(masker)
        self._include_timestamp = include_timestamp

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "message": self.message(record),
        }
        if self._include_timestamp:
            log_data["timestamp"] = time.strftime(
                "%Y-%m-%dT%H:%M:%S", time.gmtime(record.created)
            ) + f".{int(record.msecs):03d}Z"
        if context := get_log_context().to_dict():
            log_data["request"] = context
        log_data.update(self.fields(record))
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


class TextFormatter(_MaskingFormatter):
    """``time | LEVEL | logger | message k=v ... | request fields``"""

    def __init__(
        self,
        masker: SensitiveDataMasker | None = None,
        include_context: bool = True,
    ) -> None:
        super().__init__(masker, datefmt="%Y-%m-%d %H:%M:%S")
        self._include_context = include_context

    def format(self, record: logging.LogRecord) -> str:
        parts = [
            self.formatTime(record, self.datefmt),
            f"{record.levelname:<8}",
            record.name,
            " ".join([self.message(record), *(f"{k}={v}" for k, v in self.fields(record).items())]),
        ]
        if self._include_context and (context := get_log_context().to_dict()):
            parts.append(" ".join(f"{k}={v}" for k, v in context.items()))
        result = " | ".join(parts)
        if record.exc_info:
            result = f"{result}\n{self.formatException(record.exc_info)}"
        return result


class KubectlRestLogger:
    """Logger for kubectl-rest-python with structured logging support.

    Example:
        >>> logger = KubectlRestLogger.get_logger("kubectl_rest.client")
        >>> logger.info("Request started", method="GET", path="/api/v1")
    """

    _loggers: ClassVar[dict[str, logging.Logger]] = {}
    _level: ClassVar[LogLevel] = LogLevel.INFO
    _handler: ClassVar[logging.Handler | None] = None

    @classmethod
    def configure(
        cls,
        level: LogLevel = LogLevel.INFO,
        format: str = "text",
        stream: Any = None,
        masker: SensitiveDataMasker | None = None,
    ) -> None:
        """Configure global logging settings.

        Args:
            level: Log level
            format: Output format ('json' or 'text')
            stream: Output stream (default: stderr)
            masker: Sensitive data masker
        """
        cls._level = level
        formatter = JsonFormatter(masker=masker) if format == "json" else TextFormatter(masker=masker)
        cls._handler = logging.StreamHandler(stream or sys.stderr)
        cls._handler.setFormatter(formatter)

        for logger in cls._loggers.values():
            cls._attach(logger)

    @classmethod
    def _attach(cls, logger: logging.Logger) -> None:
        if cls._handler is None:
            cls._handler = logging.StreamHandler(sys.stderr)
            cls._handler.setFormatter(TextFormatter())
        logger.handlers = [cls._handler]
        logger.setLevel(cls._level.to_logging_level())
        logger.propagate = False

    @classmethod
    def get_logger(cls, name: str) -> KubectlRestLogger:
        if name not in cls._loggers:
            logger = logging.getLogger(name)
            cls._attach(logger)
            cls._loggers[name] = logger
        return cls(cls._loggers[name])

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    def _log(self, level: int, msg: str, exc_info: bool = False, **kwargs: Any) -> None:
        extra = {"extra_fields": kwargs} if kwargs else {}
        self._logger.log(level, msg, exc_info=exc_info, extra=extra)

    def debug(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, msg, **kwargs)

    def info(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, **kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, msg, **kwargs)

    def exception(self, msg: str, **kwargs: Any) -> None:
        """Log at ERROR with the current traceback."""
        self._log(logging.ERROR, msg, exc_info=True, **kwargs)

    def echo(self, verbose: bool, msg: str, **kwargs: Any) -> None:
        """Log at INFO when verbose output is on, DEBUG otherwise."""
        self._log(logging.INFO if verbose else logging.DEBUG, msg, **kwargs)


def get_logger(name: str) -> KubectlRestLogger:
    """Get a logger instance."""
    return KubectlRestLogger.get_logger(name)
