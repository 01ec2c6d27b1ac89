"""
Telemetry module for kubectl-rest-python.

Provides structured logging with request-scoped context and
credential masking.
"""

from kubectl_rest.telemetry.logger import (
    JsonFormatter,
    KubectlRestLogger,
    LogContext,
    LogLevel,
    SensitiveDataMasker,
    TextFormatter,
    clear_log_context,
    get_log_context,
    get_logger,
    set_log_context,
)

__all__ = [
    "JsonFormatter",
    "KubectlRestLogger",
    "LogContext",
    "LogLevel",
    "SensitiveDataMasker",
    "TextFormatter",
    "clear_log_context",
    "get_log_context",
    "get_logger",
    "set_log_context",
]
