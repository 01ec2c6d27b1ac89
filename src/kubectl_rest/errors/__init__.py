"""Error hierarchy for kubectl-rest-python.

Every error carries a kind so callers can tell capability gaps apart
from translation mistakes, process failures, bad stream records and
cancellation.
"""

from kubectl_rest.errors.base import (
    DecodeError,
    ErrorContext,
    ErrorKind,
    KubectlRestError,
    RequestCancelledError,
    SubprocessError,
    TranslationError,
    UnsupportedOperationError,
)

__all__ = [
    "DecodeError",
    "ErrorContext",
    "ErrorKind",
    "KubectlRestError",
    "RequestCancelledError",
    "SubprocessError",
    "TranslationError",
    "UnsupportedOperationError",
]
