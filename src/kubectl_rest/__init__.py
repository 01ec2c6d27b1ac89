"""kubectl-rest-python: Kubernetes API requests through the local kubectl.

Translates transport-neutral REST requests into kubectl invocations and
adapts kubectl's output back into parsed JSON, raw bytes, live byte
streams or streams of decoded JSON records.
"""
from __future__ import annotations

from kubectl_rest.client import (
    CancelHandle,
    CancelReason,
    CancelToken,
    KubectlRestClient,
    KubectlRestClientBuilder,
    RestClient,
    auto_detect_client,
    create_cancel_pair,
)
from kubectl_rest.errors import (
    DecodeError,
    ErrorKind,
    KubectlRestError,
    RequestCancelledError,
    SubprocessError,
    TranslationError,
    UnsupportedOperationError,
)
from kubectl_rest.pipeline import JsonLinesDecoder, LineDecoder, read_lines
from kubectl_rest.transport import KubectlConfig
from kubectl_rest.types import HttpMethod, JsonRecord, ResponseStream, RestRequest

__version__ = "0.1.0"

__all__ = [
    # Client
    "CancelHandle",
    "CancelReason",
    "CancelToken",
    # Errors
    "DecodeError",
    "ErrorKind",
    # Types
    "HttpMethod",
    "JsonLinesDecoder",
    "JsonRecord",
    "KubectlConfig",
    "KubectlRestClient",
    "KubectlRestClientBuilder",
    "KubectlRestError",
    # Pipeline
    "LineDecoder",
    "RequestCancelledError",
    "ResponseStream",
    "RestClient",
    "RestRequest",
    "SubprocessError",
    "TranslationError",
    "UnsupportedOperationError",
    "auto_detect_client",
    "create_cancel_pair",
    "read_lines",
    # Version
    "__version__",
]
