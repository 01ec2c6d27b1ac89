"""
Type definitions for kubectl-rest-python.

Provides:
- RestRequest / HttpMethod: The abstract request interface
- JsonRecord: One decoded line of a JSON Lines response stream
- ResponseStream: Live output that owns its kubectl process
"""

from kubectl_rest.types.records import JsonRecord
from kubectl_rest.types.request import HttpMethod, RestRequest
from kubectl_rest.types.stream import ResponseStream

__all__ = [
    "HttpMethod",
    "JsonRecord",
    "ResponseStream",
    "RestRequest",
]
