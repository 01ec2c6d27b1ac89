"""
Client layer - User-facing API.

This module provides:
- RestClient: The abstract request contract
- KubectlRestClient: A RestClient backed by the local kubectl
- KubectlRestClientBuilder: Fluent construction
- Cancellation: Cancel tokens for aborting requests
"""

from kubectl_rest.client.base import RestClient
from kubectl_rest.client.builder import KubectlRestClientBuilder
from kubectl_rest.client.cancel import (
    CancelHandle,
    CancelReason,
    CancelState,
    CancelToken,
    create_cancel_pair,
)
from kubectl_rest.client.core import KubectlRestClient, auto_detect_client

__all__ = [
    "CancelHandle",
    "CancelReason",
    "CancelState",
    "CancelToken",
    "KubectlRestClient",
    "KubectlRestClientBuilder",
    "RestClient",
    "auto_detect_client",
    "create_cancel_pair",
]
