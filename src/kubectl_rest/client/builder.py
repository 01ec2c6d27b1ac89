"""
Builder for fluent client construction.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from kubectl_rest.transport.config import KubectlConfig

if TYPE_CHECKING:
    from kubectl_rest.client.core import KubectlRestClient


class KubectlRestClientBuilder:
    """Builder for creating KubectlRestClient instances.

    Example:
        >>> client = (
        ...     KubectlRestClientBuilder()
        ...     .from_env()
        ...     .context("kind-dev")
        ...     .verbose()
        ...     .build()
        ... )
    """

    def __init__(self) -> None:
        """Initialize the builder."""
        self._config = KubectlConfig()

    def from_env(self) -> KubectlRestClientBuilder:
        """Start from the environment configuration.

        Settings applied before this call are discarded.
        """
        self._config = KubectlConfig.from_env()
        return self

    def executable(self, path: str) -> KubectlRestClientBuilder:
        """Set the kubectl executable name or path."""
        self._config = replace(self._config, executable=path)
        return self

    def context(self, name: str | None) -> KubectlRestClientBuilder:
        """Set the kubeconfig context passed as --context."""
        self._config = replace(self._config, context_name=name)
        return self

    def verbose(self, enable: bool = True) -> KubectlRestClientBuilder:
        """Log every kubectl command line at INFO."""
        self._config = replace(self._config, verbose=enable)
        return self

    def chunk_size(self, size: int) -> KubectlRestClientBuilder:
        """Set the maximum bytes per stdout read.

        Raises:
            ValueError: If size is not positive
        """
        self._config = replace(self._config, read_chunk_size=size)
        return self

    def build(self) -> KubectlRestClient:
        """Build the client."""
        from kubectl_rest.client.core import KubectlRestClient

        return KubectlRestClient(self._config)
