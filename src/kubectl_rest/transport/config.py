"""
Configuration for the kubectl transport.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

_TRUTHY = ("1", "true", "yes", "on")

DEFAULT_EXECUTABLE = "kubectl"
DEFAULT_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class KubectlConfig:
    """Configuration for invoking kubectl.

    Read-only once built, so one config can be shared by concurrent
    requests.

    Attributes:
        executable: kubectl binary name or path
        context_name: kubeconfig context passed as --context, if any
        verbose: Log every command line (and JSON body) at INFO
        read_chunk_size: Maximum bytes per stdout read
    """

    executable: str = DEFAULT_EXECUTABLE
    context_name: str | None = None
    verbose: bool = False
    read_chunk_size: int = DEFAULT_CHUNK_SIZE

    def __post_init__(self) -> None:
        if self.read_chunk_size <= 0:
            raise ValueError("read_chunk_size must be positive")

    @classmethod
    def from_env(cls) -> KubectlConfig:
        """Create configuration from environment variables."""
        chunk_str = os.getenv("KUBECTL_REST_CHUNK_SIZE")
        return cls(
            executable=os.getenv("KUBECTL_REST_EXECUTABLE") or DEFAULT_EXECUTABLE,
            context_name=os.getenv("KUBECTL_REST_CONTEXT") or None,
            verbose=os.getenv("KUBECTL_REST_VERBOSE", "").lower() in _TRUTHY,
            read_chunk_size=int(chunk_str) if chunk_str else DEFAULT_CHUNK_SIZE,
        )

    def context_args(self) -> list[str]:
        """Arguments selecting the kubeconfig context."""
        if self.context_name:
            return ["--context", self.context_name]
        return []
