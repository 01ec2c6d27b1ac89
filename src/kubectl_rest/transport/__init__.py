"""
Transport layer - kubectl subprocess as the wire.

Provides:
- Request translation into kubectl command lines
- PATCH path decomposition into 'kubectl patch' arguments
- Process I/O with concurrent body feeding and live stdout streaming
- KubectlConfig for executable, context and verbosity
"""

from kubectl_rest.transport.command import KubectlInvocation, path_with_query, translate, verb_for
from kubectl_rest.transport.config import KubectlConfig
from kubectl_rest.transport.patch import (
    PATCH_FILE,
    ResourcePath,
    build_patch_command,
    decompose_path,
    patch_mode_for,
)
from kubectl_rest.transport.process import KubectlProcess

__all__ = [
    "PATCH_FILE",
    "KubectlConfig",
    "KubectlInvocation",
    "KubectlProcess",
    "ResourcePath",
    "build_patch_command",
    "decompose_path",
    "patch_mode_for",
    "path_with_query",
    "translate",
    "verb_for",
]
