"""
The abstract REST client contract.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from kubectl_rest.types.request import RestRequest


class RestClient(ABC):
    """A transport that can perform Kubernetes API requests.

    Implementations may support only part of the request surface and
    must reject what they cannot express with UnsupportedOperationError,
    never degrade it silently.

    ``perform_request`` returns, depending on the request flags:
    - expect_json: the parsed JSON value
    - neither flag: the raw response bytes
    - expect_stream: a ResponseStream of raw byte chunks
    - expect_stream + expect_json: a ResponseStream of JsonRecord
    """

    namespace: str | None = None
    """Default namespace of the active configuration, if known"""

    @abstractmethod
    async def perform_request(self, request: RestRequest | None = None, /, **options: Any) -> Any:
        """Perform one request.

        Args:
            request: The request; alternatively pass RestRequest fields
                as keyword arguments

        Returns:
            Parsed JSON, bytes, or a ResponseStream
        """
        ...

    async def close(self) -> None:
        """Release client-wide resources."""

    async def __aenter__(self) -> RestClient:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
