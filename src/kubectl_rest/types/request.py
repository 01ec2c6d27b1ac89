"""
Request types for the abstract REST interface.

A RestRequest describes one call against the Kubernetes API in
transport-neutral terms: method, path, query, an optional body and what
shape the caller expects back.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any
from urllib.parse import parse_qsl, urlencode

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_BODY_FIELDS = ("body_raw", "body_json", "body_stream")


class HttpMethod(str, Enum):
    """HTTP methods accepted by the request interface."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    OPTIONS = "OPTIONS"
    HEAD = "HEAD"


class RestRequest(BaseModel):
    """A single request against the abstract REST interface.

    At most one of ``body_raw``, ``body_json`` and ``body_stream`` may be
    given. ``body_json=None`` passed explicitly is a JSON ``null`` body,
    not an absent one.

    Example:
        >>> req = RestRequest(
        ...     method="GET",
        ...     path="/api/v1/namespaces/default/pods",
        ...     query={"watch": "1"},
        ...     expect_stream=True,
        ...     expect_json=True,
        ... )
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    method: HttpMethod = Field(description="HTTP method")
    path: str = Field(default="/", description="API path, e.g. /api/v1/pods")
    query: list[tuple[str, str]] = Field(
        default_factory=list,
        description="Ordered query parameters",
    )
    body_raw: bytes | None = Field(default=None, description="Raw request body")
    body_json: Any = Field(default=None, description="Structured body sent as JSON")
    body_stream: Any = Field(
        default=None,
        description="Async iterable of bytes piped to kubectl's stdin",
    )
    content_type: str | None = Field(default=None, description="Content-Type of the body")
    accept: str | None = Field(default=None, description="Requested Accept header")
    expect_json: bool = Field(default=False, description="Decode the response as JSON")
    expect_stream: bool = Field(default=False, description="Return a live stream")
    expect_tunnel: bool = Field(default=False, description="Open a channel-based tunnel")
    cancel_token: Any = Field(default=None, description="CancelToken for aborting")

    @field_validator("method", mode="before")
    @classmethod
    def _upper_method(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.upper()
        return value

    @field_validator("path", mode="before")
    @classmethod
    def _default_path(cls, value: Any) -> Any:
        return value or "/"

    @field_validator("query", mode="before")
    @classmethod
    def _normalize_query(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return parse_qsl(value.lstrip("?"), keep_blank_values=True)
        if isinstance(value, Mapping):
            return [(str(k), str(v)) for k, v in value.items()]
        return [(str(k), str(v)) for k, v in value]

    @model_validator(mode="after")
    def _check_body(self) -> RestRequest:
        given = [name for name in _BODY_FIELDS if name in self.model_fields_set]
        if "body_raw" in given and self.body_raw is None:
            given.remove("body_raw")
        if "body_stream" in given and self.body_stream is None:
            given.remove("body_stream")
        if len(given) > 1:
            raise ValueError(f"At most one request body may be given, got {', '.join(given)}")
        if self.body_stream is not None and not hasattr(self.body_stream, "__aiter__"):
            raise ValueError("body_stream must be an async iterable of bytes")
        if self.cancel_token is not None:
            from kubectl_rest.client.cancel import CancelToken

            if not isinstance(self.cancel_token, CancelToken):
                raise ValueError("cancel_token must be a CancelToken")
        return self

    @property
    def has_body(self) -> bool:
        """Whether any request body was supplied."""
        return (
            self.body_raw is not None
            or self.body_stream is not None
            or "body_json" in self.model_fields_set
        )

    def querystring(self) -> str:
        """Render the query in form encoding, without a leading '?'."""
        return urlencode(self.query)
