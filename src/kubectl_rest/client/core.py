"""Core KubectlRestClient implementation.

Dispatches abstract REST requests through the local kubectl binary.
"""

from __future__ import annotations

import json
import shutil
import uuid
from typing import Any

from kubectl_rest.client.base import RestClient
from kubectl_rest.client.builder import KubectlRestClientBuilder
from kubectl_rest.errors import DecodeError, UnsupportedOperationError
from kubectl_rest.pipeline import JsonLinesDecoder
from kubectl_rest.telemetry import LogContext, clear_log_context, get_logger, set_log_context
from kubectl_rest.transport import KubectlConfig, KubectlProcess, translate
from kubectl_rest.types.request import RestRequest

logger = get_logger("kubectl_rest.client")


class KubectlRestClient(RestClient):
    """A RestClient for running on a developer's machine.

    The local kubectl does all authentication and networking, so any
    kubeconfig kubectl understands works here too. In exchange, some
    requests cannot be expressed:
    - HEAD and OPTIONS
    - Arbitrary Content-Type/Accept headers (except PATCH content types)
    - Server-side apply, and PATCH with a query string
    - Channel-based APIs (exec, attach, port-forward)
    - Fully-detailed error payloads (kubectl prints them to stderr)

    Example:
        >>> client = KubectlRestClient(KubectlConfig(context_name="kind-dev"))
        >>> pods = await client.perform_request(
        ...     method="GET", path="/api/v1/namespaces/default/pods", expect_json=True,
        ... )
        >>> async for record in await client.perform_request(
        ...     method="GET", path="/api/v1/namespaces/default/pods",
        ...     query={"watch": "1"}, expect_stream=True, expect_json=True,
        ... ):
        ...     print(record.unwrap()["type"])
    """

    # TODO: read the effective namespace from `kubectl config view --output=json`
    namespace: str | None = None

    def __init__(self, config: KubectlConfig | None = None) -> None:
        """Initialize the client.

        Args:
            config: kubectl configuration (defaults to KubectlConfig())
        """
        self._config = config or KubectlConfig()

    @classmethod
    def builder(cls) -> KubectlRestClientBuilder:
        """Get a builder for configuring a client.

        Example:
            >>> client = KubectlRestClient.builder().context("kind-dev").verbose().build()
        """
        return KubectlRestClientBuilder()

    @property
    def config(self) -> KubectlConfig:
        """The client's configuration."""
        return self._config

    @property
    def context_name(self) -> str | None:
        """kubeconfig context used for every request, if any."""
        return self._config.context_name

    async def perform_request(self, request: RestRequest | None = None, /, **options: Any) -> Any:
        """Perform one request through kubectl.

        Raises:
            UnsupportedOperationError: The request needs a capability kubectl lacks
            TranslationError: A PATCH path or content type cannot be translated
            RequestCancelledError: The cancel token fired
            SubprocessError: kubectl failed to start or exited non-zero
            DecodeError: expect_json was set but the output is not JSON
        """
        if request is None:
            request = RestRequest(**options)
        elif options:
            raise TypeError("Pass either a RestRequest or keyword options, not both")

        set_log_context(
            LogContext(
                request_id=uuid.uuid4().hex[:12],
                method=request.method.value,
                path=request.path,
                kube_context=self._config.context_name,
            )
        )
        try:
            return await self._dispatch(request)
        finally:
            clear_log_context()

    async def _dispatch(self, request: RestRequest) -> Any:
        logger.echo(
            self._config.verbose,
            f"{request.method.value} {request.path}" + (" (w/ body)" if request.has_body else ""),
            expect_json=request.expect_json,
            expect_stream=request.expect_stream,
        )

        invocation = translate(request)
        proc = await KubectlProcess.spawn(self._config, invocation, request)

        if request.expect_stream:
            try:
                return proc.open_stream(JsonLinesDecoder() if request.expect_json else None)
            except BaseException:
                await proc.release()
                raise

        output = await proc.read_all()
        if not request.expect_json:
            return output
        return _parse_json(output)


def _parse_json(output: bytes) -> Any:
    text = output.decode("utf-8", errors="replace")
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise DecodeError(
            f"kubectl output is not valid JSON: {e.msg}",
            line_number=e.lineno,
            cause=e,
        ) from e


def auto_detect_client(config: KubectlConfig | None = None) -> KubectlRestClient:
    """Build a client from the environment if kubectl is available.

    Args:
        config: Explicit configuration (defaults to KubectlConfig.from_env())

    Raises:
        UnsupportedOperationError: If the kubectl executable cannot be found
    """
    config = config or KubectlConfig.from_env()
    if shutil.which(config.executable) is None:
        raise UnsupportedOperationError(
            f"Cannot find {config.executable!r} to build a kubectl client",
        ).with_hint("Install kubectl or set KUBECTL_REST_EXECUTABLE")
    logger.debug("Using kubectl client", executable=config.executable, kube_context=config.context_name)
    return KubectlRestClient(config)
