"""
Request translation: RestRequest -> kubectl command line.

Non-PATCH requests map onto ``kubectl <verb> --raw <path>``; PATCH is
delegated to :mod:`kubectl_rest.transport.patch`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from kubectl_rest.errors import RequestCancelledError, UnsupportedOperationError
from kubectl_rest.transport.patch import build_patch_command
from kubectl_rest.types.request import HttpMethod

if TYPE_CHECKING:
    from kubectl_rest.types.request import RestRequest

VERBS: dict[HttpMethod, str] = {
    HttpMethod.GET: "get",
    HttpMethod.POST: "create",
    HttpMethod.DELETE: "delete",
    HttpMethod.PUT: "replace",
    HttpMethod.PATCH: "patch",
}


@dataclass(frozen=True)
class KubectlInvocation:
    """A translated request, consumed once to spawn one kubectl process.

    Attributes:
        args: kubectl arguments, without the executable or --context
        has_input_body: Whether the request body goes to stdin
    """

    args: tuple[str, ...]
    has_input_body: bool


def verb_for(method: HttpMethod) -> str:
    """Return the kubectl verb for an HTTP method.

    Raises:
        UnsupportedOperationError: For methods with no kubectl verb
    """
    verb = VERBS.get(HttpMethod(method))
    if not verb:
        raise UnsupportedOperationError(
            f"kubectl client cannot perform HTTP {HttpMethod(method).value}",
            field="method",
        )
    return verb


def path_with_query(request: RestRequest) -> str:
    """Append the request's query string to its path."""
    path = request.path or "/"
    query = request.querystring()
    if query:
        path += ("&" if "?" in path else "?") + query
    return path


def translate(request: RestRequest) -> KubectlInvocation:
    """Translate a request into a kubectl invocation.

    Raises:
        UnsupportedOperationError: Unmappable method, tunnel requested,
            or a header that cannot be conveyed
        RequestCancelledError: The cancel token already fired
        TranslationError: PATCH path or content type cannot be translated
    """
    verb = verb_for(request.method)

    token = request.cancel_token
    if token is not None and token.is_cancelled:
        raise RequestCancelledError(
            "Given cancel token is already cancelled",
            reason=token.reason.value if token.reason else None,
        )

    if request.expect_tunnel:
        raise UnsupportedOperationError(
            "Channel-based APIs are not implemented by the kubectl client",
            field="expect_tunnel",
        )

    path = path_with_query(request)
    has_body = request.has_body

    if verb == "patch":
        args = build_patch_command(path, request.content_type)
    else:
        if request.content_type:
            raise UnsupportedOperationError(
                f"kubectl client cannot send arbitrary Content-Type header {request.content_type!r}",
                field="content_type",
            )
        # --raw binds the path as its value, so the path is never parsed as a flag
        args = [verb, *(["-f", "-"] if has_body else []), "--raw", path]

    if request.accept:
        raise UnsupportedOperationError(
            f"kubectl client cannot send arbitrary Accept header {request.accept!r}",
            field="accept",
        )

    return KubectlInvocation(args=tuple(args), has_input_body=has_body)
