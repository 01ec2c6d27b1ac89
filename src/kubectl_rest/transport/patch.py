"""
PATCH translation.

``kubectl`` has no ``--raw`` mode for PATCH, so a PATCH request is turned
into a structured ``kubectl patch`` invocation instead. That requires
taking the API path apart into group, version, namespace, resource,
name and subresource.

All functions here are pure: the same input always yields the same
arguments or the same error.
"""

from __future__ import annotations

from dataclasses import dataclass

from kubectl_rest.errors import TranslationError, UnsupportedOperationError

PATCH_MODES = frozenset({"json", "merge", "strategic"})
SUBRESOURCES = frozenset({"status", "scale"})

# kubectl reads the patch from its own stdin
PATCH_FILE = "/dev/stdin"


@dataclass(frozen=True)
class ResourcePath:
    """Structural parts of a single-object API path.

    Attributes:
        api_group: API group, empty for the core group
        api_version: API version (e.g. 'v1')
        namespace: Namespace, None for cluster-scoped resources
        kind_plural: Plural resource name (e.g. 'deployments')
        name: Object name
        subresource: 'status' or 'scale', if addressed
    """

    api_group: str
    api_version: str
    namespace: str | None
    kind_plural: str
    name: str
    subresource: str | None = None

    @property
    def resource_specifier(self) -> str:
        """Fully-qualified resource, e.g. 'deployments.v1.apps' or 'pods.v1.'."""
        return f"{self.kind_plural}.{self.api_version}.{self.api_group}"


def patch_mode_for(content_type: str | None) -> str:
    """Map a PATCH Content-Type onto a ``kubectl patch --type`` value.

    The mode is the media subtype up to its first '-':
    'application/merge-patch+json' -> 'merge',
    'application/strategic-merge-patch+json' -> 'strategic',
    'application/json-patch+json' -> 'json'.

    Raises:
        UnsupportedOperationError: For server-side apply
        TranslationError: For any other unrecognized content type
    """
    mode = "none"
    if content_type and "/" in content_type:
        mode = content_type.split("/")[1].split("-")[0]

    if mode == "apply":
        raise UnsupportedOperationError(
            "Server-Side Apply is not implemented by the kubectl client",
            field="content_type",
        )
    if mode not in PATCH_MODES:
        raise TranslationError(
            f"Unrecognized Content-Type {content_type!r} for PATCH, "
            "unable to translate to 'kubectl patch'",
            path=None,
            content_type=content_type,
        )
    return mode


def decompose_path(path: str) -> ResourcePath:
    """Parse an object API path into its parts.

    Examples:
        >>> decompose_path("/api/v1/namespaces/default/pods/foo")
        ResourcePath(api_group='', api_version='v1', namespace='default', kind_plural='pods', name='foo', subresource=None)
        >>> decompose_path("/apis/apps/v1/namespaces/default/deployments/bar/scale").subresource
        'scale'

    Raises:
        TranslationError: When the path is too short, carries a query
            string, or has unrecognized trailing segments
    """
    if "?" in path:
        raise TranslationError(
            "PATCH with a query string is not supported by the kubectl client",
            path=path,
        )

    parts = path[1:].split("/") if path.startswith("/") else path.split("/")

    # /api/<version>/... is the core group, /apis/<group>/<version>/... everything else
    prefix = parts.pop(0) if parts else ""
    api_group = "" if prefix == "api" else (parts.pop(0) if parts else "")
    api_version = parts.pop(0) if parts else ""

    namespace = None
    if parts and parts[0] == "namespaces" and len(parts) > 3:
        parts.pop(0)
        namespace = parts.pop(0)

    kind_plural = parts.pop(0) if parts else ""
    name = parts.pop(0) if parts else ""
    if not kind_plural or not name:
        raise TranslationError(f"API path is too short for PATCH: {path!r}", path=path)

    subresource = None
    if parts:
        leftover = "/".join(parts)
        if leftover not in SUBRESOURCES:
            raise TranslationError(
                f"Unexpected trailing path {'/' + leftover!r} in PATCH path",
                path=path,
            )
        subresource = leftover

    return ResourcePath(
        api_group=api_group,
        api_version=api_version,
        namespace=namespace,
        kind_plural=kind_plural,
        name=name,
        subresource=subresource,
    )


def build_patch_command(path: str, content_type: str | None) -> list[str]:
    """Build ``kubectl patch`` arguments equivalent to an HTTP PATCH.

    The patch body is always read from stdin and the updated object is
    always printed as JSON. Positional arguments come after ``--`` so no
    path-derived value can be taken for a flag.

    Raises:
        UnsupportedOperationError: For server-side apply
        TranslationError: For bad paths or content types
    """
    if "?" in path:
        raise TranslationError(
            "PATCH with a query string is not supported by the kubectl client",
            path=path,
        )
    mode = patch_mode_for(content_type)
    resource = decompose_path(path)

    resource_args = ["-o", "json"]
    if resource.namespace:
        resource_args += ["-n", resource.namespace]
    resource_args += ["--", resource.resource_specifier, resource.name]
    if resource.subresource:
        resource_args = ["--subresource", resource.subresource, *resource_args]

    return ["patch", "--type", mode, "--patch-file", PATCH_FILE, *resource_args]
