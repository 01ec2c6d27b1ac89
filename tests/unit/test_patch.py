"""Tests for PATCH translation."""

import pytest

from kubectl_rest.errors import ErrorKind, TranslationError, UnsupportedOperationError
from kubectl_rest.transport import (
    PATCH_FILE,
    ResourcePath,
    build_patch_command,
    decompose_path,
    patch_mode_for,
)


class TestDecomposePath:
    """Tests for API path decomposition."""

    def test_core_group_namespaced(self) -> None:
        """Test a namespaced core-group object path."""
        result = decompose_path("/api/v1/namespaces/default/pods/foo")
        assert result == ResourcePath(
            api_group="",
            api_version="v1",
            namespace="default",
            kind_plural="pods",
            name="foo",
            subresource=None,
        )

    def test_named_group_with_subresource(self) -> None:
        """Test a named-group path with the scale subresource."""
        result = decompose_path("/apis/apps/v1/namespaces/default/deployments/bar/scale")
        assert result.api_group == "apps"
        assert result.api_version == "v1"
        assert result.namespace == "default"
        assert result.kind_plural == "deployments"
        assert result.name == "bar"
        assert result.subresource == "scale"

    def test_status_subresource(self) -> None:
        """Test the status subresource."""
        result = decompose_path("/apis/batch/v1/namespaces/jobs/jobs/nightly/status")
        assert result.subresource == "status"
        assert result.namespace == "jobs"

    def test_cluster_scoped(self) -> None:
        """Test a cluster-scoped object."""
        result = decompose_path("/api/v1/nodes/worker-1")
        assert result.namespace is None
        assert result.kind_plural == "nodes"
        assert result.name == "worker-1"

    def test_namespace_object_itself(self) -> None:
        """Test that a Namespace object is not mistaken for a namespace prefix."""
        result = decompose_path("/api/v1/namespaces/kube-system")
        assert result.namespace is None
        assert result.kind_plural == "namespaces"
        assert result.name == "kube-system"

    def test_resource_specifier(self) -> None:
        """Test the fully-qualified resource string."""
        assert decompose_path("/api/v1/nodes/n1").resource_specifier == "nodes.v1."
        assert (
            decompose_path("/apis/apps/v1/namespaces/a/deployments/b").resource_specifier
            == "deployments.v1.apps"
        )

    @pytest.mark.parametrize("path", ["/api/v1/pods", "/apis/apps/v1", "/api"])
    def test_too_short(self, path: str) -> None:
        """Test that a path without both kind and name fails."""
        with pytest.raises(TranslationError, match="too short"):
            decompose_path(path)

    def test_namespaced_collection_path(self) -> None:
        """Test that a namespaced collection reads as namespaces/<name> plus extra text."""
        with pytest.raises(TranslationError, match="Unexpected trailing path '/pods'"):
            decompose_path("/api/v1/namespaces/default/pods")

    def test_unknown_trailing_segment(self) -> None:
        """Test that an unknown subresource fails."""
        with pytest.raises(TranslationError, match="Unexpected trailing path"):
            decompose_path("/api/v1/namespaces/default/pods/foo/log")

    def test_multiple_trailing_segments(self) -> None:
        """Test that more than one trailing segment fails."""
        with pytest.raises(TranslationError, match="Unexpected trailing path"):
            decompose_path("/api/v1/namespaces/default/pods/foo/status/extra")

    def test_query_string_rejected(self) -> None:
        """Test that a query string fails decomposition."""
        with pytest.raises(TranslationError, match="query string"):
            decompose_path("/api/v1/namespaces/default/pods/foo?dryRun=All")


class TestPatchMode:
    """Tests for Content-Type to patch mode mapping."""

    @pytest.mark.parametrize(
        ("content_type", "mode"),
        [
            ("application/merge-patch+json", "merge"),
            ("application/strategic-merge-patch+json", "strategic"),
            ("application/json-patch+json", "json"),
        ],
    )
    def test_known_modes(self, content_type: str, mode: str) -> None:
        """Test recognized patch content types."""
        assert patch_mode_for(content_type) == mode

    def test_apply_rejected(self) -> None:
        """Test that server-side apply is unsupported."""
        with pytest.raises(UnsupportedOperationError, match="Server-Side Apply") as exc_info:
            patch_mode_for("application/apply-patch+yaml")
        assert exc_info.value.kind == ErrorKind.UNSUPPORTED

    def test_unrecognized(self) -> None:
        """Test an unrelated content type."""
        with pytest.raises(TranslationError, match="Unrecognized Content-Type"):
            patch_mode_for("text/plain")

    def test_missing(self) -> None:
        """Test that a missing content type is unrecognized."""
        with pytest.raises(TranslationError, match="Unrecognized Content-Type"):
            patch_mode_for(None)


class TestBuildPatchCommand:
    """Tests for 'kubectl patch' argument construction."""

    def test_namespaced(self) -> None:
        """Test a namespaced merge patch."""
        args = build_patch_command(
            "/api/v1/namespaces/default/pods/foo", "application/merge-patch+json"
        )
        assert args == [
            "patch", "--type", "merge", "--patch-file", PATCH_FILE,
            "-o", "json", "-n", "default", "--", "pods.v1.", "foo",
        ]

    def test_subresource(self) -> None:
        """Test that the subresource selector comes before the resource args."""
        args = build_patch_command(
            "/apis/apps/v1/namespaces/prod/deployments/web/scale",
            "application/merge-patch+json",
        )
        assert args == [
            "patch", "--type", "merge", "--patch-file", "/dev/stdin",
            "--subresource", "scale",
            "-o", "json", "-n", "prod", "--", "deployments.v1.apps", "web",
        ]

    def test_cluster_scoped_has_no_namespace_flag(self) -> None:
        """Test a cluster-scoped JSON patch."""
        args = build_patch_command("/api/v1/nodes/n1", "application/json-patch+json")
        assert "-n" not in args
        assert args[-3:] == ["--", "nodes.v1.", "n1"]

    def test_flag_like_name_stays_positional(self) -> None:
        """Test that a name starting with '-' follows the '--' separator."""
        args = build_patch_command(
            "/api/v1/namespaces/default/pods/--all", "application/merge-patch+json"
        )
        separator = args.index("--")
        assert args[separator + 2] == "--all"

    def test_query_fails_before_content_type(self) -> None:
        """Test that a query string is rejected first."""
        with pytest.raises(TranslationError, match="query string"):
            build_patch_command("/api/v1/namespaces/default/pods/foo?x=1", "text/plain")

    def test_deterministic(self) -> None:
        """Test that identical input yields identical output."""
        path = "/apis/apps/v1/namespaces/default/deployments/bar/status"
        ctype = "application/strategic-merge-patch+json"
        assert build_patch_command(path, ctype) == build_patch_command(path, ctype)
