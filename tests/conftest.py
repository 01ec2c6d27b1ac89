"""Root pytest fixtures for kubectl-rest-python tests."""

from __future__ import annotations

import stat
import sys
import textwrap
from typing import TYPE_CHECKING

import pytest

from kubectl_rest.transport import KubectlConfig

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


@pytest.fixture
def fake_kubectl(tmp_path: Path) -> Callable[..., KubectlConfig]:
    """Factory writing an executable stand-in for kubectl.

    The script body is Python; ``sys``, ``json`` and ``time`` are
    imported and ``args`` holds the command line without argv[0].
    """

    def factory(body: str, **config: object) -> KubectlConfig:
        script = tmp_path / "kubectl"
        script.write_text(
            f"#!{sys.executable}\n"
            "import json, sys, time\n"
            "args = sys.argv[1:]\n"
            + textwrap.dedent(body)
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return KubectlConfig(executable=str(script), **config)  # type: ignore[arg-type]

    return factory


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "kubectl: mark test as requiring a real kubectl and cluster (skip if KUBECTL_REST_LIVE not set)",
    )
