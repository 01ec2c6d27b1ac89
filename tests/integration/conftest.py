"""
Integration test fixtures.

These tests talk to a real cluster through the local kubectl and only
run when KUBECTL_REST_LIVE=1.
"""

from __future__ import annotations

import os
import shutil

import pytest

from kubectl_rest.client import KubectlRestClient
from kubectl_rest.transport import KubectlConfig


@pytest.fixture
def live_client() -> KubectlRestClient:
    """Client for the current kubeconfig context."""
    if os.getenv("KUBECTL_REST_LIVE") != "1":
        pytest.skip("KUBECTL_REST_LIVE not set")
    config = KubectlConfig.from_env()
    if shutil.which(config.executable) is None:
        pytest.skip(f"{config.executable} not on PATH")
    return KubectlRestClient(config)
