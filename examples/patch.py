#!/usr/bin/env python3
"""
Partial updates through 'kubectl patch'.

Scales a deployment via its scale subresource with a merge patch.

Usage:
    python examples/patch.py <deployment> <replicas>
"""

import asyncio
import sys

from kubectl_rest import KubectlRestClient, KubectlRestError


async def main(name: str, replicas: int) -> None:
    """Run the example."""
    client = KubectlRestClient.builder().from_env().verbose().build()

    try:
        scale = await client.perform_request(
            method="PATCH",
            path=f"/apis/apps/v1/namespaces/default/deployments/{name}/scale",
            content_type="application/merge-patch+json",
            body_json={"spec": {"replicas": replicas}},
            expect_json=True,
        )
    except KubectlRestError as e:
        print(f"[{e.kind.value if e.kind else 'error'}] {e}")
        return

    print(f"{name}: {scale['spec']['replicas']} replicas requested")


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1], int(sys.argv[2])))
