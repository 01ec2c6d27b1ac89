#!/usr/bin/env python3
"""
Kubernetes API through kubectl.

This example fetches a resource list as JSON, follows a short watch as
decoded JSON records, and tails a pod log as plain lines.

Usage:
    export KUBECTL_REST_CONTEXT="kind-dev"   # optional
    python examples/watch.py [pod-name]
"""

import asyncio
import sys

from kubectl_rest import auto_detect_client, read_lines


async def main() -> None:
    """Run the example."""
    client = auto_detect_client()

    # Grab a single resource as JSON
    endpoints = await client.perform_request(
        method="GET",
        path="/api/v1/namespaces/default/endpoints",
        query={"limit": "1"},
        expect_json=True,
    )
    print(endpoints)

    # Stream JSON events for a watch
    async for record in await client.perform_request(
        method="GET",
        path="/api/v1/namespaces/default/endpoints",
        query={"watch": "1", "timeoutSeconds": "1"},
        expect_stream=True,
        expect_json=True,
    ):
        if record.ok:
            print(record.value["type"], record.value["object"]["metadata"]["name"])
        else:
            print(f"skipping bad event: {record.error}")

    # Stream plain log lines from a pod
    if len(sys.argv) > 1:
        async with await client.perform_request(
            method="GET",
            path=f"/api/v1/namespaces/default/pods/{sys.argv[1]}/log",
            query={"timestamps": "1", "tailLines": "15"},
            expect_stream=True,
        ) as stream:
            async for line in read_lines(stream):
                print(line)

    print("done")


if __name__ == "__main__":
    asyncio.run(main())
