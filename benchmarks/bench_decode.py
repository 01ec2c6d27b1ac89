#!/usr/bin/env python3
"""
Stream decoding benchmarks.

Measures throughput of line splitting and JSON Lines decoding over
watch-sized events delivered in awkward chunk sizes.
"""

import asyncio
import json
import time
from typing import Any

from kubectl_rest.pipeline import JsonLinesDecoder, LineDecoder


def generate_watch_payload(count: int) -> bytes:
    """Generate a watch stream of `count` events."""
    lines = []
    for i in range(count):
        event = {
            "type": "MODIFIED",
            "object": {
                "kind": "Pod",
                "metadata": {"name": f"web-{i}", "namespace": "default", "resourceVersion": str(i)},
                "status": {"phase": "Running"},
            },
        }
        lines.append(json.dumps(event))
    return ("\n".join(lines) + "\n").encode()


def chunked(payload: bytes, size: int) -> list[bytes]:
    """Split a payload into fixed-size chunks ignoring line boundaries."""
    return [payload[i : i + size] for i in range(0, len(payload), size)]


async def benchmark_line_decoder(iterations: int = 10000, chunk_size: int = 1000) -> dict[str, Any]:
    """Benchmark LineDecoder throughput."""
    chunks = chunked(generate_watch_payload(iterations), chunk_size)

    async def byte_stream():
        for chunk in chunks:
            yield chunk

    start = time.perf_counter()
    lines = [line async for line in LineDecoder().decode(byte_stream())]
    elapsed = time.perf_counter() - start

    return {
        "name": f"LineDecoder (chunk={chunk_size})",
        "iterations": iterations,
        "lines_decoded": len(lines),
        "elapsed_seconds": elapsed,
        "throughput_lps": len(lines) / elapsed,
        "latency_us": (elapsed / len(lines)) * 1_000_000,
    }


async def benchmark_json_lines_decoder(iterations: int = 10000, chunk_size: int = 1000) -> dict[str, Any]:
    """Benchmark JsonLinesDecoder throughput."""
    chunks = chunked(generate_watch_payload(iterations), chunk_size)

    async def byte_stream():
        for chunk in chunks:
            yield chunk

    start = time.perf_counter()
    records = [r async for r in JsonLinesDecoder().decode(byte_stream())]
    elapsed = time.perf_counter() - start

    return {
        "name": f"JsonLinesDecoder (chunk={chunk_size})",
        "iterations": iterations,
        "records_decoded": len(records),
        "elapsed_seconds": elapsed,
        "throughput_rps": len(records) / elapsed,
        "latency_us": (elapsed / len(records)) * 1_000_000,
    }


async def run_benchmarks() -> None:
    """Run all benchmarks and print results."""
    print("=" * 60)
    print("Decode Benchmarks")
    print("=" * 60)
    print()

    for chunk_size in (7, 1000, 65536):
        for bench in (benchmark_line_decoder, benchmark_json_lines_decoder):
            result = await bench(chunk_size=chunk_size)
            print(f"{result['name']}:")
            for key, value in result.items():
                if key == "name":
                    continue
                if isinstance(value, float):
                    print(f"  {key}: {value:.2f}")
                else:
                    print(f"  {key}: {value}")
            print()


if __name__ == "__main__":
    asyncio.run(run_benchmarks())
