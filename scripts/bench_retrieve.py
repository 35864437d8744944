#!/usr/bin/env python3
"""Benchmark retrieval: latency (p50, p95, p99) and QPS against a live database.

Usage:
  export DATABASE_URL=postgresql://... EMBEDDING_API_KEY=...
  uv run python scripts/bench_retrieve.py [--num-queries 50] [--top-k 8]

Retrieval calls the embedding provider once per query, so latencies
include the provider round trip.
"""
from __future__ import annotations

import argparse
import asyncio
import os
import statistics
import sys
import time

from compliance_kb.config import get_settings
from compliance_kb.main import open_compliance_kb

QUERIES = [
    "safeguarding covered defense information",
    "cyber incident reporting within 72 hours",
    "flow down requirements to subcontractors",
    "access control for controlled unclassified information",
    "record retention for contract files",
]


async def run(num_queries: int, top_k: int) -> tuple[list[float], int, int, float]:
    latencies: list[float] = []
    empty = 0
    async with open_compliance_kb(get_settings()) as kb:
        stats = await kb.get_stats.execute()
        print(
            f"Corpus: {stats.documents_count} documents, {stats.chunks_count} chunks, "
            f"coverage {stats.embedding_coverage:.1%}"
        )
        start_total = time.perf_counter()
        for i in range(num_queries):
            t0 = time.perf_counter()
            results = await kb.retrieve.execute(QUERIES[i % len(QUERIES)], top_k=top_k)
            latencies.append(time.perf_counter() - t0)
            if not results:
                empty += 1
        total_elapsed = time.perf_counter() - start_total
    return latencies, empty, stats.chunks_count, total_elapsed


def main() -> int:
    parser = argparse.ArgumentParser(description="Benchmark retrieval")
    parser.add_argument("--num-queries", type=int, default=50, help="Number of retrieve calls")
    parser.add_argument("--top-k", type=int, default=8, help="Results per query")
    parser.add_argument("--output", type=str, default="results/bench_retrieve.txt", help="Output file path")
    args = parser.parse_args()

    latencies, empty, chunks, total_elapsed = asyncio.run(run(args.num_queries, args.top_k))
    n = len(latencies)
    if n == 0:
        print("No queries run.")
        return 1

    qps = n / total_elapsed
    p50 = statistics.median(latencies) * 1000
    p95 = sorted(latencies)[int(n * 0.95) - 1] * 1000 if n >= 20 else p50
    p99 = sorted(latencies)[int(n * 0.99) - 1] * 1000 if n >= 100 else p95

    summary = (
        f"Retrieve benchmark (chunks={chunks}, queries={n}, empty results={empty})\n"
        f"  QPS: {qps:.2f}\n"
        f"  Latency: p50={p50:.1f} ms, p95={p95:.1f} ms, p99={p99:.1f} ms\n"
        f"  Total time: {total_elapsed:.2f} s\n"
    )
    print(summary)

    try:
        os.makedirs(os.path.dirname(args.output) or ".", exist_ok=True)
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(summary)
        print(f"Wrote {args.output}")
    except OSError:
        pass

    return 0


if __name__ == "__main__":
    sys.exit(main())
