#!/usr/bin/env python3
"""
Performance Test Script for the Red-Black Tree map

Tests:
1. Sequential insert throughput
2. Random insert throughput
3. Random lookup throughput
4. Full in-order iteration
5. Random delete throughput

Metrics:
- Operations per second (ops/sec)
- Latency (p50, p95, p99)
- Tree height against the 2*log2(n+1) bound

Usage:
    python benchmark.py          # 200k keys
    python benchmark.py quick    # 20k keys, with invariant validation
"""

import logging
import math
import os
import random
import statistics
import time

from rbmap import OrderedMap

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger()


class PerformanceTest:
    def __init__(self, count: int, seed: int = 42):
        self.count = count
        self.rng = random.Random(seed)
        self.map = OrderedMap()

    @staticmethod
    def calculate_stats(latencies: list[int]) -> dict:
        """Calculate latency statistics (latencies in nanoseconds)."""
        if not latencies:
            return {}

        sorted_latencies = sorted(latencies)
        return {
            "mean_us": statistics.mean(latencies) / 1_000,
            "median_us": statistics.median(latencies) / 1_000,
            "p95_us": sorted_latencies[int(len(sorted_latencies) * 0.95)] / 1_000,
            "p99_us": sorted_latencies[int(len(sorted_latencies) * 0.99)] / 1_000,
        }

    def _timed(self, name: str, keys: list[int], operation) -> dict:
        latencies = []
        start_time = time.perf_counter_ns()

        for key in keys:
            op_start = time.perf_counter_ns()
            operation(key)
            latencies.append(time.perf_counter_ns() - op_start)

        elapsed = (time.perf_counter_ns() - start_time) / 1_000_000_000
        results = {
            "test": name,
            "count": len(keys),
            "elapsed_sec": elapsed,
            "ops_per_sec": len(keys) / elapsed if elapsed else float("inf"),
            "height": self.map.tree.height(),
            "size": self.map.size(),
            **self.calculate_stats(latencies),
        }
        self.print_results(results)
        return results

    def test_sequential_insert(self) -> dict:
        self.map = OrderedMap()
        keys = list(range(self.count))
        return self._timed("Sequential Insert", keys, lambda k: self.map.insert(k, k))

    def test_random_insert(self) -> dict:
        self.map = OrderedMap()
        keys = list(range(self.count))
        self.rng.shuffle(keys)
        return self._timed("Random Insert", keys, lambda k: self.map.insert(k, k))

    def test_random_get(self) -> dict:
        keys = [self.rng.randrange(self.count * 2) for _ in range(self.count)]
        return self._timed("Random Get", keys, self.map.get)

    def test_iteration(self) -> dict:
        start_time = time.perf_counter_ns()
        visited = sum(1 for _ in self.map)
        elapsed = (time.perf_counter_ns() - start_time) / 1_000_000_000

        results = {
            "test": "Full Iteration",
            "count": visited,
            "elapsed_sec": elapsed,
            "ops_per_sec": visited / elapsed if elapsed else float("inf"),
            "height": self.map.tree.height(),
            "size": self.map.size(),
        }
        self.print_results(results)
        return results

    def test_random_delete(self) -> dict:
        keys = list(range(0, self.count, 2))
        self.rng.shuffle(keys)
        return self._timed("Random Delete", keys, self.map.remove)

    def print_results(self, results: dict) -> None:
        """Print test results in a formatted way."""
        print(f"\n{'='*60}")
        print(f"{results['test']}")
        print(f"{'='*60}")
        print(f"  Operations: {results['count']}")
        print(f"  Elapsed: {results['elapsed_sec']:.3f}s")
        print(f"  Throughput: {results['ops_per_sec']:.0f} ops/sec")

        if "median_us" in results:
            print(f"  Latency p50: {results['median_us']:.2f} us")
            print(f"  Latency p95: {results['p95_us']:.2f} us")
            print(f"  Latency p99: {results['p99_us']:.2f} us")

        size = results["size"]
        bound = 2 * math.log2(size + 1)
        print(f"  Height: {results['height']} (bound {bound:.1f} for {size} keys)")

    def run(self, validate: bool = False) -> list[dict]:
        print(f"\n{'#'*60}")
        print(f"# Red-Black Tree Performance Test: {self.count} keys")
        print(f"{'#'*60}")

        all_results = [
            self.test_sequential_insert(),
            self.test_random_insert(),
            self.test_random_get(),
            self.test_iteration(),
            self.test_random_delete(),
        ]

        if validate:
            black_height = self.map.tree.validate()
            logger.info(f"Tree valid after benchmark, black height {black_height}")

        print(f"\n{'#'*60}")
        print(f"# Test Complete!")
        print(f"{'#'*60}\n")
        return all_results


if __name__ == "__main__":
    import sys

    if len(sys.argv) > 1 and sys.argv[1] == "quick":
        PerformanceTest(count=20_000).run(validate=True)
    else:
        PerformanceTest(count=200_000).run()
