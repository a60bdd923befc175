#!/usr/bin/env python3
"""Benchmark discrete 3D Wave Function Collapse solver performance."""

from __future__ import annotations

import argparse
import json
import time
from pathlib import Path

from wfc3d import config
from wfc3d.exemplar import Exemplar
from wfc3d.solver import solve_with_retries
from wfc3d.util import rng

GRID_SIZES: tuple[tuple[int, int, int], ...] = (
    (8, 4, 8),
    (12, 6, 12),
    (16, 8, 16),
    (24, 8, 24),
)


def create_benchmark_exemplar(
    size_x: int = 3, size_y: int = 3, size_z: int = 2
) -> Exemplar[str]:
    """A small block exemplar with one named cell per position."""
    return Exemplar.from_nested(
        [
            [[f"cell_{x}_{y}_{z}" for z in range(size_z)] for y in range(size_y)]
            for x in range(size_x)
        ]
    )


class WFCBenchmark:
    """Benchmark runner for the 3D WFC solver."""

    def __init__(self, iterations: int) -> None:
        self.iterations = iterations
        self.exemplar = create_benchmark_exemplar()
        self.results: dict[str, dict[str, float]] = {}

    def _run_case(self, size: tuple[int, int, int]) -> float:
        """Run one benchmark case and return average solve time in milliseconds."""
        elapsed_total = 0.0
        sx, sy, sz = size
        stream = rng.get(f"benchmark.{sx}x{sy}x{sz}")

        for _ in range(self.iterations):
            start = time.perf_counter()
            solve_with_retries(self.exemplar, size, stream, include_self=True)
            elapsed_total += time.perf_counter() - start

        return (elapsed_total / self.iterations) * 1000.0

    def run(self) -> None:
        """Run all configured grid-size benchmarks."""
        print("WFC 3D Benchmark")
        print("=" * 42)
        print(f"Exemplar: {self.exemplar.shape}, {self.exemplar.size} patterns")
        print(f"Iterations per size: {self.iterations}")
        print()
        print(f"{'Size':>12} {'Solve (ms)':>14}")
        print("-" * 42)

        for size in GRID_SIZES:
            solve_ms = self._run_case(size)

            size_key = "x".join(str(n) for n in size)
            self.results[size_key] = {"solve_ms": solve_ms}

            print(f"{size_key:>12} {solve_ms:14.2f}")

    def save_results(self, filename: str) -> None:
        """Save benchmark output to a JSON file."""
        with Path(filename).open("w") as f:
            json.dump(self.results, f, indent=2)
        print(f"\nSaved benchmark results to {filename}")

    def compare_with_baseline(self, baseline_file: str) -> None:
        """Compare current run with a saved baseline JSON file."""
        try:
            with Path(baseline_file).open() as f:
                baseline: dict[str, dict[str, float]] = json.load(f)
        except FileNotFoundError:
            print(f"\nBaseline file not found: {baseline_file}")
            return

        print(f"\nComparison vs baseline: {baseline_file}")
        print("=" * 64)

        for size_key, current in self.results.items():
            if size_key not in baseline:
                continue

            old_ms = baseline[size_key].get("solve_ms", 0.0)
            new_ms = current["solve_ms"]
            if old_ms <= 0:
                continue

            delta_pct = ((new_ms - old_ms) / old_ms) * 100.0
            speed_ratio = old_ms / new_ms if new_ms > 0 else 0.0
            trend = "faster" if speed_ratio > 1.0 else "slower"

            print(
                f"{size_key:>12}: {new_ms:8.2f}ms "
                f"vs {old_ms:8.2f}ms | {speed_ratio:5.2f}x {trend} "
                f"({delta_pct:+6.1f}%)"
            )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Benchmark 3D WFC")
    parser.add_argument(
        "--iterations",
        type=int,
        default=3,
        help="Number of runs per grid size (default: 3)",
    )
    parser.add_argument("--save", type=str, help="Save current results to JSON")
    parser.add_argument(
        "--compare",
        type=str,
        help="Compare current results against baseline JSON",
    )
    args = parser.parse_args(argv)

    rng.init(config.RANDOM_SEED)

    benchmark = WFCBenchmark(iterations=args.iterations)
    benchmark.run()

    if args.save:
        benchmark.save_results(args.save)

    if args.compare:
        benchmark.compare_with_baseline(args.compare)


if __name__ == "__main__":
    main()
