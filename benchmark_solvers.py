import sys
import os
import time
import csv
import argparse
from collections import defaultdict
from typing import Dict, Any, Iterable, List

# Add project root to path
sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from sloop.generators.clue_enumerator import ClueEnumerator
from sloop.grid import clue_count, grid_from_clues, grid_string
from sloop.solvers.loop_solver import SloopEdges, SolverMetrics

# Grids whose capped solution count is known
GOLDEN_GRIDS = {
    "unique_4_clues": (grid_from_clues([2, 10, 19, 32]), 1),
    "fully_clued": (grid_from_clues(range(36)), 0),
    "isolated_corner": (grid_from_clues([1, 6]), 0),
}


def run_single_grid(grid: int, cap: int = 2) -> Dict[str, Any]:
    """
    Solves one grid with a fresh metrics record.
    """
    metrics = SolverMetrics()
    start_time = time.perf_counter()
    count = SloopEdges(grid).solution_count(cap, metrics)
    elapsed = time.perf_counter() - start_time

    return {
        "grid": grid_string(grid),
        "clues": clue_count(grid),
        "solutions": count,
        "time": elapsed,
        "states_explored": metrics.states_explored,
        "max_stack_depth": metrics.max_stack_depth,
    }


def run_benchmark(grids: Iterable[int], cap: int = 2) -> List[Dict[str, Any]]:
    return [run_single_grid(grid, cap) for grid in grids]


def enumerated_grids(count: int, max_clues: int) -> List[int]:
    grids = []
    for grid in ClueEnumerator(max_clues=max_clues).candidates():
        grids.append(grid)
        if len(grids) >= count:
            break
    return grids


def write_csv(results: List[Dict[str, Any]], path: str) -> None:
    keys = results[0].keys()
    with open(path, "w", newline="") as f:
        dict_writer = csv.DictWriter(f, fieldnames=keys)
        dict_writer.writeheader()
        dict_writer.writerows(results)


def print_summary(results: List[Dict[str, Any]]) -> None:
    by_clues = defaultdict(list)
    for r in results:
        by_clues[r["clues"]].append(r)

    print("\nSummary Statistics:")
    print(f"{'Clues':<6} | {'Grids':<6} | {'Unique':<6} | {'Avg Time (s)':<12} | {'Avg States':<10}")
    print("-" * 54)
    for clues in sorted(by_clues):
        rows = by_clues[clues]
        unique = sum(1 for r in rows if r["solutions"] == 1)
        avg_time = sum(r["time"] for r in rows) / len(rows)
        avg_states = sum(r["states_explored"] for r in rows) / len(rows)
        print(f"{clues:<6} | {len(rows):>6} | {unique:>6} | {avg_time:>12.4f} | {avg_states:>10.1f}")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Benchmark the sloop loop solver")
    parser.add_argument("--candidates", type=int, default=200, help="Enumerated candidates to solve")
    parser.add_argument("--max-clues", type=int, default=10, help="Clue bound for the enumeration")
    parser.add_argument("--output", type=str, default="benchmark_results.csv", help="Output CSV file")

    args = parser.parse_args(argv)

    print("Golden grids:")
    failures = 0
    for name, (grid, expected) in GOLDEN_GRIDS.items():
        res = run_single_grid(grid)
        ok = res["solutions"] == expected
        failures += 0 if ok else 1
        print(f"  {name:<16} solutions={res['solutions']} expected={expected} "
              f"states={res['states_explored']} {'PASS' if ok else 'FAIL'}")

    print(f"\nSolving {args.candidates} enumerated candidates (max {args.max_clues} clues)...")
    results = run_benchmark(enumerated_grids(args.candidates, args.max_clues))

    if results:
        write_csv(results, args.output)
        print(f"Results saved to {args.output}")
        print_summary(results)

    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
