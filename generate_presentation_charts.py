"""
Presentation Chart Generator
=============================
Generates charts describing a sloop enumeration run.
Run:  python generate_presentation_charts.py --input sloop_puzzles.txt
Output: presentation_charts/ folder with 3 PNG files.
"""

import sys
import os
import time
import argparse
import numpy as np
from typing import Dict, List
from collections import defaultdict

# Ensure project root is on the path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import matplotlib
matplotlib.use("Agg")  # Non-interactive backend for file output
import matplotlib.pyplot as plt

from sloop.grid import CELL_COUNT, GRID_SIZE, clue_count, is_clued
from sloop.puzzle_evaluator import load_puzzles
from sloop.solvers.loop_solver import SloopEdges, SolverMetrics

# ──────────────────────────────────────────────────────────────
# Color Palette & Styling
# ──────────────────────────────────────────────────────────────
BG_COLOR = "#1A1B26"       # Tokyo Night background
CARD_COLOR = "#24283B"     # Card panels
TEXT_COLOR = "#C0CAF5"     # Soft lavender text
GRID_COLOR = "#414868"     # Subtle grid lines
ACCENT_GOLD = "#E0AF68"   # Gold accent
BAR_COLOR = "#339AF0"


def setup_style():
    """Apply a dark, presentation-friendly matplotlib style."""
    plt.rcParams.update({
        "figure.facecolor": BG_COLOR,
        "axes.facecolor": CARD_COLOR,
        "axes.edgecolor": GRID_COLOR,
        "axes.labelcolor": TEXT_COLOR,
        "axes.titleweight": "bold",
        "text.color": TEXT_COLOR,
        "xtick.color": TEXT_COLOR,
        "ytick.color": TEXT_COLOR,
        "grid.color": GRID_COLOR,
        "grid.alpha": 0.3,
        "font.size": 13,
        "axes.titlesize": 16,
        "axes.labelsize": 13,
        "figure.dpi": 120,
        "savefig.dpi": 120,
        "savefig.bbox": "tight",
        "savefig.facecolor": BG_COLOR,
    })


# ──────────────────────────────────────────────────────────────
# Measurements
# ──────────────────────────────────────────────────────────────
def clue_heatmap(grids: List[int]) -> np.ndarray:
    """6x6 array: how many puzzles clue each cell."""
    counts = np.zeros((GRID_SIZE, GRID_SIZE), dtype=int)
    for grid in grids:
        for cell_index in range(CELL_COUNT):
            if is_clued(grid, cell_index):
                row, col = divmod(cell_index, GRID_SIZE)
                counts[row, col] += 1
    return counts


def measure_solve_times(grids: List[int], cap: int = 2) -> Dict[int, List[float]]:
    """Wall-clock solve time per puzzle, grouped by clue count."""
    times = defaultdict(list)
    for grid in grids:
        start = time.perf_counter()
        SloopEdges(grid).solution_count(cap, SolverMetrics())
        times[clue_count(grid)].append(time.perf_counter() - start)
    return dict(times)


# ──────────────────────────────────────────────────────────────
# Chart Generators
# ──────────────────────────────────────────────────────────────
def add_value_labels(ax, bars, fmt="{:.0f}", offset=0.5):
    """Add value labels on top of bars."""
    for bar in bars:
        h = bar.get_height()
        if h > 0:
            ax.text(bar.get_x() + bar.get_width() / 2, h + offset,
                    fmt.format(h), ha="center", va="bottom",
                    fontsize=9, fontweight="bold", color=TEXT_COLOR)


def chart_1_clue_histogram(grids, out_dir):
    """Bar chart: accepted puzzles per clue count."""
    fig, ax = plt.subplots(figsize=(10, 6))
    counts = defaultdict(int)
    for grid in grids:
        counts[clue_count(grid)] += 1
    xs = sorted(counts)
    bars = ax.bar([str(x) for x in xs], [counts[x] for x in xs],
                  color=BAR_COLOR, edgecolor="none", alpha=0.9, zorder=3)
    add_value_labels(ax, bars, offset=max(counts.values(), default=1) * 0.01)

    ax.set_xlabel("Clues")
    ax.set_ylabel("Unique Puzzles")
    ax.set_title("Unique Puzzles by Clue Count", fontsize=18, pad=15)
    ax.grid(axis="y", zorder=0)
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)

    path = os.path.join(out_dir, "1_clue_histogram.png")
    fig.savefig(path)
    plt.close(fig)
    print("  ✓ Chart 1: Clue Histogram")
    return path


def chart_2_clue_heatmap(grids, out_dir):
    """Heat map: clue frequency per cell."""
    heat = clue_heatmap(grids)
    fig, ax = plt.subplots(figsize=(7, 6))
    image = ax.imshow(heat, cmap="magma", zorder=3)
    for row in range(GRID_SIZE):
        for col in range(GRID_SIZE):
            ax.text(col, row, str(heat[row, col]), ha="center", va="center",
                    fontsize=10, color=ACCENT_GOLD)
    fig.colorbar(image, ax=ax)
    ax.set_xticks(range(GRID_SIZE))
    ax.set_yticks(range(GRID_SIZE))
    ax.set_title("Clue Frequency per Cell", fontsize=18, pad=15)

    path = os.path.join(out_dir, "2_clue_heatmap.png")
    fig.savefig(path)
    plt.close(fig)
    print("  ✓ Chart 2: Clue Heat Map")
    return path


def chart_3_solve_time(solve_times, out_dir):
    """Bar chart: average re-solve time per clue count."""
    fig, ax = plt.subplots(figsize=(10, 6))
    xs = sorted(solve_times)
    avg_ms = [np.mean(solve_times[x]) * 1000.0 for x in xs]
    bars = ax.bar([str(x) for x in xs], avg_ms, color=BAR_COLOR,
                  edgecolor="none", alpha=0.9, zorder=3)
    add_value_labels(ax, bars, fmt="{:.1f}", offset=max(avg_ms, default=1.0) * 0.01)

    ax.set_xlabel("Clues")
    ax.set_ylabel("Average Solve Time (ms)")
    ax.set_title("Uniqueness Check Cost", fontsize=18, pad=15)
    ax.grid(axis="y", zorder=0)
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)

    path = os.path.join(out_dir, "3_solve_time.png")
    fig.savefig(path)
    plt.close(fig)
    print("  ✓ Chart 3: Solve Time")
    return path


# ──────────────────────────────────────────────────────────────
# Summary Table
# ──────────────────────────────────────────────────────────────
def print_summary(grids, solve_times):
    """Print a clean summary table to console."""
    print("\n" + "=" * 50)
    print("  ENUMERATION SUMMARY")
    print("=" * 50)
    print(f"  Unique puzzles: {len(grids)}")
    print("-" * 50)
    print(f"  {'Clues':<8} {'Puzzles':>10} {'Avg Time':>14}")
    print("-" * 50)
    for clues in sorted(solve_times):
        samples = solve_times[clues]
        print(f"  {clues:<8} {len(samples):>10} {np.mean(samples) * 1000.0:>12.2f}ms")
    print("=" * 50)


def generate_charts(input_path, out_dir, sample=None):
    grids = load_puzzles(input_path)
    if sample is not None:
        grids = grids[:sample]
    os.makedirs(out_dir, exist_ok=True)

    setup_style()
    solve_times = measure_solve_times(grids)
    paths = [
        chart_1_clue_histogram(grids, out_dir),
        chart_2_clue_heatmap(grids, out_dir),
        chart_3_solve_time(solve_times, out_dir),
    ]
    print_summary(grids, solve_times)
    return paths


# ──────────────────────────────────────────────────────────────
# Main
# ──────────────────────────────────────────────────────────────
def main(argv=None):
    parser = argparse.ArgumentParser(description="Generate Presentation Charts")
    parser.add_argument("--input", type=str, default="sloop_puzzles.txt",
                        help="Puzzle file written by 'sloop enumerate'")
    parser.add_argument("--out-dir", type=str, default=None,
                        help="Output folder (default: presentation_charts/)")
    parser.add_argument("--sample", type=int, default=None,
                        help="Only chart the first N puzzles")
    args = parser.parse_args(argv)

    out_dir = args.out_dir or os.path.join(os.path.dirname(os.path.abspath(__file__)),
                                           "presentation_charts")
    paths = generate_charts(args.input, out_dir, args.sample)
    print(f"All {len(paths)} charts saved to: {out_dir}")


if __name__ == "__main__":
    main()
