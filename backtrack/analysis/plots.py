"""Visualization utilities for benchmark outputs.

Charts are written as PNG files into ``out_dir``; filenames are prefixed by a
two-digit index for stable ordering and carry the settings suffix.

Chart map
---------
- 01_nqueens_iterations_vs_N.png: logical cost (iterations, log scale) vs N,
    one line per strategy, solid with simple steps and dashed without.
- 02_nqueens_time_vs_N.png: mean wall-clock time (log scale) vs N.
- 03_iterations_vs_time.png: every run's iterations against its time with a
    least-squares trend line; near-linearity means per-node cost is flat.
- 04_sudoku_iterations_by_strategy.png: iterations (symlog, zero allowed) per grid and
    strategy (bars), split by simple-step mode.
"""
from __future__ import annotations

import os
from typing import List

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import pandas as pd  # noqa: E402
import seaborn as sns  # noqa: E402

from . import settings  # noqa: E402


def _save(fig, out_dir: str, name: str) -> str:
    path = os.path.join(out_dir, f"{name}{settings.file_suffix()}.png")
    fig.tight_layout()
    fig.savefig(path, dpi=120)
    plt.close(fig)
    return path


def plot_nqueens_scaling(summary: pd.DataFrame, out_dir: str) -> List[str]:
    """Iterations and time vs N for every N-Queens strategy."""
    data = summary[summary["puzzle"] == "nqueens"]
    if data.empty:
        return []

    written = []
    for column, name, label in (
        ("iterations", "01_nqueens_iterations_vs_N", "Iterations (log scale)"),
        ("time_mean", "02_nqueens_time_vs_N", "Mean time [s] (log scale)"),
    ):
        fig, ax = plt.subplots(figsize=(8, 5))
        sns.lineplot(
            data=data,
            x="size",
            y=column,
            hue="strategy",
            style="solve_simple",
            markers=True,
            ax=ax,
        )
        ax.set_yscale("log")
        ax.set_xlabel("N (board size)")
        ax.set_ylabel(label)
        ax.grid(True, alpha=0.3)
        written.append(_save(fig, out_dir, name))
    return written


def plot_iterations_vs_time(raw: pd.DataFrame, out_dir: str) -> List[str]:
    """Scatter of logical vs practical cost with a linear trend line."""
    data = raw[raw["iterations"] > 0]
    if len(data) < 2:
        return []

    fig, ax = plt.subplots(figsize=(8, 5))
    sns.scatterplot(data=data, x="iterations", y="time", hue="puzzle", ax=ax)
    x = data["iterations"].to_numpy(dtype=float)
    y = data["time"].to_numpy(dtype=float)
    if x.max() > x.min():
        trend = np.poly1d(np.polyfit(x, y, 1))
        xs = np.linspace(x.min(), x.max(), 100)
        ax.plot(xs, trend(xs), "k--", linewidth=1, label=f"trend: {trend.coeffs[0]:.2e} s/iteration")
        ax.legend()
    ax.set_xlabel("Iterations")
    ax.set_ylabel("Time [s]")
    ax.grid(True, alpha=0.3)
    return [_save(fig, out_dir, "03_iterations_vs_time")]


def plot_sudoku_strategies(summary: pd.DataFrame, out_dir: str) -> List[str]:
    """Bar chart of iterations per grid and branching strategy."""
    data = summary[summary["puzzle"] == "sudoku"]
    if data.empty:
        return []

    grid = sns.catplot(
        data=data,
        kind="bar",
        x="case",
        y="iterations",
        hue="strategy",
        col="solve_simple",
        height=4,
        aspect=1.2,
    )
    grid.set(yscale="symlog")
    grid.set_axis_labels("Grid", "Iterations (symlog scale)")
    return [_save(grid.figure, out_dir, "04_sudoku_iterations_by_strategy")]


def plot_and_save(raw: pd.DataFrame, summary: pd.DataFrame, out_dir: str) -> List[str]:
    """Generate every chart; returns the written paths."""
    os.makedirs(out_dir, exist_ok=True)
    written: List[str] = []
    written += plot_nqueens_scaling(summary, out_dir)
    written += plot_iterations_vs_time(raw, out_dir)
    written += plot_sudoku_strategies(summary, out_dir)
    for path in written:
        print(f"  Chart saved: {path}")
    return written
