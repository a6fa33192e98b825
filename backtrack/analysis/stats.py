"""Typed result shapes and statistics helpers for the benchmark pipeline.

Defines ``TypedDict`` structures for per-run records and provides utilities
to summarize them, both as plain dictionaries and as pandas tables.
"""
from __future__ import annotations

import statistics
from typing import List, Optional, TypedDict

import pandas as pd


class StatsSummary(TypedDict, total=False):
    count: int
    mean: Optional[float]
    median: Optional[float]
    std: Optional[float]
    min: Optional[float]
    max: Optional[float]
    q25: Optional[float]
    q75: Optional[float]
    range: Optional[float]


class RunRecord(TypedDict):
    puzzle: str
    case: str
    size: int
    strategy: str
    solve_simple: bool
    run: int
    succeeded: bool
    valid: Optional[bool]
    iterations: int
    max_depth: int
    filled: int
    time: float


GROUP_KEYS = ["puzzle", "case", "size", "strategy", "solve_simple"]


class ProgressPrinter:
    """Minimal, stdout-only progress reporter for long-running loops.

    Parameters
    ----------
    total : int
        Total number of steps expected. Values <= 0 are coerced to 1 to avoid
        division by zero when reporting percentages.
    label : str
        Short label printed in front of the progress counters.
    """

    def __init__(self, total: int, label: str):
        self.total = max(1, total)
        self.label = label

    def update(self, index: int, detail: str = "") -> None:
        percent = (index / self.total) * 100
        suffix = f" - {detail}" if detail else ""
        print(f"[{self.label}] {index}/{self.total} ({percent:.0f}%)" + suffix)


def compute_detailed_statistics(values: List[float]) -> StatsSummary:
    """Compute summary statistics for a numeric sequence.

    Returns
    -------
    StatsSummary
        count, mean, median, population std, min, max, 25th/75th percentiles
        and range. On empty input every numeric field is None and ``count``
        is 0, keeping CSV generation consistent.
    """
    if not values:
        return {
            "count": 0,
            "mean": None,
            "median": None,
            "std": None,
            "min": None,
            "max": None,
            "q25": None,
            "q75": None,
            "range": None,
        }

    sorted_vals = sorted(values)
    n = len(values)
    min_val = sorted_vals[0]
    max_val = sorted_vals[-1]

    return {
        "count": n,
        "mean": statistics.mean(values),
        "median": statistics.median(values),
        "std": statistics.pstdev(values) if n > 1 else 0,
        "min": min_val,
        "max": max_val,
        "q25": sorted_vals[n // 4] if n >= 4 else min_val,
        "q75": sorted_vals[3 * n // 4] if n >= 4 else max_val,
        "range": max_val - min_val,
    }


def records_to_frame(records: List[RunRecord]) -> pd.DataFrame:
    """One row per run, columns in ``RunRecord`` order."""
    return pd.DataFrame.from_records(records, columns=list(RunRecord.__annotations__))


def summarize_runs(frame: pd.DataFrame) -> pd.DataFrame:
    """Aggregate repeated runs of each case into one row.

    Iterations and depth are deterministic, so the first run's value is kept;
    time is summarized with ``compute_detailed_statistics``.
    """
    rows = []
    for keys, group in frame.groupby(GROUP_KEYS, sort=False):
        times = compute_detailed_statistics([float(t) for t in group["time"]])
        row = dict(zip(GROUP_KEYS, keys))
        row.update(
            {
                "runs": len(group),
                "success_rate": float(group["succeeded"].mean()),
                "iterations": int(group["iterations"].iloc[0]),
                "max_depth": int(group["max_depth"].iloc[0]),
                "filled": int(group["filled"].iloc[0]),
                "time_mean": times["mean"],
                "time_median": times["median"],
                "time_std": times["std"],
                "time_min": times["min"],
                "time_max": times["max"],
            }
        )
        rows.append(row)
    return pd.DataFrame(rows)
