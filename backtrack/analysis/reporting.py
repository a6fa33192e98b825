"""CSV export utilities for benchmark outputs (aggregates and raw runs).

Filenames carry the optional run tag/date suffix from ``settings`` so
repeated runs do not overwrite each other.
"""
from __future__ import annotations

import os

import pandas as pd

from . import settings


def save_raw_runs_to_csv(frame: pd.DataFrame, out_dir: str) -> str:
    """Write one row per solver run. Returns the file path."""
    os.makedirs(out_dir, exist_ok=True)
    filename = os.path.join(out_dir, f"raw_runs{settings.file_suffix()}.csv")
    frame.to_csv(filename, index=False)
    return filename


def save_summary_to_csv(summary: pd.DataFrame, out_dir: str) -> str:
    """Write per-case aggregates for every puzzle kind into one file.

    Column names follow lowercase snake_case; time columns are in seconds.
    """
    os.makedirs(out_dir, exist_ok=True)
    filename = os.path.join(out_dir, f"results_summary{settings.file_suffix()}.csv")
    ordered = summary.sort_values(["puzzle", "size", "strategy", "solve_simple"], kind="stable")
    ordered.to_csv(filename, index=False, float_format="%.6f")
    return filename
