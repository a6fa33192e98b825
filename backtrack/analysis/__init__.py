"""
Benchmark and command-line package for the backtracking engine.

This package contains:
- settings: global knobs for benchmark sweeps
- stats: typed run records and aggregation helpers
- experiments: N-Queens and Sudoku benchmark runners
- reporting: CSV exports of raw runs and summaries
- plots: chart generation (matplotlib/seaborn)
- cli: demo solves, benchmark pipeline and argument parser
"""

from . import settings as settings  # re-export for convenience
from .stats import (
    ProgressPrinter,
    RunRecord,
    StatsSummary,
    compute_detailed_statistics,
    records_to_frame,
    summarize_runs,
)

__all__ = [
    # types
    "RunRecord",
    "StatsSummary",
    # utils
    "ProgressPrinter",
    "compute_detailed_statistics",
    "records_to_frame",
    "summarize_runs",
    # settings module
    "settings",
]
