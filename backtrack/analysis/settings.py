"""Global settings for the benchmark pipeline.

This module centralizes tunable constants used across the orchestration code.
Values can be overridden at runtime via the configuration loader in
`backtrack.analysis.cli.apply_configuration`.
"""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

# Board sizes for the N-Queens scalability sweep (ascending)
N_VALUES: List[int] = [4, 6, 8, 10, 12, 14]

# Named Sudoku grids from backtrack.puzzles.sudoku to benchmark
SUDOKU_EXAMPLES: List[str] = ["example1", "example2"]

# Branching heuristics per puzzle (see each puzzle module's SELECTORS)
NQUEENS_STRATEGIES: List[str] = ["first", "mcv"]
SUDOKU_STRATEGIES: List[str] = ["empty", "min_empty", "freq_empty"]

# Forced-propagation settings to compare (True = simple steps before branching)
SIMPLE_MODES: List[bool] = [True, False]

# Repetitions per case. The search is deterministic, so only wall-clock time
# varies between runs; more runs give steadier time statistics.
RUNS_PER_CASE: int = 3

# Output directory for CSV and charts
OUT_DIR: str = "results_backtrack"

# When True, artifacts get a datestamp suffix (e.g., _20251113-142530)
DATE_IN_FILENAMES: bool = True

# Unique run identifier used for filename stamping; set once at import time.
RUN_ID: str = datetime.now().strftime("%Y%m%d-%H%M%S")

# Optional run label appended to filenames to avoid overwriting outputs
RUN_TAG: Optional[str] = None


def file_suffix() -> str:
    """Return the filename suffix built from RUN_TAG and RUN_ID (or empty)."""
    parts: List[str] = []
    if RUN_TAG:
        parts.append(str(RUN_TAG))
    if DATE_IN_FILENAMES and RUN_ID:
        parts.append(str(RUN_ID))
    return ("_" + "_".join(parts)) if parts else ""
