"""Benchmark runners comparing branching heuristics and simple-step solving.

Every case builds a fresh puzzle, solves it with ``BacktrackSolver`` and
records the outcome together with the logical cost (iterations, depth) and
wall-clock time. Validation optionally re-checks each solution with the
puzzle's own rules.

Outputs are lists of ``RunRecord`` dictionaries suitable for
``stats.records_to_frame`` and the CSV/plot helpers.
"""
from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence, Tuple

from backtrack.backtracking import BacktrackSolver
from backtrack.diff import diff
from backtrack.puzzles import nqueens, sudoku
from backtrack.puzzles.nqueens import NQueens, is_valid_solution
from backtrack.puzzles.sudoku import Sudoku
from backtrack.settings import SolveSettings

from .stats import ProgressPrinter, RunRecord

SUDOKU_GRIDS: Dict[str, Tuple[Tuple[int, ...], ...]] = {
    "example1": sudoku.EXAMPLE1,
    "example2": sudoku.EXAMPLE2,
}


def _check_strategies(requested: Sequence[str], available: Dict[str, Callable]) -> None:
    unknown = set(requested).difference(available)
    if unknown:
        raise ValueError(
            "Unknown strategy(s): " + ", ".join(sorted(unknown)) + ". Available: " + ", ".join(available)
        )


def _run_case(
    puzzle,
    *,
    name: str,
    case: str,
    size: int,
    strategy: str,
    solve_simple: bool,
    run: int,
    validator: Optional[Callable[[object], bool]],
) -> RunRecord:
    settings = SolveSettings(solve_simple_steps=solve_simple)
    solver = BacktrackSolver(puzzle, settings)
    report = solver.run()
    valid = validator(puzzle) if (validator is not None and report.succeeded) else None
    return {
        "puzzle": name,
        "case": case,
        "size": size,
        "strategy": strategy,
        "solve_simple": solve_simple,
        "run": run,
        "succeeded": report.succeeded,
        "valid": valid,
        "iterations": report.iterations,
        "max_depth": report.max_depth,
        "filled": len(diff(solver.snapshot, puzzle)) if solver.snapshot is not None else 0,
        "time": report.elapsed,
    }


def run_nqueens_benchmark(
    N_values: List[int],
    strategies: List[str],
    simple_modes: List[bool],
    runs: int = 1,
    validate: bool = False,
    progress_label: Optional[str] = None,
) -> List[RunRecord]:
    """Solve N-Queens for every (N, strategy, simple-mode) combination."""
    _check_strategies(strategies, nqueens.SELECTORS)
    validator = (lambda p: is_valid_solution(p.board())) if validate else None
    progress = ProgressPrinter(len(N_values), progress_label) if progress_label else None

    records: List[RunRecord] = []
    for index, N in enumerate(N_values, start=1):
        if progress:
            progress.update(index, f"N={N}")
        for strategy in strategies:
            for solve_simple in simple_modes:
                for run in range(runs):
                    records.append(
                        _run_case(
                            NQueens(N, strategy),
                            name="nqueens",
                            case=f"N={N}",
                            size=N,
                            strategy=strategy,
                            solve_simple=solve_simple,
                            run=run,
                            validator=validator,
                        )
                    )
    return records


def run_sudoku_benchmark(
    examples: List[str],
    strategies: List[str],
    simple_modes: List[bool],
    runs: int = 1,
    validate: bool = False,
    progress_label: Optional[str] = None,
) -> List[RunRecord]:
    """Solve each named Sudoku grid under every strategy and simple-mode."""
    _check_strategies(strategies, sudoku.SELECTORS)
    unknown = set(examples).difference(SUDOKU_GRIDS)
    if unknown:
        raise ValueError("Unknown Sudoku example(s): " + ", ".join(sorted(unknown)))
    validator = (lambda p: p.is_solved()) if validate else None
    progress = ProgressPrinter(len(examples), progress_label) if progress_label else None

    records: List[RunRecord] = []
    for index, example in enumerate(examples, start=1):
        if progress:
            progress.update(index, example)
        grid = SUDOKU_GRIDS[example]
        empty = sum(1 for row in grid for v in row if v == 0)
        for strategy in strategies:
            for solve_simple in simple_modes:
                for run in range(runs):
                    records.append(
                        _run_case(
                            Sudoku(grid, strategy),
                            name="sudoku",
                            case=example,
                            size=empty,
                            strategy=strategy,
                            solve_simple=solve_simple,
                            run=run,
                            validator=validator,
                        )
                    )
    return records


def validate_records(records: List[RunRecord]) -> None:
    """Consistency checks across a benchmark run.

    Raises
    ------
    AssertionError
        If a successful run fails validation, or if repeated runs of the same
        case disagree on iterations (the search must be deterministic).
    """
    seen: Dict[Tuple, int] = {}
    for record in records:
        if record["succeeded"] and record["valid"] is False:
            raise AssertionError(f"Invalid solution for {record['puzzle']} {record['case']} ({record['strategy']})")
        key = (record["puzzle"], record["case"], record["strategy"], record["solve_simple"])
        if key in seen and seen[key] != record["iterations"]:
            raise AssertionError(f"Non-deterministic iteration count for {key}: {seen[key]} vs {record['iterations']}")
        seen[key] = record["iterations"]
