"""Command-line interface: demo solves and the benchmark pipeline.

This module wires together configuration loading, a single demo solve of one
of the reference puzzles (optionally racing several branching heuristics),
and the benchmark suite that writes CSV summaries and charts. It isolates
I/O, argument parsing and progress reporting from the engine so the rest of
the codebase stays easy to test programmatically.
"""
from __future__ import annotations

import argparse
import logging
import os
import tempfile
from pathlib import Path
from time import perf_counter
from typing import Any, List, Optional, Tuple

from . import settings
from .experiments import run_nqueens_benchmark, run_sudoku_benchmark, validate_records
from .reporting import save_raw_runs_to_csv, save_summary_to_csv
from .stats import records_to_frame, summarize_runs
from config_manager import ConfigManager
from backtrack.backtracking import BacktrackSolver
from backtrack.diff import render_diff
from backtrack.multi import MultiBacktrackSolver
from backtrack.puzzles import knapsack, nqueens, sudoku
from backtrack.puzzles.knapsack import Item, Knapsack
from backtrack.puzzles.nqueens import NQueens, is_valid_solution
from backtrack.puzzles.sudoku import Sudoku
from backtrack.settings import SolveSettings

DEFAULT_CONFIG = "config.json"

DEMO_ITEMS = [
    Item("map", 9, 150),
    Item("compass", 13, 35),
    Item("water", 153, 200),
    Item("sandwich", 50, 160),
    Item("glucose", 15, 60),
    Item("tin", 68, 45),
    Item("banana", 27, 60),
    Item("apple", 39, 40),
]
DEMO_CAPACITY = 200
DEMO_TARGET = 500


# ------------- Utils --------------------------------------------------------

def parse_list_filters(values: Optional[List[str]]) -> Optional[List[str]]:
    """Flatten repeated and comma-separated flag values; None when unset."""
    if not values:
        return None
    items: List[str] = []
    for value in values:
        items.extend(part.strip() for part in value.split(",") if part.strip())
    return items or None


def apply_configuration(config_path: Optional[str]) -> Tuple[Optional[ConfigManager], SolveSettings]:
    """Load configuration and update the global ``settings`` module in-place.

    When ``config_path`` is None, ``config.json`` in the working directory is
    used if present; otherwise built-in defaults apply. An explicit path that
    does not exist raises ``FileNotFoundError``.
    """
    if config_path is None:
        if not os.path.exists(DEFAULT_CONFIG):
            return None, SolveSettings()
        config_path = DEFAULT_CONFIG

    config_mgr = ConfigManager(config_path)

    bench = config_mgr.get_benchmark_settings()
    if bench:
        settings.N_VALUES = [int(n) for n in bench.get("N_values", settings.N_VALUES)]
        settings.SUDOKU_EXAMPLES = list(bench.get("sudoku_examples", settings.SUDOKU_EXAMPLES))
        settings.RUNS_PER_CASE = int(bench.get("runs_per_case", settings.RUNS_PER_CASE))
        settings.SIMPLE_MODES = [bool(v) for v in bench.get("simple_modes", settings.SIMPLE_MODES)]
        settings.OUT_DIR = bench.get("output_dir", settings.OUT_DIR)

    settings.NQUEENS_STRATEGIES = list(config_mgr.get_strategies("nqueens") or settings.NQUEENS_STRATEGIES)
    settings.SUDOKU_STRATEGIES = list(config_mgr.get_strategies("sudoku") or settings.SUDOKU_STRATEGIES)

    return config_mgr, SolveSettings.from_mapping(config_mgr.get_solve_settings())


def override_settings(base: SolveSettings, args: argparse.Namespace) -> SolveSettings:
    """Apply command-line switches on top of configured settings."""
    result = base
    if args.debug:
        result = result.with_debug(True)
    if args.sleep_ms is not None:
        result = result.with_sleep_ms(args.sleep_ms)
    if args.simple is not None:
        result = result.with_solve_simple_steps(args.simple)
    if args.difference:
        result = result.with_difference(True)
    return result


def build_puzzle(name: str, strategy: Optional[str] = None, size: int = 8) -> Any:
    """Construct a reference puzzle by name with an optional strategy."""
    if name == "sudoku":
        return Sudoku(sudoku.EXAMPLE2, strategy or "min_empty")
    if name == "nqueens":
        return NQueens(size, strategy or "first")
    if name == "knapsack":
        if strategy:
            raise ValueError("The knapsack puzzle has a single strategy (leftmost item).")
        return Knapsack(DEMO_ITEMS, DEMO_CAPACITY, DEMO_TARGET)
    raise ValueError(f"Unknown puzzle: {name}. Available: sudoku, nqueens, knapsack")


def _selectors_for(name: str):
    if name == "sudoku":
        return sudoku.SELECTORS
    if name == "nqueens":
        return nqueens.SELECTORS
    return {"leftmost": knapsack.Knapsack.next_unresolved_position}


# ------------- Pipeline: demo ----------------------------------------------

def run_demo(name: str, solve_settings: SolveSettings, strategy: Optional[str] = None, size: int = 8, race: bool = False) -> int:
    """Solve one reference puzzle, printing the board before and after.

    Returns the process exit code: 0 when solved, 2 when no solution exists.
    """
    puzzle = build_puzzle(name, strategy, size)
    print(puzzle.render())
    print()

    if race:
        selectors = _selectors_for(name)
        report = MultiBacktrackSolver(puzzle, list(selectors.items()), solve_settings).run()
        print(f"Race finished: {report.outcome.value} (winner: {report.strategy}) in {report.elapsed:.4f}s")
        for label, iterations in report.iterations.items():
            print(f"  {label}: {iterations} iterations")
        succeeded = report.succeeded
    else:
        solver = BacktrackSolver(puzzle, solve_settings)
        result = solver.run()
        print(f"Outcome: {result.outcome.value} after {result.iterations} iterations "
              f"(max depth {result.max_depth}, {result.elapsed:.4f}s)")
        succeeded = result.succeeded
        if succeeded and solve_settings.difference and not solve_settings.debug:
            print("Difference:")
            print(render_diff(solver.difference()))

    if succeeded:
        print(puzzle.render())
    return 0 if succeeded else 2


# ------------- Pipeline: benchmark -------------------------------------------

def main_benchmark(puzzles: Optional[List[str]] = None, validate: bool = False, plots: bool = True) -> None:
    """Run the configured sweeps and write CSV summaries and charts."""
    selected = puzzles or ["nqueens", "sudoku"]
    unknown = set(selected).difference({"nqueens", "sudoku"})
    if unknown:
        raise ValueError("Unknown benchmark puzzle(s): " + ", ".join(sorted(unknown)))

    start = perf_counter()
    records = []
    if "nqueens" in selected:
        print(f"=== N-Queens, strategies {settings.NQUEENS_STRATEGIES} ===")
        records += run_nqueens_benchmark(
            settings.N_VALUES,
            settings.NQUEENS_STRATEGIES,
            settings.SIMPLE_MODES,
            runs=settings.RUNS_PER_CASE,
            validate=validate,
            progress_label="N-Queens",
        )
    if "sudoku" in selected:
        print(f"=== Sudoku, strategies {settings.SUDOKU_STRATEGIES} ===")
        records += run_sudoku_benchmark(
            settings.SUDOKU_EXAMPLES,
            settings.SUDOKU_STRATEGIES,
            settings.SIMPLE_MODES,
            runs=settings.RUNS_PER_CASE,
            validate=validate,
            progress_label="Sudoku",
        )
    if validate:
        validate_records(records)

    raw = records_to_frame(records)
    summary = summarize_runs(raw)
    print(f"  Raw runs saved: {save_raw_runs_to_csv(raw, settings.OUT_DIR)}")
    print(f"  Summary saved: {save_summary_to_csv(summary, settings.OUT_DIR)}")
    if plots:
        from .plots import plot_and_save

        plot_and_save(raw, summary, settings.OUT_DIR)

    total_time = perf_counter() - start
    print(f"Total time: {total_time:.1f}s, {len(records)} runs")


# ------------- Quick regression -------------------------------------------

def run_quick_regression_tests() -> None:
    """Fast, deterministic smoke test of the engine and the benchmark export.

    Verifies that:
    - every N-Queens strategy solves N=8 with a valid placement;
    - every Sudoku strategy solves the bundled grids;
    - the knapsack demo reaches its target;
    - the benchmark pipeline produces a non-empty CSV in a temporary folder.
    """
    print("Running quick regression tests...")

    for label in nqueens.SELECTORS:
        puzzle = NQueens(8, label)
        report = BacktrackSolver(puzzle, SolveSettings(solve_simple_steps=False)).run()
        if not report.succeeded or not is_valid_solution(puzzle.board()):
            raise AssertionError(f"N-Queens ({label}) failed for N=8: {puzzle.board()}")
        print(f"  [nqueens] {label}: iterations={report.iterations}, time={report.elapsed:.4f}s")

    for label in sudoku.SELECTORS:
        puzzle = Sudoku(sudoku.EXAMPLE1, label)
        report = BacktrackSolver(puzzle).run()
        if not report.succeeded or not puzzle.is_solved():
            raise AssertionError(f"Sudoku ({label}) failed on example1.")
        print(f"  [sudoku] {label}: iterations={report.iterations}, time={report.elapsed:.4f}s")

    bag = build_puzzle("knapsack")
    report = BacktrackSolver(bag).run()
    if not report.succeeded or bag.selected_value() < DEMO_TARGET or bag.used_weight() > DEMO_CAPACITY:
        raise AssertionError("Knapsack demo did not reach its target.")
    print(f"  [knapsack] selected {bag.selection()}")

    records = run_nqueens_benchmark([4, 6], ["first"], [False], runs=1, validate=True)
    validate_records(records)
    with tempfile.TemporaryDirectory() as tmpdir:
        csv_path = Path(save_summary_to_csv(summarize_runs(records_to_frame(records)), tmpdir))
        if not csv_path.exists() or csv_path.stat().st_size == 0:
            raise AssertionError("Summary CSV was not generated successfully during quick tests.")

    print("Quick regression tests passed.")


# ------------- CLI wiring --------------------------------------------------

def build_arg_parser():
    """Construct the argument parser for the CLI entry point."""
    parser = argparse.ArgumentParser(description="Solve puzzles with the backtracking engine, or benchmark it.")
    parser.add_argument(
        "--puzzle",
        "-p",
        choices=["sudoku", "nqueens", "knapsack"],
        default="sudoku",
        help="Reference puzzle for the demo solve (default: sudoku).",
    )
    parser.add_argument("--strategy", "-s", help="Branching heuristic for the demo puzzle (see each puzzle's SELECTORS).")
    parser.add_argument("--size", "-n", type=int, default=8, help="Board size for nqueens (default: 8).")
    parser.add_argument("--race", action="store_true", help="Race every strategy of the puzzle and keep the first solution.")
    parser.add_argument("--debug", action="store_true", help="Print a trace line for every guess.")
    parser.add_argument("--sleep-ms", type=int, default=None, help="Pause after each traced step, in milliseconds.")
    simple = parser.add_mutually_exclusive_group()
    simple.add_argument("--simple", dest="simple", action="store_true", default=None, help="Run forced propagation before branching.")
    simple.add_argument("--no-simple", dest="simple", action="store_false", help="Branch without forced propagation.")
    parser.add_argument("--difference", action="store_true", help="Print the positions the solver filled in.")
    parser.add_argument("--benchmark", action="store_true", help="Run the benchmark pipeline instead of a demo solve.")
    parser.add_argument(
        "--bench-puzzle",
        action="append",
        help="Limit the benchmark to puzzles: nqueens, sudoku (comma-separated or multiple flags).",
    )
    parser.add_argument("--no-plots", action="store_true", help="Skip chart generation in the benchmark.")
    parser.add_argument("--config", default=None, help="Path to configuration file (default: config.json if present).")
    parser.add_argument("--quick-test", action="store_true", help="Run quick regression tests and exit.")
    parser.add_argument("--validate", action="store_true", help="Validate benchmark solutions and determinism (extra assertions).")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for solver lifecycle messages (default: WARNING).",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """CLI entry point: parse arguments and dispatch to the chosen pipeline."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.quick_test:
        run_quick_regression_tests()
        return

    try:
        _, configured = apply_configuration(args.config)
    except FileNotFoundError as exc:
        print(f"Configuration file not found: {exc}")
        raise SystemExit(1) from exc
    except ValueError as exc:
        print(f"Configuration error: {exc}")
        raise SystemExit(1) from exc

    try:
        if args.benchmark:
            main_benchmark(parse_list_filters(args.bench_puzzle), validate=args.validate, plots=not args.no_plots)
            return
        code = run_demo(args.puzzle, override_settings(configured, args), args.strategy, args.size, args.race)
    except KeyboardInterrupt:
        print("\nExecution interrupted by user.")
        raise SystemExit(130) from None
    except ValueError as exc:
        print(f"Execution error: {exc}")
        raise SystemExit(1) from exc
    if code:
        raise SystemExit(code)
