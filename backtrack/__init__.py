"""Generic backtracking engine for constraint-satisfaction puzzles."""

from .backtracking import (
    BacktrackSolver,
    GuessEntry,
    GuessStack,
    Move,
    PuzzleContractError,
    SolveOutcome,
    SolveReport,
    SolverState,
    solve,
)
from .debug import StepRecord, StepTracer
from .diff import Diff, Snapshot, diff, render_diff
from .multi import MultiBacktrackSolver, MultiSolveReport
from .puzzle import Puzzle, SupportsRender, SupportsSnapshot
from .settings import SolveSettings
from .trail import Trail

__all__ = [
    "BacktrackSolver",
    "GuessEntry",
    "GuessStack",
    "Move",
    "PuzzleContractError",
    "SolveOutcome",
    "SolveReport",
    "SolverState",
    "solve",
    "StepRecord",
    "StepTracer",
    "Diff",
    "Snapshot",
    "diff",
    "render_diff",
    "MultiBacktrackSolver",
    "MultiSolveReport",
    "Puzzle",
    "SupportsRender",
    "SupportsSnapshot",
    "SolveSettings",
    "Trail",
]
