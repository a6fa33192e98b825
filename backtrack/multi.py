"""Race several branching heuristics against each other on one thread.

How quickly a puzzle is solved depends heavily on which position is picked
next (for Sudoku, leftmost-empty versus fewest-candidates can differ by
orders of magnitude). ``MultiBacktrackSolver`` runs one ``BacktrackSolver``
per heuristic, each over its own deep copy of the puzzle, and advances them
in round-robin one transition at a time. The first to succeed wins and its
guess path is replayed on the caller's puzzle through ``assign`` and
``propagate_forced``, so puzzles need no copy-back hook of their own.

There is no concurrency: solvers are interleaved, never run in parallel, and
every solver is deterministic, so the winner is deterministic too.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from time import perf_counter
from typing import Dict, List, Optional, Sequence, Tuple

from .backtracking import BacktrackSolver, PuzzleContractError, Selector, SolveOutcome
from .debug import StepTracer
from .diff import Snapshot, diff
from .puzzle import Puzzle, SupportsSnapshot
from .settings import SolveSettings

logger = logging.getLogger(__name__)


@dataclass
class MultiSolveReport:
    outcome: SolveOutcome
    strategy: Optional[str]
    iterations: Dict[str, int]
    elapsed: float

    @property
    def succeeded(self) -> bool:
        return self.outcome is SolveOutcome.SUCCEEDED


class MultiBacktrackSolver:
    """Interleave one solver per named selection strategy.

    Parameters
    ----------
    puzzle : Puzzle
        Left untouched until a strategy succeeds; then the winning guesses
        are replayed on it.
    strategies : sequence of (name, select)
        Branching heuristics; ``select`` may be None to use the puzzle's own
        ``next_unresolved_position``. Names must be unique.
    settings : SolveSettings | None
        Shared by every solver. Debug traces are prefixed with the strategy
        name.
    """

    def __init__(
        self,
        puzzle: Puzzle,
        strategies: Sequence[Tuple[str, Optional[Selector]]],
        settings: Optional[SolveSettings] = None,
    ):
        if not strategies:
            raise ValueError("At least one strategy is required.")
        names = [name for name, _ in strategies]
        if len(set(names)) != len(names):
            raise ValueError("Strategy names must be unique: " + ", ".join(names))

        self.puzzle = puzzle
        self.settings = settings if settings is not None else SolveSettings()
        self.solvers: List[Tuple[str, BacktrackSolver]] = []
        for name, select in strategies:
            tracer = StepTracer(step_delay=self.settings.step_delay, sink=_prefixed(name))
            solver = BacktrackSolver(copy.deepcopy(puzzle), self.settings, select=select, tracer=tracer)
            self.solvers.append((name, solver))

    def run(self) -> MultiSolveReport:
        start = perf_counter()
        active = list(self.solvers)
        winner: Optional[str] = None

        while active and winner is None:
            for name, solver in list(active):
                state = solver.step()
                if not state.is_terminal:
                    continue
                if solver.outcome is SolveOutcome.SUCCEEDED:
                    winner = name
                    self._adopt(solver)
                    break
                logger.debug("Strategy %s exhausted after %d iterations", name, solver.iterations)
                active.remove((name, solver))

        outcome = SolveOutcome.SUCCEEDED if winner is not None else SolveOutcome.FAILED
        return MultiSolveReport(
            outcome=outcome,
            strategy=winner,
            iterations={name: solver.iterations for name, solver in self.solvers},
            elapsed=perf_counter() - start,
        )

    def _adopt(self, winner: BacktrackSolver) -> None:
        """Replay the winning guess path on the caller's puzzle.

        Only capability operations are used: forced propagation runs before
        each guess and once after the last one, exactly as the winning solver
        ran it, so the caller ends in the same state as the winning copy.
        """
        puzzle = self.puzzle
        for entry in winner.stack:
            self._settle(puzzle)
            puzzle.assign(entry.position, entry.move.value)
        self._settle(puzzle)

        if isinstance(puzzle, SupportsSnapshot) and isinstance(winner.puzzle, SupportsSnapshot):
            changed = diff(Snapshot.of(winner.puzzle), puzzle)
            if changed:
                raise PuzzleContractError(
                    f"Replaying the winning guesses left {len(changed)} position(s) different "
                    "from the winning copy"
                )

    def _settle(self, puzzle: Puzzle) -> None:
        if self.settings.solve_simple_steps:
            while not puzzle.is_dead_end() and puzzle.propagate_forced():
                pass


def _prefixed(name: str):
    def sink(line: str) -> None:
        print(f"[{name}] {line}")

    return sink
