"""Generic backtracking search over any puzzle implementing ``Puzzle``.

This module implements depth-first search with backtracking as an iterative
state machine driven by an explicit guess stack, so search depth is never
bounded by Python's recursion limit.

Entry points
------------
- solve(puzzle, settings=None, select=None) -> SolveOutcome
- BacktrackSolver(puzzle, settings=None, select=None, tracer=None)
    - step() advances a single transition and returns the new state.
    - run() drives the machine to a terminal state and returns a SolveReport.

The puzzle is mutated in place: on success it holds the first full assignment
found, on failure the state left after the root branch was exhausted.

State machine
-------------
PROPAGATING
    With ``solve_simple_steps`` enabled, call ``propagate_forced()`` until it
    reports no change or the puzzle hits a dead end. A dead end goes to
    BACKTRACKING, anything else to BRANCHING.
BRANCHING
    Ask for the next unresolved position. None means SUCCEEDED. A position
    with zero candidates goes to BACKTRACKING. Otherwise candidate 0 is
    assigned, pushed on the guess stack and the machine moves to ADVANCING.
ADVANCING
    The guess is committed; continue with PROPAGATING one level deeper.
BACKTRACKING
    An empty stack means FAILED. Otherwise pop the top guess and unassign it.
    If it has untried candidates, assign the next one, push it back and go to
    PROPAGATING; otherwise stay in BACKTRACKING and unwind further.

Ordering
--------
- Candidates are tried exactly in the order ``candidate(pos, index)``
    enumerates them, starting at index 0. The engine never reorders them.
- Variable order is whatever ``next_unresolved_position`` (or the ``select``
    override) returns.
- Consequently two runs over equal initial states and settings produce the
    same trace and the same final assignment.

Counters
--------
- iterations: number of candidate assignments attempted (guesses plus
    retries), a hardware-independent proxy of search effort.
- elapsed: wall-clock seconds spent inside ``step`` calls, via perf_counter.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from time import perf_counter
from typing import Callable, Iterator, List, Optional

from .debug import StepRecord, StepTracer
from .diff import Diff, Snapshot, diff, render_diff
from .puzzle import Position, Puzzle, SupportsSnapshot, Value
from .settings import SolveSettings

logger = logging.getLogger(__name__)

Selector = Callable[[Puzzle], Optional[Position]]


class PuzzleContractError(RuntimeError):
    """Raised when a puzzle visibly breaks the capability contract."""


class SolveOutcome(Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class SolverState(Enum):
    PROPAGATING = "propagating"
    BRANCHING = "branching"
    ADVANCING = "advancing"
    BACKTRACKING = "backtracking"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (SolverState.SUCCEEDED, SolverState.FAILED)


@dataclass(frozen=True)
class Move:
    """One candidate assignment at one position.

    ``candidate_index`` records which enumerated candidate ``value`` is, so
    the search can resume at the next one after a failed branch.
    """

    position: Position
    value: Value
    candidate_index: int


@dataclass(frozen=True)
class GuessEntry:
    move: Move
    total: int
    depth: int

    @property
    def position(self) -> Position:
        return self.move.position

    @property
    def exhausted(self) -> bool:
        return self.move.candidate_index + 1 >= self.total


class GuessStack:
    """Open branch decisions on the path from the root, oldest first."""

    def __init__(self) -> None:
        self._entries: List[GuessEntry] = []

    def push(self, move: Move, total: int) -> GuessEntry:
        entry = GuessEntry(move=move, total=total, depth=len(self._entries) + 1)
        self._entries.append(entry)
        return entry

    def pop(self) -> GuessEntry:
        return self._entries.pop()

    def peek(self) -> Optional[GuessEntry]:
        return self._entries[-1] if self._entries else None

    @property
    def depth(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[GuessEntry]:
        return iter(self._entries)

    def describe(self) -> str:
        """Compact one-line view, e.g. ``(0, 0)=5 [1/3] > (1, 0)=2 [2/2]``."""
        return " > ".join(
            f"{e.position}={e.move.value} [{e.move.candidate_index + 1}/{e.total}]"
            for e in self._entries
        )


@dataclass
class SolveReport:
    outcome: SolveOutcome
    iterations: int
    elapsed: float
    max_depth: int

    @property
    def succeeded(self) -> bool:
        return self.outcome is SolveOutcome.SUCCEEDED


class BacktrackSolver:
    """Drives one solve of ``puzzle``.

    A solver instance represents a single solve invocation: the starting
    snapshot is taken on construction and the guess stack lives until the
    machine reaches a terminal state.

    Parameters
    ----------
    puzzle : Puzzle
        Collaborator searched and mutated in place.
    settings : SolveSettings | None
        Defaults to ``SolveSettings()``.
    select : callable | None
        Optional ``select(puzzle) -> position | None`` replacing
        ``puzzle.next_unresolved_position`` as the branching heuristic.
    tracer : StepTracer | None
        Receives step records when ``settings.debug`` is set. Defaults to a
        tracer printing to stdout with ``settings.step_delay``.
    """

    def __init__(
        self,
        puzzle: Puzzle,
        settings: Optional[SolveSettings] = None,
        select: Optional[Selector] = None,
        tracer: Optional[StepTracer] = None,
    ):
        self.puzzle = puzzle
        self.settings = settings if settings is not None else SolveSettings()
        self.select = select
        self.tracer = tracer if tracer is not None else StepTracer(step_delay=self.settings.step_delay)
        self.stack = GuessStack()
        self.state = SolverState.PROPAGATING
        self.iterations = 0
        self.max_depth = 0
        self.elapsed = 0.0
        self.snapshot: Optional[Snapshot] = (
            Snapshot.of(puzzle) if isinstance(puzzle, SupportsSnapshot) else None
        )

    # ------------- Driving ----------------------------------------------------

    def step(self) -> SolverState:
        """Advance one transition; terminal states are left unchanged."""
        start = perf_counter()
        state = self.state
        if state is SolverState.PROPAGATING:
            self.state = self._propagate()
        elif state is SolverState.BRANCHING:
            self.state = self._branch()
        elif state is SolverState.ADVANCING:
            self.state = SolverState.PROPAGATING
        elif state is SolverState.BACKTRACKING:
            self.state = self._backtrack()
        self.elapsed += perf_counter() - start
        return self.state

    def run(self) -> SolveReport:
        """Step until SUCCEEDED or FAILED."""
        logger.debug("Solving %s", type(self.puzzle).__name__)
        while not self.state.is_terminal:
            self.step()

        report = SolveReport(
            outcome=self.outcome,
            iterations=self.iterations,
            elapsed=self.elapsed,
            max_depth=self.max_depth,
        )
        logger.debug(
            "Finished: %s after %d iterations (max depth %d)",
            report.outcome.value,
            report.iterations,
            report.max_depth,
        )
        if self.settings.debug and self.settings.difference and report.succeeded and self.snapshot is not None:
            self.tracer.sink("Difference:")
            self.tracer.sink(render_diff(self.difference()))
        return report

    @property
    def outcome(self) -> SolveOutcome:
        if self.state is SolverState.SUCCEEDED:
            return SolveOutcome.SUCCEEDED
        if self.state is SolverState.FAILED:
            return SolveOutcome.FAILED
        raise RuntimeError(f"Solve still in progress (state: {self.state.value})")

    def difference(self) -> Diff:
        """Diff between the starting snapshot and the current puzzle state."""
        if self.snapshot is None:
            raise TypeError(f"{type(self.puzzle).__name__} does not support snapshot()")
        return diff(self.snapshot, self.puzzle)

    # ------------- Transitions --------------------------------------------------

    def _propagate(self) -> SolverState:
        puzzle = self.puzzle
        if self.settings.solve_simple_steps:
            while not puzzle.is_dead_end() and puzzle.propagate_forced():
                pass
        if puzzle.is_dead_end():
            return SolverState.BACKTRACKING
        return SolverState.BRANCHING

    def _branch(self) -> SolverState:
        if self.select is not None:
            pos = self.select(self.puzzle)
        else:
            pos = self.puzzle.next_unresolved_position()
        if pos is None:
            return SolverState.SUCCEEDED

        total = self._count(pos)
        if total == 0:
            return SolverState.BACKTRACKING

        move = self._attempt(pos, 0, total)
        entry = self.stack.push(move, total)
        self.max_depth = max(self.max_depth, entry.depth)
        self._trace(entry, retry=False)
        return SolverState.ADVANCING

    def _backtrack(self) -> SolverState:
        if not self.stack:
            return SolverState.FAILED

        entry = self.stack.pop()
        self.puzzle.unassign(entry.position)
        if entry.exhausted:
            # Every candidate here failed; keep unwinding.
            return SolverState.BACKTRACKING

        total = self._count(entry.position)
        if total != entry.total:
            raise PuzzleContractError(
                f"Candidate count at {entry.position!r} changed from {entry.total} to {total} "
                "after unassign; unassign must restore the previous state exactly"
            )
        move = self._attempt(entry.position, entry.move.candidate_index + 1, total)
        retried = self.stack.push(move, total)
        self._trace(retried, retry=True)
        return SolverState.PROPAGATING

    # ------------- Helpers ----------------------------------------------------

    def _count(self, pos: Position) -> int:
        total = self.puzzle.count_candidates(pos)
        if total < 0:
            raise PuzzleContractError(f"Negative candidate count {total} at {pos!r}")
        return total

    def _attempt(self, pos: Position, index: int, total: int) -> Move:
        try:
            value = self.puzzle.candidate(pos, index)
        except IndexError as exc:
            raise PuzzleContractError(
                f"candidate({pos!r}, {index}) failed although count_candidates reported {total}"
            ) from exc
        self.puzzle.assign(pos, value)
        self.iterations += 1
        return Move(position=pos, value=value, candidate_index=index)

    def _trace(self, entry: GuessEntry, retry: bool) -> None:
        if not self.settings.debug:
            return
        record = StepRecord(
            position=entry.position,
            value=entry.move.value,
            index=entry.move.candidate_index,
            total=entry.total,
            depth=entry.depth,
            retry=retry,
        )
        self.tracer.emit(record, self.puzzle)


def solve(
    puzzle: Puzzle,
    settings: Optional[SolveSettings] = None,
    select: Optional[Selector] = None,
) -> SolveOutcome:
    """Search ``puzzle`` in place and return SUCCEEDED or FAILED.

    Parameters
    ----------
    puzzle : Puzzle
        Collaborator to solve; left holding the first solution found, or the
        state reached once the root branch is exhausted.
    settings : SolveSettings | None
        Debug output, step delay and forced-propagation switches.
    select : callable | None
        Optional branching heuristic overriding
        ``puzzle.next_unresolved_position``.
    """
    return BacktrackSolver(puzzle, settings, select=select).run().outcome
