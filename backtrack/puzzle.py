"""Capability contract between the search engine and concrete puzzles.

The engine never inspects a puzzle's representation. Everything it needs is
expressed as seven operations over an opaque position/value space:

- count_candidates(pos) -> int: number of values currently legal at ``pos``.
- candidate(pos, index) -> value: the ``index``-th legal value (0-based),
    stable while the puzzle state is unchanged.
- assign(pos, value): commit a tentative assignment.
- unassign(pos): undo the matching ``assign``, together with every side effect
    it caused, including forced deductions made by ``propagate_forced`` since.
- next_unresolved_position() -> position | None: the next slot to branch on,
    or None when the puzzle is fully assigned.
- propagate_forced() -> bool: one round of puzzle-defined forced deduction;
    True when anything changed.
- is_dead_end() -> bool: True when some position has no legal candidate.

Contract
--------
- Determinism: ``count_candidates``, ``candidate`` and
    ``next_unresolved_position`` must be deterministic for a fixed state.
    Reproducible debug traces depend on it.
- Termination: candidate sets must be finite. Non-terminating collaborators
    are the caller's responsibility; the engine does not detect them.
- Exclusive ownership: nothing else may mutate the puzzle while a solve runs.

Two optional capabilities extend the contract: ``snapshot()`` for diffing
(``SupportsSnapshot``) and ``render()`` for the debug trace
(``SupportsRender``).
"""

from __future__ import annotations

from typing import Any, Hashable, Mapping, Optional, Protocol, runtime_checkable

Position = Hashable
Value = Any


@runtime_checkable
class Puzzle(Protocol):
    """Structural type implemented by every puzzle the solver can search."""

    def count_candidates(self, pos: Position) -> int:
        ...

    def candidate(self, pos: Position, index: int) -> Value:
        ...

    def assign(self, pos: Position, value: Value) -> None:
        ...

    def unassign(self, pos: Position) -> None:
        ...

    def next_unresolved_position(self) -> Optional[Position]:
        ...

    def propagate_forced(self) -> bool:
        ...

    def is_dead_end(self) -> bool:
        ...


@runtime_checkable
class SupportsSnapshot(Protocol):
    """Puzzles whose assignment can be copied out for diffing.

    ``snapshot()`` returns every assignable position mapped to its current
    value, or None where the position is still empty. The returned mapping
    must not alias the puzzle's internal storage.
    """

    def snapshot(self) -> Mapping[Position, Optional[Value]]:
        ...


@runtime_checkable
class SupportsRender(Protocol):
    """Puzzles that can draw themselves as text for the debug trace."""

    def render(self) -> str:
        ...
