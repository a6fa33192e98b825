"""Snapshot and diff of a puzzle's assignment.

The solver takes a ``Snapshot`` when a solve starts. Afterwards ``diff``
reports only the positions whose value changed, which lets a caller highlight
the cells the solver filled in on a partially pre-filled puzzle.

Both helpers need the optional ``snapshot()`` capability; the search itself
never touches this module.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Tuple, Union

from .puzzle import Position, SupportsSnapshot, Value

Diff = Dict[Position, Tuple[Optional[Value], Optional[Value]]]


class Snapshot(Mapping[Position, Optional[Value]]):
    """Read-only copy of a puzzle's assignment at one point in time."""

    def __init__(self, values: Mapping[Position, Optional[Value]]):
        self._values = MappingProxyType(dict(values))

    @classmethod
    def of(cls, puzzle: object) -> "Snapshot":
        """Copy the current assignment out of ``puzzle``.

        Raises
        ------
        TypeError
            If the puzzle does not implement ``snapshot()``.
        """
        if isinstance(puzzle, Snapshot):
            return puzzle
        if not isinstance(puzzle, SupportsSnapshot):
            raise TypeError(f"{type(puzzle).__name__} does not support snapshot()")
        return cls(puzzle.snapshot())

    def __getitem__(self, pos: Position) -> Optional[Value]:
        return self._values[pos]

    def __iter__(self) -> Iterator[Position]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Snapshot({dict(self._values)!r})"


def diff(before: Snapshot, after: Union[Snapshot, SupportsSnapshot]) -> Diff:
    """Positions whose value differs between ``before`` and ``after``.

    Parameters
    ----------
    before : Snapshot
        State captured before solving.
    after : Snapshot | puzzle
        Solved puzzle (snapshotted on the fly) or a later snapshot.

    Returns
    -------
    Diff
        ``{pos: (old, new)}`` where a side lacking the position reports None.
        Changes from one value to another are included even though a correct
        puzzle never overwrites a pre-filled value.
    """
    before = Snapshot.of(before)
    after = Snapshot.of(after)
    changed: Diff = {}
    for pos in list(before) + [p for p in after if p not in before]:
        old = before.get(pos)
        new = after.get(pos)
        if old != new:
            changed[pos] = (old, new)
    return changed


def render_diff(changes: Diff) -> str:
    """One line per changed position, ordered as the diff was built."""
    if not changes:
        return "No changes."
    lines = [f"{pos}: {_show(old)} -> {_show(new)}" for pos, (old, new) in changes.items()]
    return "\n".join(lines)


def _show(value: Optional[Value]) -> str:
    return "." if value is None else str(value)
