"""Undo log helper for puzzle implementations.

``unassign(pos)`` has to roll back more than the slot itself: forced
deductions made after the guess are consequences of it and must go too. A
trail records guesses and deductions in the order they happened so a puzzle
can unwind back to the guess being undone.

Usage
-----
    def assign(self, pos, value):
        self._write(pos, value)
        self.trail.mark(pos)

    def propagate_forced(self):
        ...
        self._write(pos, forced_value)
        self.trail.record(pos)

    def unassign(self, pos):
        for undone in self.trail.unwind(pos):
            self._clear(undone)

Deductions made before the first guess belong to no mark and are never
unwound; they hold in every branch.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from .puzzle import Position


@dataclass
class Trail:
    """Ordered log of ``(position, is_guess)`` entries."""

    entries: List[Tuple[Position, bool]] = field(default_factory=list)

    def mark(self, pos: Position) -> None:
        """Record a guessed assignment at ``pos``."""
        self.entries.append((pos, True))

    def record(self, pos: Position) -> None:
        """Record a forced deduction at ``pos``."""
        self.entries.append((pos, False))

    def unwind(self, pos: Position) -> List[Position]:
        """Pop entries back to and including the most recent guess at ``pos``.

        Returns
        -------
        list
            Positions to clear, most recent first. The guessed position itself
            is the last element.

        Raises
        ------
        KeyError
            If no guess at ``pos`` is on the trail. Undoing an assignment that
            was never made is a contract violation by the caller.
        """
        for index in range(len(self.entries) - 1, -1, -1):
            entry_pos, is_guess = self.entries[index]
            if is_guess and entry_pos == pos:
                undone = [p for p, _ in reversed(self.entries[index:])]
                del self.entries[index:]
                return undone
        raise KeyError(f"No guess recorded at {pos!r}")

    def __len__(self) -> int:
        return len(self.entries)
