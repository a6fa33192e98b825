"""9x9 Sudoku as a backtracking puzzle.

Fill digits 1-9 so that every row, column and 3x3 block contains each digit
once. Empty cells hold 0. Positions are ``(x, y)`` tuples, values are digits.

Branching heuristics
--------------------
Search speed varies a lot with the rule used to pick the next empty cell:

- "empty": first empty cell in row-major order.
- "min_empty": empty cell with the fewest legal digits (default).
- "freq_empty": find the digit that is legal in the fewest empty cells and
    branch on the first cell where it is legal; fall back to "empty".

Forced propagation fills every empty cell that has a single legal digit.
Pre-filled cells that clash with a peer make the grid a dead end immediately.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from ..trail import Trail

Pos = Tuple[int, int]

EXAMPLE1 = (
    (0, 4, 1, 0, 9, 0, 2, 0, 0),
    (9, 2, 6, 5, 0, 0, 1, 0, 0),
    (0, 0, 0, 1, 0, 0, 3, 0, 6),
    (6, 3, 0, 0, 4, 0, 0, 8, 9),
    (7, 0, 0, 0, 0, 0, 0, 0, 1),
    (1, 5, 0, 0, 8, 0, 0, 2, 7),
    (2, 0, 9, 0, 0, 7, 0, 0, 0),
    (0, 0, 5, 0, 0, 8, 9, 1, 2),
    (0, 0, 3, 0, 1, 0, 7, 5, 0),
)

EXAMPLE2 = (
    (0, 0, 0, 0, 0, 0, 0, 0, 0),
    (0, 0, 0, 0, 3, 4, 0, 0, 0),
    (0, 0, 0, 0, 0, 0, 0, 0, 0),
    (9, 6, 0, 0, 5, 0, 0, 8, 7),
    (2, 0, 0, 0, 0, 0, 0, 0, 6),
    (7, 1, 0, 0, 2, 0, 0, 4, 5),
    (0, 2, 0, 0, 0, 9, 0, 7, 8),
    (0, 4, 0, 6, 1, 0, 5, 0, 0),
    (0, 0, 8, 0, 0, 0, 0, 1, 3),
)


class Sudoku:
    def __init__(self, slots: Sequence[Sequence[int]], strategy: str = "min_empty"):
        if len(slots) != 9 or any(len(row) != 9 for row in slots):
            raise ValueError("A Sudoku grid needs 9 rows of 9 cells.")
        if any(not 0 <= v <= 9 for row in slots for v in row):
            raise ValueError("Sudoku cells must hold 0 (empty) or a digit 1-9.")
        if strategy not in SELECTORS:
            raise ValueError(f"Unknown strategy: {strategy}. Available: " + ", ".join(SELECTORS))
        self.slots: List[List[int]] = [list(row) for row in slots]
        self.strategy = strategy
        self.trail = Trail()

    @classmethod
    def from_string(cls, text: str, strategy: str = "min_empty") -> "Sudoku":
        """Parse 81 characters in row-major order; ``0`` or ``.`` is empty."""
        cells = [c for c in text if not c.isspace()]
        if len(cells) != 81:
            raise ValueError(f"Expected 81 cells, got {len(cells)}")
        digits = [0 if c == "." else int(c) for c in cells]
        return cls([digits[row * 9:(row + 1) * 9] for row in range(9)], strategy)

    # ------------- Capability -------------------------------------------------

    def count_candidates(self, pos: Pos) -> int:
        return len(self.possible(pos))

    def candidate(self, pos: Pos, index: int) -> int:
        return self.possible(pos)[index]

    def assign(self, pos: Pos, value: int) -> None:
        x, y = pos
        self.slots[y][x] = value
        self.trail.mark(pos)

    def unassign(self, pos: Pos) -> None:
        for x, y in self.trail.unwind(pos):
            self.slots[y][x] = 0

    def next_unresolved_position(self) -> Optional[Pos]:
        return SELECTORS[self.strategy](self)

    def propagate_forced(self) -> bool:
        found_any = False
        for y in range(9):
            for x in range(9):
                if self.slots[y][x] != 0:
                    continue
                possible = self.possible((x, y))
                if len(possible) == 1:
                    self.slots[y][x] = possible[0]
                    self.trail.record((x, y))
                    found_any = True
        return found_any

    def is_dead_end(self) -> bool:
        if not self.is_consistent():
            return True
        return any(
            self.slots[y][x] == 0 and not self.possible((x, y))
            for y in range(9)
            for x in range(9)
        )

    def snapshot(self) -> Dict[Pos, Optional[int]]:
        return {(x, y): (self.slots[y][x] or None) for y in range(9) for x in range(9)}

    def render(self) -> str:
        lines = [" ___ ___ ___"]
        for y in range(9):
            row = "|"
            for x in range(9):
                v = self.slots[y][x]
                row += " " if v == 0 else str(v)
                if x % 3 == 2:
                    row += "|"
            lines.append(row)
            if y % 3 == 2:
                lines.append(" ---+---+---")
        return "\n".join(lines)

    # ------------- Grid helpers -------------------------------------------------

    def possible(self, pos: Pos) -> List[int]:
        """Digits legal at ``pos``; a filled cell reports its own digit."""
        x0, y0 = pos
        if self.slots[y0][x0] != 0:
            return [self.slots[y0][x0]]
        used = set(self.slots[y0])
        used.update(self.slots[y][x0] for y in range(9))
        bx, by = 3 * (x0 // 3), 3 * (y0 // 3)
        used.update(self.slots[y][x] for y in range(by, by + 3) for x in range(bx, bx + 3))
        return [v for v in range(1, 10) if v not in used]

    def is_consistent(self) -> bool:
        """True when no digit repeats within a row, column or block."""
        units = []
        units.extend([(x, y) for x in range(9)] for y in range(9))
        units.extend([(x, y) for y in range(9)] for x in range(9))
        units.extend(
            [(bx + dx, by + dy) for dy in range(3) for dx in range(3)]
            for by in range(0, 9, 3)
            for bx in range(0, 9, 3)
        )
        for unit in units:
            digits = [self.slots[y][x] for x, y in unit if self.slots[y][x] != 0]
            if len(digits) != len(set(digits)):
                return False
        return True

    def is_solved(self) -> bool:
        return all(v != 0 for row in self.slots for v in row) and self.is_consistent()

    def find_empty(self) -> Optional[Pos]:
        for y in range(9):
            for x in range(9):
                if self.slots[y][x] == 0:
                    return (x, y)
        return None

    def find_min_empty(self) -> Optional[Pos]:
        best: Optional[Pos] = None
        best_count = 10
        for y in range(9):
            for x in range(9):
                if self.slots[y][x] != 0:
                    continue
                count = len(self.possible((x, y)))
                if count < best_count:
                    best, best_count = (x, y), count
        return best

    def find_freq_empty(self) -> Optional[Pos]:
        freq = [0] * 9
        legal: Dict[Pos, List[int]] = {}
        for y in range(9):
            for x in range(9):
                if self.slots[y][x] == 0:
                    legal[(x, y)] = self.possible((x, y))
                    for v in legal[(x, y)]:
                        freq[v - 1] += 1

        # Rarest digit that is still placeable somewhere.
        rarest: Optional[int] = None
        for i in range(9):
            if freq[i] > 0 and (rarest is None or freq[i] < freq[rarest]):
                rarest = i
        if rarest is None:
            return self.find_empty()

        for y in range(9):
            for x in range(9):
                if rarest + 1 in legal.get((x, y), ()):
                    return (x, y)
        return self.find_empty()


SELECTORS = {
    "empty": Sudoku.find_empty,
    "min_empty": Sudoku.find_min_empty,
    "freq_empty": Sudoku.find_freq_empty,
}
