"""N-Queens as a backtracking puzzle.

Place N queens on an N x N board so that no two share a row or a diagonal.
One queen goes in each column, so positions are column indices and values are
row indices: ``board[col] = row``, ``-1`` meaning the column is still empty.

Constraint tracking
-------------------
Three boolean arrays give O(1) availability checks: ``row_used[r]``,
``diag1_used[r - c + offset]`` and ``diag2_used[r + c]`` where
``offset = size - 1`` maps negative indices to ``[0, 2 * size - 2]``.

Branching heuristics
--------------------
- "first": leftmost empty column (default). Rows are tried top-to-bottom, so
    the first solution found is the lexicographically smallest one.
- "mcv": Most Constrained Variable, the empty column with the fewest safe
    rows; ties go to the smallest column index.

Forced propagation places a queen in every empty column left with a single
safe row.
"""

from __future__ import annotations

from collections import Counter
from typing import Dict, List, Optional, Sequence

from ..trail import Trail


class NQueens:
    def __init__(self, size: int, strategy: str = "first"):
        if size < 1:
            raise ValueError(f"Board size must be >= 1, got {size}")
        if strategy not in SELECTORS:
            raise ValueError(f"Unknown strategy: {strategy}. Available: " + ", ".join(SELECTORS))
        self.size = size
        self.strategy = strategy
        self.positions = [-1] * size
        self.row_used = [False] * size
        self.diag1_used = [False] * (2 * size - 1)
        self.diag2_used = [False] * (2 * size - 1)
        self.trail = Trail()

    # ------------- Capability -------------------------------------------------

    def count_candidates(self, column: int) -> int:
        return len(self.available_rows(column))

    def candidate(self, column: int, index: int) -> int:
        return self.available_rows(column)[index]

    def assign(self, column: int, row: int) -> None:
        self._place(column, row)
        self.trail.mark(column)

    def unassign(self, column: int) -> None:
        for undone in self.trail.unwind(column):
            self._lift(undone)

    def next_unresolved_position(self) -> Optional[int]:
        return SELECTORS[self.strategy](self)

    def propagate_forced(self) -> bool:
        changed = False
        for column in range(self.size):
            if self.positions[column] != -1:
                continue
            rows = self.available_rows(column)
            if len(rows) == 1:
                self._place(column, rows[0])
                self.trail.record(column)
                changed = True
        return changed

    def is_dead_end(self) -> bool:
        return any(
            self.positions[column] == -1 and not self.available_rows(column)
            for column in range(self.size)
        )

    def snapshot(self) -> Dict[int, Optional[int]]:
        return {column: (row if row != -1 else None) for column, row in enumerate(self.positions)}

    def render(self) -> str:
        lines = []
        for row in range(self.size):
            lines.append(" ".join("Q" if self.positions[c] == row else "." for c in range(self.size)))
        return "\n".join(lines)

    # ------------- Board helpers ----------------------------------------------

    def available_rows(self, column: int) -> List[int]:
        """Rows where a queen at ``column`` violates no constraint."""
        offset = self.size - 1
        candidates: List[int] = []
        for row in range(self.size):
            if self.row_used[row]:
                continue
            if not self.diag1_used[row - column + offset] and not self.diag2_used[row + column]:
                candidates.append(row)
        return candidates

    def first_column(self) -> Optional[int]:
        for column in range(self.size):
            if self.positions[column] == -1:
                return column
        return None

    def most_constrained_column(self) -> Optional[int]:
        best_column: Optional[int] = None
        min_candidates = self.size + 1
        for column in range(self.size):
            if self.positions[column] != -1:
                continue
            count = len(self.available_rows(column))
            if count < min_candidates:
                best_column, min_candidates = column, count
                if count <= 1:
                    break
        return best_column

    def board(self) -> List[int]:
        return list(self.positions)

    def _place(self, column: int, row: int) -> None:
        self.positions[column] = row
        self.row_used[row] = True
        self.diag1_used[row - column + self.size - 1] = True
        self.diag2_used[row + column] = True

    def _lift(self, column: int) -> None:
        row = self.positions[column]
        self.positions[column] = -1
        self.row_used[row] = False
        self.diag1_used[row - column + self.size - 1] = False
        self.diag2_used[row + column] = False


SELECTORS = {
    "first": NQueens.first_column,
    "mcv": NQueens.most_constrained_column,
}


def conflicts(board: Sequence[int]) -> int:
    """Number of attacking queen pairs in O(N), for ``board[col] = row``."""
    row_count: Counter[int] = Counter()
    diag1: Counter[int] = Counter()
    diag2: Counter[int] = Counter()

    for column, row in enumerate(board):
        row_count[row] += 1
        diag1[row - column] += 1
        diag2[row + column] += 1

    def _pairs(counter: Counter[int]) -> int:
        return sum(count * (count - 1) // 2 for count in counter.values() if count > 1)

    return _pairs(row_count) + _pairs(diag1) + _pairs(diag2)


def is_valid_solution(board: Sequence[int]) -> bool:
    """Return True if ``board`` is a full, conflict-free placement.

    Contract
    - Input: sequence of length N where board[col] = row (0-based indices)
    - Valid if: all 0 <= row < N and no pairs of queens attack each other
    """
    n = len(board)
    if n == 0:
        return False
    for row in board:
        if not isinstance(row, int) or row < 0 or row >= n:
            return False
    return conflicts(board) == 0
