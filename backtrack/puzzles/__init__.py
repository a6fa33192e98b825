"""Reference puzzles implementing the capability contract.

The engine never imports these; they back the CLI demo, the benchmark
pipeline and the tests.
"""

from .knapsack import Item, Knapsack
from .nqueens import NQueens, conflicts, is_valid_solution
from .sudoku import EXAMPLE1, EXAMPLE2, Sudoku

__all__ = [
    "Item",
    "Knapsack",
    "NQueens",
    "Sudoku",
    "EXAMPLE1",
    "EXAMPLE2",
    "conflicts",
    "is_valid_solution",
]
