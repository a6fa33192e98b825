"""Unit tests for the engine's building blocks: stack, trail, settings, diff."""

from pathlib import Path
import sys
import unittest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backtrack import GuessStack, Move, Puzzle, Snapshot, SolveSettings, SupportsSnapshot, Trail, diff, render_diff
from backtrack.puzzles import Knapsack, NQueens, Sudoku, EXAMPLE1


class GuessStackTests(unittest.TestCase):

    def test_push_assigns_depth(self):
        stack = GuessStack()
        first = stack.push(Move((0, 0), 5, 0), total=3)
        second = stack.push(Move((1, 0), 2, 1), total=2)
        self.assertEqual((first.depth, second.depth), (1, 2))
        self.assertEqual(len(stack), 2)
        self.assertIs(stack.peek(), second)

    def test_exhausted(self):
        stack = GuessStack()
        self.assertFalse(stack.push(Move("a", 1, 0), total=2).exhausted)
        self.assertTrue(stack.push(Move("b", 1, 1), total=2).exhausted)

    def test_pop_and_describe(self):
        stack = GuessStack()
        stack.push(Move((0, 0), 5, 0), total=3)
        stack.push(Move((1, 0), 2, 1), total=2)
        self.assertEqual(stack.describe(), "(0, 0)=5 [1/3] > (1, 0)=2 [2/2]")
        self.assertEqual(stack.pop().position, (1, 0))
        self.assertEqual(stack.depth, 1)
        stack.pop()
        self.assertIsNone(stack.peek())


class TrailTests(unittest.TestCase):

    def test_unwind_returns_forced_deductions_then_guess(self):
        trail = Trail()
        trail.record("root")
        trail.mark("a")
        trail.record("x")
        trail.mark("b")
        trail.record("y")
        self.assertEqual(trail.unwind("b"), ["y", "b"])
        self.assertEqual(trail.unwind("a"), ["x", "a"])
        self.assertEqual(len(trail), 1)

    def test_unwind_unknown_guess(self):
        trail = Trail()
        trail.record("a")
        with self.assertRaises(KeyError):
            trail.unwind("a")


class SolveSettingsTests(unittest.TestCase):

    def test_defaults(self):
        settings = SolveSettings()
        self.assertFalse(settings.debug)
        self.assertEqual(settings.step_delay, 0.0)
        self.assertTrue(settings.solve_simple_steps)
        self.assertFalse(settings.difference)

    def test_builders_return_copies(self):
        base = SolveSettings()
        tuned = base.with_debug(True).with_sleep_ms(500).with_solve_simple_steps(False).with_difference(True)
        self.assertEqual(tuned, SolveSettings(debug=True, step_delay=0.5, solve_simple_steps=False, difference=True))
        self.assertEqual(base, SolveSettings())

    def test_immutable(self):
        with self.assertRaises(AttributeError):
            SolveSettings().debug = True

    def test_negative_delay_rejected(self):
        with self.assertRaises(ValueError):
            SolveSettings(step_delay=-1)

    def test_from_mapping(self):
        settings = SolveSettings.from_mapping({"debug": True, "sleep_ms": 250, "solve_simple_steps": False})
        self.assertEqual(settings, SolveSettings(debug=True, step_delay=0.25, solve_simple_steps=False))

    def test_from_mapping_rejects_unknown_keys(self):
        with self.assertRaises(ValueError):
            SolveSettings.from_mapping({"debgu": True})
        with self.assertRaises(ValueError):
            SolveSettings.from_mapping({"sleep_ms": 1, "step_delay": 1})


class DiffTests(unittest.TestCase):

    def test_only_changed_positions(self):
        before = Snapshot({"a": None, "b": 2, "c": 3})
        after = Snapshot({"a": 1, "b": 2, "c": 4})
        self.assertEqual(diff(before, after), {"a": (None, 1), "c": (3, 4)})

    def test_positions_missing_on_one_side(self):
        before = Snapshot({"a": 1})
        after = Snapshot({"b": 2})
        self.assertEqual(diff(before, after), {"a": (1, None), "b": (None, 2)})

    def test_snapshot_is_independent_of_puzzle(self):
        board = NQueens(4)
        snap = Snapshot.of(board)
        board.assign(0, 1)
        self.assertIsNone(snap[0])
        self.assertEqual(diff(snap, board), {0: (None, 1)})

    def test_snapshot_is_read_only(self):
        snap = Snapshot({"a": 1})
        with self.assertRaises(TypeError):
            snap["a"] = 2

    def test_puzzle_without_snapshot(self):
        class Bare:
            pass

        with self.assertRaises(TypeError):
            Snapshot.of(Bare())

    def test_render(self):
        self.assertEqual(render_diff({}), "No changes.")
        self.assertEqual(render_diff({(0, 1): (None, 7)}), "(0, 1): . -> 7")


class CapabilityTests(unittest.TestCase):

    def test_reference_puzzles_satisfy_protocols(self):
        for puzzle in (NQueens(4), Sudoku(EXAMPLE1), Knapsack([], 0, 0)):
            self.assertIsInstance(puzzle, Puzzle)
            self.assertIsInstance(puzzle, SupportsSnapshot)

    def test_sudoku_parsing(self):
        text = "".join(str(v) for row in EXAMPLE1 for v in row)
        self.assertEqual(Sudoku.from_string(text).slots, [list(row) for row in EXAMPLE1])
        with self.assertRaises(ValueError):
            Sudoku.from_string("123")

    def test_unknown_strategy(self):
        with self.assertRaises(ValueError):
            NQueens(4, "random")
        with self.assertRaises(ValueError):
            Sudoku(EXAMPLE1, "random")


if __name__ == "__main__":
    unittest.main()
