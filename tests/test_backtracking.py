"""Search behaviour of BacktrackSolver on the reference puzzles."""

from pathlib import Path
import sys
import unittest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backtrack import (
    BacktrackSolver,
    PuzzleContractError,
    SolveOutcome,
    SolveSettings,
    SolverState,
    StepTracer,
    diff,
    solve,
)
from backtrack.puzzles import EXAMPLE1, EXAMPLE2, Item, Knapsack, NQueens, Sudoku, is_valid_solution

NO_SIMPLE = SolveSettings(solve_simple_steps=False)


def quiet_tracer(step_delay=0.0):
    lines = []
    sleeps = []
    tracer = StepTracer(step_delay=step_delay, sink=lines.append, sleep=sleeps.append)
    return tracer, lines, sleeps


class NQueensSearchTests(unittest.TestCase):

    def test_four_queens_first_solution(self):
        board = NQueens(4)
        outcome = solve(board, NO_SIMPLE)
        self.assertIs(outcome, SolveOutcome.SUCCEEDED)
        self.assertEqual(board.board(), [1, 3, 0, 2])

    def test_four_queens_diff_against_empty_board(self):
        board = NQueens(4)
        solver = BacktrackSolver(board, NO_SIMPLE)
        solver.run()
        changes = solver.difference()
        self.assertEqual(len(changes), 4)
        self.assertEqual(changes[0], (None, 1))
        self.assertEqual(changes[3], (None, 2))

    def test_eight_queens_all_strategies_valid(self):
        for strategy in ("first", "mcv"):
            for simple in (True, False):
                with self.subTest(strategy=strategy, simple=simple):
                    board = NQueens(8, strategy)
                    outcome = solve(board, SolveSettings(solve_simple_steps=simple))
                    self.assertIs(outcome, SolveOutcome.SUCCEEDED)
                    self.assertTrue(is_valid_solution(board.board()))
                    self.assertFalse(board.is_dead_end())

    def test_unsolvable_board_fails_with_empty_stack(self):
        for size in (2, 3):
            for settings in (NO_SIMPLE, SolveSettings()):
                with self.subTest(size=size, simple=settings.solve_simple_steps):
                    board = NQueens(size)
                    solver = BacktrackSolver(board, settings)
                    report = solver.run()
                    self.assertIs(report.outcome, SolveOutcome.FAILED)
                    self.assertEqual(len(solver.stack), 0)
                    self.assertEqual(board.board(), [-1] * size)
                    self.assertEqual(len(board.trail), 0)

    def test_one_queen(self):
        board = NQueens(1)
        self.assertIs(solve(board), SolveOutcome.SUCCEEDED)
        self.assertEqual(board.board(), [0])


class SudokuSearchTests(unittest.TestCase):

    def test_solves_examples(self):
        for grid in (EXAMPLE1, EXAMPLE2):
            puzzle = Sudoku(grid)
            self.assertIs(solve(puzzle), SolveOutcome.SUCCEEDED)
            self.assertTrue(puzzle.is_solved())
            self.assertFalse(puzzle.is_dead_end())

    def test_prefilled_cells_are_kept(self):
        puzzle = Sudoku(EXAMPLE1)
        solve(puzzle)
        for y in range(9):
            for x in range(9):
                if EXAMPLE1[y][x]:
                    self.assertEqual(puzzle.slots[y][x], EXAMPLE1[y][x])

    def test_duplicate_in_row_fails_without_guessing(self):
        grid = [list(row) for row in EXAMPLE1]
        grid[0][0] = 4  # row 0 already holds a 4
        puzzle = Sudoku(grid)
        solver = BacktrackSolver(puzzle)
        report = solver.run()
        self.assertIs(report.outcome, SolveOutcome.FAILED)
        self.assertEqual(report.iterations, 0)
        self.assertEqual(len(solver.stack), 0)

    def test_simple_steps_reduce_guesses(self):
        empty = sum(1 for row in EXAMPLE1 for v in row if v == 0)
        with_simple = BacktrackSolver(Sudoku(EXAMPLE1), SolveSettings(solve_simple_steps=True)).run()
        without = BacktrackSolver(Sudoku(EXAMPLE1), NO_SIMPLE).run()
        self.assertGreaterEqual(without.iterations, empty)
        self.assertLess(with_simple.iterations, without.iterations)

    def test_diff_excludes_prefilled_cells(self):
        puzzle = Sudoku(EXAMPLE1)
        solver = BacktrackSolver(puzzle)
        solver.run()
        changes = solver.difference()
        empty = {(x, y) for y in range(9) for x in range(9) if EXAMPLE1[y][x] == 0}
        self.assertEqual(set(changes), empty)
        for (old, new) in changes.values():
            self.assertIsNone(old)
            self.assertIn(new, range(1, 10))

    def test_strategy_override(self):
        puzzle = Sudoku(EXAMPLE1, strategy="empty")
        outcome = solve(puzzle, NO_SIMPLE, select=Sudoku.find_freq_empty)
        self.assertIs(outcome, SolveOutcome.SUCCEEDED)
        self.assertTrue(puzzle.is_solved())


class KnapsackSearchTests(unittest.TestCase):

    ITEMS = [
        Item("map", 9, 150),
        Item("compass", 13, 35),
        Item("water", 153, 200),
        Item("sandwich", 50, 160),
        Item("glucose", 15, 60),
        Item("tin", 68, 45),
        Item("banana", 27, 60),
        Item("apple", 39, 40),
    ]

    def test_dead_ends_backtrack_to_success(self):
        for settings in (NO_SIMPLE, SolveSettings()):
            with self.subTest(simple=settings.solve_simple_steps):
                bag = Knapsack(self.ITEMS, capacity=200, target=500)
                tracer, _, _ = quiet_tracer()
                report = BacktrackSolver(bag, settings.with_debug(True), tracer=tracer).run()
                self.assertTrue(report.succeeded)
                self.assertTrue(any(record.retry for record in tracer.records))
                self.assertGreater(report.iterations, report.max_depth)
                self.assertLessEqual(bag.used_weight(), 200)
                self.assertGreaterEqual(bag.selected_value(), 500)

    def test_unreachable_target_fails(self):
        bag = Knapsack(self.ITEMS, capacity=200, target=10_000)
        self.assertIs(solve(bag, NO_SIMPLE), SolveOutcome.FAILED)
        self.assertEqual(bag.chosen, [None] * len(self.ITEMS))


class UnassignTests(unittest.TestCase):

    def test_assign_unassign_restores_candidates(self):
        puzzle = Sudoku(EXAMPLE2)
        before = {(x, y): puzzle.possible((x, y)) for y in range(9) for x in range(9)}
        pos = puzzle.find_min_empty()
        puzzle.assign(pos, puzzle.candidate(pos, 0))
        puzzle.propagate_forced()
        puzzle.unassign(pos)
        after = {(x, y): puzzle.possible((x, y)) for y in range(9) for x in range(9)}
        self.assertEqual(before, after)

    def test_nqueens_unassign_restores_masks(self):
        board = NQueens(6)
        masks = (list(board.row_used), list(board.diag1_used), list(board.diag2_used))
        board.assign(2, board.candidate(2, 1))
        board.unassign(2)
        self.assertEqual((board.row_used, board.diag1_used, board.diag2_used), masks)
        self.assertEqual([board.count_candidates(c) for c in range(6)], [6] * 6)


class DebugTraceTests(unittest.TestCase):

    def test_trace_lines_for_four_queens(self):
        tracer, _, _ = quiet_tracer()
        solver = BacktrackSolver(NQueens(4), NO_SIMPLE.with_debug(True), tracer=tracer)
        solver.run()
        lines = tracer.lines()
        self.assertEqual(lines[0], "Guess 0, 0 depth 1 1/4")
        self.assertEqual(lines[1], "Guess 1, 2 depth 2 1/2")
        self.assertEqual(lines[2], "Guess 1, 3 depth 2 2/2")
        self.assertEqual(lines[3], "Guess 2, 1 depth 3 1/1")
        self.assertEqual(lines[4], "Guess 0, 1 depth 1 2/4")
        self.assertTrue(tracer.records[2].retry)
        self.assertFalse(tracer.records[3].retry)

    def test_no_trace_without_debug(self):
        tracer, lines, _ = quiet_tracer()
        BacktrackSolver(NQueens(4), NO_SIMPLE, tracer=tracer).run()
        self.assertEqual(lines, [])

    def test_step_delay_sleeps_after_each_step(self):
        tracer, _, sleeps = quiet_tracer(step_delay=0.25)
        BacktrackSolver(NQueens(5), NO_SIMPLE.with_debug(True), tracer=tracer).run()
        self.assertEqual(len(sleeps), len(tracer.records))
        self.assertTrue(all(s == 0.25 for s in sleeps))

    def test_board_rendered_after_each_step(self):
        tracer, lines, _ = quiet_tracer()
        BacktrackSolver(NQueens(4), NO_SIMPLE.with_debug(True), tracer=tracer).run()
        self.assertEqual(len(lines), 2 * len(tracer.records))
        self.assertIn("Q", lines[1])

    def test_difference_printed_after_debug_solve(self):
        tracer, lines, _ = quiet_tracer()
        settings = NO_SIMPLE.with_debug(True).with_difference(True)
        BacktrackSolver(NQueens(4), settings, tracer=tracer).run()
        self.assertIn("Difference:", lines)
        self.assertEqual(lines[-1].splitlines()[0], "0: . -> 1")

    def test_determinism(self):
        runs = []
        for _ in range(2):
            tracer, _, _ = quiet_tracer()
            puzzle = Sudoku(EXAMPLE2)
            BacktrackSolver(puzzle, SolveSettings(debug=True), tracer=tracer).run()
            runs.append((tracer.lines(), puzzle.slots))
        self.assertEqual(runs[0], runs[1])


class StateMachineTests(unittest.TestCase):

    def test_first_transitions(self):
        solver = BacktrackSolver(NQueens(4), NO_SIMPLE)
        self.assertIs(solver.state, SolverState.PROPAGATING)
        self.assertIs(solver.step(), SolverState.BRANCHING)
        self.assertIs(solver.step(), SolverState.ADVANCING)
        self.assertEqual(solver.stack.depth, 1)
        self.assertIs(solver.step(), SolverState.PROPAGATING)

    def test_terminal_state_is_sticky(self):
        solver = BacktrackSolver(NQueens(4), NO_SIMPLE)
        solver.run()
        self.assertIs(solver.step(), SolverState.SUCCEEDED)
        self.assertIs(solver.outcome, SolveOutcome.SUCCEEDED)

    def test_outcome_unavailable_mid_search(self):
        solver = BacktrackSolver(NQueens(4))
        with self.assertRaises(RuntimeError):
            solver.outcome

    def test_report_counters(self):
        report = BacktrackSolver(NQueens(6), NO_SIMPLE).run()
        self.assertTrue(report.succeeded)
        self.assertEqual(report.max_depth, 6)
        self.assertGreater(report.iterations, 6)
        self.assertGreaterEqual(report.elapsed, 0.0)


class BrokenUnassign(NQueens):
    """Forgets to clear the queen, so the retry sees a different state."""

    def unassign(self, column):
        self.trail.unwind(column)


class NegativeCount(NQueens):
    def count_candidates(self, column):
        return -1


class OverCount(NQueens):
    """Reports one more candidate than ``candidate`` can produce."""

    def count_candidates(self, column):
        return len(self.available_rows(column)) + 1


class ContractViolationTests(unittest.TestCase):

    def test_broken_unassign_is_reported(self):
        with self.assertRaises(PuzzleContractError):
            solve(BrokenUnassign(4), NO_SIMPLE)

    def test_negative_count_is_reported(self):
        with self.assertRaises(PuzzleContractError):
            solve(NegativeCount(4), NO_SIMPLE)

    def test_overreported_count_is_reported(self):
        with self.assertRaises(PuzzleContractError) as ctx:
            solve(OverCount(3), NO_SIMPLE)
        self.assertIsInstance(ctx.exception.__cause__, IndexError)


if __name__ == "__main__":
    unittest.main()
