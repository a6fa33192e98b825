"""Quick regression tests for the solver and benchmark pipeline."""

from contextlib import redirect_stdout
import io
from pathlib import Path
import sys
import unittest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backtrack.analysis import cli


class QuickRegressionTests(unittest.TestCase):
    """Verify that the lightweight regression checks pass."""

    def test_puzzles_and_csv_generation(self):
        """Ensure every reference puzzle solves and CSV export succeeds."""
        out = io.StringIO()
        with redirect_stdout(out):
            cli.run_quick_regression_tests()
        self.assertIn("Quick regression tests passed.", out.getvalue())


if __name__ == "__main__":
    unittest.main()
