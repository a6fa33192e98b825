"""Step trace emitted while the solver runs with ``debug`` enabled.

A step is emitted for every fresh guess and for every retry of the next
candidate after a backtrack. Each record carries the position, the value
tried, its candidate index, the number of candidates known at that position
and the guess-stack depth. Rendered form:

    Guess (4, 0), 7 depth 3 2/4

meaning: at depth 3, position (4, 0) is trying value 7, the 2nd of 4
candidates. When the puzzle can render itself the board follows the line.

After emitting, the tracer sleeps for ``step_delay`` seconds if it is
non-zero. The pause blocks the only thread of execution; it never changes
search order.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .puzzle import Position, SupportsRender, Value


@dataclass(frozen=True)
class StepRecord:
    position: Position
    value: Value
    index: int
    total: int
    depth: int
    retry: bool = False

    def format(self) -> str:
        return f"Guess {self.position}, {self.value} depth {self.depth} {self.index + 1}/{self.total}"


@dataclass
class StepTracer:
    """Collects step records and writes them to ``sink``.

    Parameters
    ----------
    step_delay : float
        Seconds to sleep after each emitted step.
    sink : callable
        Receives each rendered line; defaults to ``print``.
    sleep : callable
        Injected for tests; defaults to ``time.sleep``.
    """

    step_delay: float = 0.0
    sink: Callable[[str], None] = print
    sleep: Callable[[float], None] = time.sleep
    records: List[StepRecord] = field(default_factory=list)

    def emit(self, record: StepRecord, puzzle: Optional[object] = None) -> None:
        self.records.append(record)
        self.sink(record.format())
        if puzzle is not None and isinstance(puzzle, SupportsRender):
            self.sink(puzzle.render())
        if self.step_delay > 0:
            self.sleep(self.step_delay)

    def lines(self) -> List[str]:
        """Rendered step lines, without board drawings."""
        return [record.format() for record in self.records]
