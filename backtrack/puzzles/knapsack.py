"""0/1 knapsack feasibility as a backtracking puzzle.

Pick a subset of items whose total weight stays within ``capacity`` and whose
total value reaches ``target``. Positions are item indices, values are
booleans: True selects the item, False rejects it. Selecting is tried first.

Legality
--------
- Selecting an item is legal only while its weight fits the remaining
    capacity.
- Rejecting an item is legal only while the target is still reachable
    without it, i.e. the value chosen so far plus every other undecided
    item's value meets the target.

So ``count_candidates`` drops to 0 when neither choice works, and
``is_dead_end`` reports such an item, sending the search back up. Forced
propagation rejects items that no longer fit and selects items whose
rejection would make the target unreachable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ..trail import Trail


@dataclass(frozen=True)
class Item:
    name: str
    weight: int
    value: int


class Knapsack:
    def __init__(self, items: Sequence[Item], capacity: int, target: int):
        if capacity < 0:
            raise ValueError(f"Capacity must be >= 0, got {capacity}")
        self.items = list(items)
        self.capacity = capacity
        self.target = target
        self.chosen: List[Optional[bool]] = [None] * len(self.items)
        self.trail = Trail()

    # ------------- Capability -------------------------------------------------

    def count_candidates(self, index: int) -> int:
        return len(self.options(index))

    def candidate(self, index: int, option: int) -> bool:
        return self.options(index)[option]

    def assign(self, index: int, selected: bool) -> None:
        self.chosen[index] = selected
        self.trail.mark(index)

    def unassign(self, index: int) -> None:
        for undone in self.trail.unwind(index):
            self.chosen[undone] = None

    def next_unresolved_position(self) -> Optional[int]:
        for index, choice in enumerate(self.chosen):
            if choice is None:
                return index
        return None

    def propagate_forced(self) -> bool:
        changed = False
        for index, choice in enumerate(self.chosen):
            if choice is not None:
                continue
            options = self.options(index)
            if len(options) == 1:
                self.chosen[index] = options[0]
                self.trail.record(index)
                changed = True
        return changed

    def is_dead_end(self) -> bool:
        if self.used_weight() > self.capacity or self.optimistic_value() < self.target:
            return True
        return any(choice is None and not self.options(index) for index, choice in enumerate(self.chosen))

    def snapshot(self) -> Dict[int, Optional[bool]]:
        return dict(enumerate(self.chosen))

    def render(self) -> str:
        marks = {True: "x", False: "-", None: "?"}
        cells = " ".join(f"{item.name}[{marks[choice]}]" for item, choice in zip(self.items, self.chosen))
        return f"{cells}  weight {self.used_weight()}/{self.capacity} value {self.selected_value()}/{self.target}"

    # ------------- Helpers ----------------------------------------------------

    def options(self, index: int) -> List[bool]:
        item = self.items[index]
        options: List[bool] = []
        if self.used_weight() + item.weight <= self.capacity:
            options.append(True)
        if self.optimistic_value() - item.value >= self.target:
            options.append(False)
        return options

    def used_weight(self) -> int:
        return sum(item.weight for item, choice in zip(self.items, self.chosen) if choice)

    def selected_value(self) -> int:
        return sum(item.value for item, choice in zip(self.items, self.chosen) if choice)

    def optimistic_value(self) -> int:
        """Value reachable if every undecided item were selected."""
        return sum(item.value for item, choice in zip(self.items, self.chosen) if choice is not False)

    def selection(self) -> List[str]:
        return [item.name for item, choice in zip(self.items, self.chosen) if choice]
