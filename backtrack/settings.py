"""Solver configuration.

``SolveSettings`` is an immutable bundle read once at the start of a solve.
Options:

- debug: emit a step record for every guess and retry.
- step_delay: seconds to pause after each emitted step (0 = no pause). Only
    used to slow the trace down for a human reader.
- solve_simple_steps: run ``propagate_forced`` to a fixpoint before every
    branch, which usually cuts the number of guesses and the trace volume.
- difference: after a successful debug solve, print the cells the solver
    filled in.

The ``with_*`` helpers return modified copies so settings can be chained:

    settings = SolveSettings().with_debug(True).with_sleep_ms(500)
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping


@dataclass(frozen=True)
class SolveSettings:
    debug: bool = False
    step_delay: float = 0.0
    solve_simple_steps: bool = True
    difference: bool = False

    def __post_init__(self) -> None:
        if self.step_delay < 0:
            raise ValueError(f"step_delay must be >= 0, got {self.step_delay}")

    def with_debug(self, debug: bool) -> "SolveSettings":
        return replace(self, debug=debug)

    def with_step_delay(self, seconds: float) -> "SolveSettings":
        return replace(self, step_delay=seconds)

    def with_sleep_ms(self, milliseconds: int) -> "SolveSettings":
        return replace(self, step_delay=milliseconds / 1000.0)

    def with_solve_simple_steps(self, enabled: bool) -> "SolveSettings":
        return replace(self, solve_simple_steps=enabled)

    def with_difference(self, difference: bool) -> "SolveSettings":
        return replace(self, difference=difference)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "SolveSettings":
        """Build settings from a configuration section.

        Parameters
        ----------
        values : Mapping[str, Any]
            Keys ``debug``, ``solve_simple_steps``, ``difference`` and either
            ``step_delay`` (seconds) or ``sleep_ms`` (milliseconds). Missing
            keys keep their defaults; unknown keys are rejected so typos in
            ``config.json`` surface early.

        Raises
        ------
        ValueError
            On unknown keys, or when both delay keys are given.
        """
        known = {"debug", "step_delay", "sleep_ms", "solve_simple_steps", "difference"}
        unknown = set(values).difference(known)
        if unknown:
            raise ValueError("Unknown solve settings: " + ", ".join(sorted(unknown)))
        if "step_delay" in values and "sleep_ms" in values:
            raise ValueError("Use either step_delay or sleep_ms, not both.")

        defaults = cls()
        if "sleep_ms" in values:
            delay = float(values["sleep_ms"]) / 1000.0
        else:
            delay = float(values.get("step_delay", defaults.step_delay))
        return cls(
            debug=bool(values.get("debug", defaults.debug)),
            step_delay=delay,
            solve_simple_steps=bool(values.get("solve_simple_steps", defaults.solve_simple_steps)),
            difference=bool(values.get("difference", defaults.difference)),
        )
