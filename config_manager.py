"""Configuration management for the backtracking solver and its benchmarks.

This module provides a thin, explicit wrapper around a JSON configuration file
to centralize solver settings, benchmark sweeps and strategy selections.

File format (high-level)
------------------------
- solve_settings: keyword arguments for ``SolveSettings.from_mapping``
  (debug, sleep_ms or step_delay, solve_simple_steps, difference).
- benchmark_settings: N values, Sudoku examples, runs per case, simple-step
  modes and output directory.
- strategies: mapping puzzle name -> list of branching heuristics to run
  (e.g., {"nqueens": ["first", "mcv"]}).

All methods return Python native types; the class does not validate semantics
beyond presence of keys to keep responsibilities minimal.
"""
import json
from pathlib import Path


class ConfigManager:
    """Load, query, and persist configuration.

    Parameters
    ----------
    config_path : str | os.PathLike, default "config.json"
        Path to the configuration file.
    """

    def __init__(self, config_path="config.json"):
        self.config_path = Path(config_path)
        self.config = self.load_config()

    def load_config(self):
        """Load and parse the JSON configuration file.

        Returns
        -------
        dict
            Root configuration object.
        """
        if not self.config_path.exists():
            raise FileNotFoundError(
                f"Configuration file not found: {self.config_path}\n"
                f"Create it or use the default config.json template"
            )

        with open(self.config_path, 'r') as f:
            return json.load(f)

    def save_config(self):
        """Persist the current in-memory configuration to disk."""
        with open(self.config_path, 'w') as f:
            json.dump(self.config, f, indent=2)

    def get_solve_settings(self):
        """Return the raw solver settings section."""
        return self.config.get("solve_settings", {})

    def get_benchmark_settings(self):
        """Return benchmark sweep settings (sizes, examples, runs, output dir)."""
        return self.config.get("benchmark_settings", {})

    def get_strategies(self, puzzle=None):
        """Return configured branching strategies.

        Parameters
        ----------
        puzzle : str | None
            If provided, return the list for that puzzle name (empty if not
            configured); otherwise return the entire mapping.
        """
        strategies = self.config.get("strategies", {})
        if puzzle:
            return strategies.get(puzzle, [])
        return strategies

    def update_setting(self, section, key, value):
        """Update a specific setting and persist the change immediately."""
        if section not in self.config:
            self.config[section] = {}
        self.config[section][key] = value
        self.save_config()
        print(f"Setting {section}.{key} saved to {self.config_path}")
