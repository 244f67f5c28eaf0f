"""
Configuration loading and validation for traversal simulation.

YAML layout:

    simulation:
      runs: 100
      max_steps_per_run: 200
      speed: 1.5
      fast_mode: false
      seed: 42
      base_interval_ms: 500
"""

import math
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional, Tuple

import yaml

from ..models.exceptions import InvalidConfigError

SPEED_MIN = 0.25
SPEED_MAX = 3.0


def clamp_speed(speed: float) -> float:
    """Clamp an animation speed multiplier to [0.25, 3]."""
    return min(SPEED_MAX, max(SPEED_MIN, float(speed)))


def normalize_runs(runs: float) -> int:
    """Floor a requested run count and keep it at least 1."""
    return max(1, int(math.floor(runs)))


# BOOLS ARE REJECTED WHERE A NUMBER IS EXPECTED
def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass
class SimulationConfig:
    """Traversal simulation settings."""
    runs: int = 20
    max_steps_per_run: int = 200
    speed: float = 1.0
    fast_mode: bool = False
    seed: Optional[int] = None
    base_interval_ms: float = 500.0

    def validate(self) -> Tuple[bool, Optional[str]]:
        if not _is_int(self.runs) or self.runs < 1:
            return False, "runs must be a positive integer"
        if not _is_int(self.max_steps_per_run) or self.max_steps_per_run < 1:
            return False, "max_steps_per_run must be a positive integer"
        if not _is_number(self.speed) or not (SPEED_MIN <= self.speed <= SPEED_MAX):
            return False, f"speed must be a number within [{SPEED_MIN}, {SPEED_MAX}]"
        if not isinstance(self.fast_mode, bool):
            return False, "fast_mode must be true or false"
        if self.seed is not None and (not _is_int(self.seed) or self.seed < 0):
            return False, "seed must be a non-negative integer"
        if not _is_number(self.base_interval_ms) or self.base_interval_ms <= 0:
            return False, "base_interval_ms must be a positive number"
        return True, None

    @property
    def tick_interval_s(self) -> float:
        """Delay between stepwise ticks: base interval divided by the speed multiplier."""
        return (self.base_interval_ms / 1000.0) / clamp_speed(self.speed)

    def to_dict(self) -> dict:
        return asdict(self)


def load_config(path: Path) -> SimulationConfig:
    """
    Load and validate a simulation config from a YAML file.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        InvalidConfigError: If the file content is not a valid config.
    """
    with open(path, "r") as f:
        raw = yaml.safe_load(f)

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise InvalidConfigError(f"{path}: top level must be a mapping")

    section = raw.get("simulation", {})
    if not isinstance(section, dict):
        raise InvalidConfigError(f"{path}: 'simulation' must be a mapping")

    known = set(SimulationConfig.__dataclass_fields__)
    unknown = sorted(set(section) - known)
    if unknown:
        raise InvalidConfigError(f"{path}: unknown simulation keys: {', '.join(unknown)}")

    config = SimulationConfig(**section)
    is_valid, error = config.validate()
    if not is_valid:
        raise InvalidConfigError(f"{path}: {error}")
    return config
