"""
Edge profiling configuration.

Simulation settings and their YAML loader.
"""

from .simulation_config import (
    SimulationConfig,
    load_config,
    clamp_speed,
    normalize_runs,
    SPEED_MIN,
    SPEED_MAX,
)

__all__ = ["SimulationConfig", "load_config", "clamp_speed", "normalize_runs", "SPEED_MIN", "SPEED_MAX"]
