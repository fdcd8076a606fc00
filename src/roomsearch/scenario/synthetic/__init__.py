"""Synthetic scenario generators."""

from .generator import (
    SyntheticScenarioSpec,
    build_default_scenario,
    generate_basic,
    write_scenario_yaml,
)

__all__ = [
    "SyntheticScenarioSpec",
    "build_default_scenario",
    "generate_basic",
    "write_scenario_yaml",
]
