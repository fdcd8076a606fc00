"""Scenario IO helpers."""

from .loaders import load_scenario, scenario_from_mapping

__all__ = ["load_scenario", "scenario_from_mapping"]
