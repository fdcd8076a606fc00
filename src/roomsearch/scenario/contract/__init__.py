"""Scenario contract models (Pydantic schemas, validators)."""

from .models import Incompatibility, Problem, Room, Scenario

__all__ = ["Room", "Incompatibility", "Scenario", "Problem"]
