"""Scenario loading utilities (YAML)."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from roomsearch.core.errors import RoomSearchValueError
from roomsearch.scenario.contract.models import Scenario

__all__ = ["load_scenario", "scenario_from_mapping"]


def _normalise_rooms(rows: Any) -> list[dict[str, Any]]:
    if not isinstance(rows, list):
        raise RoomSearchValueError("Scenario 'rooms' must be a list")
    rooms: list[dict[str, Any]] = []
    for idx, row in enumerate(rows):
        if isinstance(row, Mapping):
            rooms.append(dict(row))
        elif isinstance(row, int) and not isinstance(row, bool):
            rooms.append({"capacity": row})
        else:
            raise RoomSearchValueError(
                f"Room entry {idx} must be a mapping with 'capacity' or a bare integer (got {row!r})"
            )
    return rooms


def _normalise_incompatibilities(rows: Any) -> list[dict[str, Any]]:
    if rows is None:
        return []
    if not isinstance(rows, list):
        raise RoomSearchValueError("Scenario 'incompatibilities' must be a list")
    pairs: list[dict[str, Any]] = []
    for idx, row in enumerate(rows):
        if isinstance(row, Mapping):
            pairs.append(dict(row))
        elif isinstance(row, (list, tuple)) and len(row) == 2:
            pairs.append({"student1": row[0], "student2": row[1]})
        else:
            raise RoomSearchValueError(
                f"Incompatibility entry {idx} must be a mapping or a two-item list (got {row!r})"
            )
    return pairs


def scenario_from_mapping(data: Mapping[str, Any], *, default_name: str | None = None) -> Scenario:
    """Validate a parsed scenario document and return a :class:`Scenario`."""
    if "rooms" not in data:
        raise RoomSearchValueError("Scenario is missing required key 'rooms'")
    if "num_students" not in data:
        raise RoomSearchValueError("Scenario is missing required key 'num_students'")
    payload = dict(data)
    payload["rooms"] = _normalise_rooms(payload["rooms"])
    payload["incompatibilities"] = _normalise_incompatibilities(payload.get("incompatibilities"))
    if not payload.get("name") and default_name:
        payload["name"] = default_name
    return Scenario.model_validate(payload)


def load_scenario(path: str | Path) -> Scenario:
    """Load a scenario YAML file.

    The document holds ``name``, ``num_students``, ``iterations_per_worker``, ``rooms`` and
    ``incompatibilities``. Rooms may be written as ``{capacity: 10}`` mappings or bare integers;
    incompatibilities as ``{student1: 0, student2: 1}`` mappings or ``[0, 1]`` lists.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)
    with path.open("r", encoding="utf-8") as handle:
        try:
            data = yaml.safe_load(handle)
        except yaml.YAMLError as exc:
            raise RoomSearchValueError(f"Scenario file {path} is not valid YAML: {exc}") from exc
    if not isinstance(data, Mapping):
        raise RoomSearchValueError(f"Scenario file {path} must contain a YAML mapping")
    return scenario_from_mapping(data, default_name=path.stem)
