"""Synthetic scenario generators."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from roomsearch.scenario.contract import Incompatibility, Room, Scenario


@dataclass
class SyntheticScenarioSpec:
    """Configuration for generating regular synthetic scenarios.

    Every ``incompatibility_stride``-th student is declared incompatible with the next student,
    i.e. pairs ``(0, 1)``, ``(3, 4)``, ``(6, 7)`` ... for the default stride of 3.
    """

    num_rooms: int = 10
    room_capacity: int = 10
    num_students: int = 100
    incompatibility_stride: int = 3
    iterations_per_worker: int = 100_000
    name: str = "synthetic-basic"


def generate_basic(spec: SyntheticScenarioSpec) -> Scenario:
    """Generate a scenario with identical rooms and evenly spaced incompatible pairs."""

    if spec.incompatibility_stride < 1:
        raise ValueError("incompatibility_stride must be >= 1")
    rooms = [Room(capacity=spec.room_capacity) for _ in range(spec.num_rooms)]
    incompatibilities = [
        Incompatibility(student1=i, student2=i + 1)
        for i in range(0, spec.num_students - 1, spec.incompatibility_stride)
    ]
    return Scenario(
        name=spec.name,
        num_students=spec.num_students,
        rooms=rooms,
        incompatibilities=incompatibilities,
        iterations_per_worker=spec.iterations_per_worker,
    )


def build_default_scenario() -> Scenario:
    """Return the built-in demonstration problem (10 rooms x 10 seats, 100 students)."""

    return generate_basic(SyntheticScenarioSpec(name="default"))


def write_scenario_yaml(scenario: Scenario, path: Path) -> Path:
    """Persist ``scenario`` in the layout understood by :func:`roomsearch.scenario.io.load_scenario`."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload: dict[str, object] = {
        "name": scenario.name,
        "num_students": scenario.num_students,
        "iterations_per_worker": scenario.iterations_per_worker,
        "rooms": [room.model_dump(exclude_none=True) for room in scenario.rooms],
        "incompatibilities": [list(pair.as_pair()) for pair in scenario.incompatibilities],
    }
    with path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(payload, handle, sort_keys=False)
    return path
