"""Pydantic models describing roomsearch scenario inputs."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class Room(BaseModel):
    """Room that students can be assigned to.

    Attributes
    ----------
    capacity:
        Number of students the room holds before overflow penalties apply. Zero is legal;
        every occupant of a zero-capacity room counts as overflow.
    id:
        Optional label used in reports. Solvers only ever refer to rooms by index.
    """

    model_config = ConfigDict(frozen=True)

    capacity: int
    id: str | None = None

    @field_validator("capacity")
    @classmethod
    def _capacity_non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("Room.capacity must be non-negative")
        return value


class Incompatibility(BaseModel):
    """Unordered pair of students that should not share a room."""

    model_config = ConfigDict(frozen=True)

    student1: int
    student2: int

    @field_validator("student1", "student2")
    @classmethod
    def _index_non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("Incompatibility student indices must be non-negative")
        return value

    def as_pair(self) -> tuple[int, int]:
        return self.student1, self.student2


class Scenario(BaseModel):
    """Static problem definition: students, rooms, and incompatible pairs.

    Attributes
    ----------
    name:
        Human-readable scenario name (surfaced in telemetry).
    num_students:
        Number of students to place. Students are addressed by index ``0..num_students-1``.
    rooms:
        Rooms available to the search. At least one room is required.
    incompatibilities:
        Student pairs penalised when co-located. Duplicate pairs each incur their own penalty.
    iterations_per_worker:
        Default number of random candidates each worker draws.
    """

    name: str = "roomsearch"
    num_students: int
    rooms: list[Room]
    incompatibilities: list[Incompatibility] = []
    iterations_per_worker: int = 100_000

    @field_validator("num_students", "iterations_per_worker")
    @classmethod
    def _non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("Scenario counts must be non-negative")
        return value

    @model_validator(mode="after")
    def _cross_validate(self) -> Scenario:
        if not self.rooms:
            raise ValueError("Scenario must define at least one room")
        for pair in self.incompatibilities:
            for student in pair.as_pair():
                if student >= self.num_students:
                    raise ValueError(
                        f"Incompatibility ({pair.student1}, {pair.student2}) references "
                        f"student {student} outside num_students={self.num_students}"
                    )
        return self

    def room_capacities(self) -> list[int]:
        return [room.capacity for room in self.rooms]


class Problem(BaseModel):
    """Runtime representation of a scenario shared read-only by every search worker.

    ``Problem.from_scenario`` is the canonical constructor. It flattens rooms and
    incompatibilities into plain tuples so the evaluation loop never touches model objects.

    Attributes
    ----------
    scenario:
        Back-reference to the source :class:`Scenario`.
    capacities:
        Capacity of each room, indexed by room index.
    pairs:
        ``(student1, student2)`` tuples for every incompatibility, duplicates preserved.
    """

    model_config = ConfigDict(frozen=True)

    scenario: Scenario
    capacities: tuple[int, ...]
    pairs: tuple[tuple[int, int], ...]

    @classmethod
    def from_scenario(cls, scenario: Scenario) -> Problem:
        return cls(
            scenario=scenario,
            capacities=tuple(scenario.room_capacities()),
            pairs=tuple(pair.as_pair() for pair in scenario.incompatibilities),
        )

    @property
    def num_students(self) -> int:
        return self.scenario.num_students

    @property
    def num_rooms(self) -> int:
        return len(self.capacities)


__all__ = ["Room", "Incompatibility", "Scenario", "Problem"]
