"""Penalty evaluation for student-to-room assignments."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from roomsearch.scenario.contract import Problem

__all__ = [
    "OVERFLOW_PENALTY",
    "INCOMPATIBILITY_PENALTY",
    "PenaltyBreakdown",
    "evaluate_assignment",
    "evaluate_problem",
    "penalty_breakdown",
]

OVERFLOW_PENALTY = 10
INCOMPATIBILITY_PENALTY = 5


def _room_usage(assignment: Sequence[int], num_rooms: int) -> list[int]:
    usage = [0] * num_rooms
    for room in assignment:
        # out-of-range rooms are ignored
        if 0 <= room < num_rooms:
            usage[room] += 1
    return usage


def evaluate_assignment(
    assignment: Sequence[int],
    capacities: Sequence[int],
    pairs: Sequence[tuple[int, int]],
) -> int:
    """Score an assignment; lower is better and ``0`` means every constraint holds.

    Parameters
    ----------
    assignment : Sequence[int]
        Room index per student (``assignment[i]`` is the room of student ``i``).
    capacities : Sequence[int]
        Capacity per room index.
    pairs : Sequence[tuple[int, int]]
        Incompatible student pairs. Duplicates each add their own penalty.

    Returns
    -------
    int
        ``OVERFLOW_PENALTY`` per student above a room's capacity plus
        ``INCOMPATIBILITY_PENALTY`` per incompatible pair sharing a room.
    """
    usage = _room_usage(assignment, len(capacities))
    penalty = 0
    for used, capacity in zip(usage, capacities):
        if used > capacity:
            penalty += (used - capacity) * OVERFLOW_PENALTY
    for student1, student2 in pairs:
        if assignment[student1] == assignment[student2]:
            penalty += INCOMPATIBILITY_PENALTY
    return penalty


def evaluate_problem(pb: Problem, assignment: Sequence[int]) -> int:
    """Evaluate ``assignment`` against the rooms and incompatibilities of ``pb``."""
    return evaluate_assignment(assignment, pb.capacities, pb.pairs)


@dataclass(frozen=True, slots=True)
class PenaltyBreakdown:
    """Penalty split into its components for reporting."""

    overflow: int
    incompatibility: int
    occupancy: tuple[int, ...]
    violated_pairs: tuple[tuple[int, int], ...]

    @property
    def total(self) -> int:
        return self.overflow + self.incompatibility


def penalty_breakdown(pb: Problem, assignment: Sequence[int]) -> PenaltyBreakdown:
    """Return the overflow/incompatibility split and per-room occupancy of ``assignment``."""
    usage = _room_usage(assignment, pb.num_rooms)
    overflow = sum(
        (used - capacity) * OVERFLOW_PENALTY
        for used, capacity in zip(usage, pb.capacities)
        if used > capacity
    )
    violated = tuple(
        (student1, student2)
        for student1, student2 in pb.pairs
        if assignment[student1] == assignment[student2]
    )
    return PenaltyBreakdown(
        overflow=overflow,
        incompatibility=len(violated) * INCOMPATIBILITY_PENALTY,
        occupancy=tuple(usage),
        violated_pairs=violated,
    )
