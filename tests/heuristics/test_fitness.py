from __future__ import annotations

import itertools

from roomsearch.optimization.heuristics import (
    INCOMPATIBILITY_PENALTY,
    OVERFLOW_PENALTY,
    evaluate_assignment,
    evaluate_problem,
    penalty_breakdown,
)
from roomsearch.scenario.contract import Incompatibility, Problem, Room, Scenario


def _problem(capacities: list[int], num_students: int, pairs=()) -> Problem:
    scenario = Scenario(
        name="fitness",
        num_students=num_students,
        rooms=[Room(capacity=c) for c in capacities],
        incompatibilities=[Incompatibility(student1=a, student2=b) for a, b in pairs],
    )
    return Problem.from_scenario(scenario)


def test_no_violations_scores_zero():
    assert evaluate_assignment([0, 1, 1], [1, 2], [(0, 1)]) == 0


def test_overflow_penalty_is_linear():
    # four students in a room of capacity 1 -> three extra occupants
    assert evaluate_assignment([0, 0, 0, 0], [1, 5], []) == 3 * OVERFLOW_PENALTY


def test_incompatible_pair_in_same_room():
    assert evaluate_assignment([1, 1, 0], [3, 3], [(0, 1)]) == INCOMPATIBILITY_PENALTY


def test_duplicate_pairs_each_count():
    assert evaluate_assignment([0, 0], [2], [(0, 1), (1, 0), (0, 1)]) == 3 * INCOMPATIBILITY_PENALTY


def test_zero_capacity_room_penalises_every_occupant():
    assert evaluate_assignment([0, 0, 1], [0, 5], []) == 2 * OVERFLOW_PENALTY


def test_combined_penalties():
    # room 0 holds three students with capacity 1, and the pair (0, 2) shares it
    assert evaluate_assignment([0, 0, 0, 1], [1, 1], [(0, 2), (1, 3)]) == 25


def test_empty_assignment_scores_zero():
    assert evaluate_assignment([], [3, 3], []) == 0


def test_out_of_range_rooms_are_ignored():
    assert evaluate_assignment([5, -1, 0], [1], []) == 0
    assert evaluate_assignment([7, 7, 7], [0], []) == 0


def test_evaluate_is_idempotent():
    assignment = [0, 1, 0, 0, 1]
    first = evaluate_assignment(assignment, [2, 2], [(0, 2), (1, 4)])
    second = evaluate_assignment(assignment, [2, 2], [(0, 2), (1, 4)])
    assert first == second
    assert assignment == [0, 1, 0, 0, 1]


def test_relabelling_rooms_with_capacities_preserves_score():
    capacities = [1, 3]
    assignment = [0, 1, 1, 1]
    swapped = [1 - room for room in assignment]
    score = evaluate_assignment(assignment, capacities, [(2, 3)])
    assert evaluate_assignment(swapped, list(reversed(capacities)), [(2, 3)]) == score
    assert evaluate_assignment(swapped, capacities, [(2, 3)]) != score


def test_zero_iff_constraints_hold_exhaustive():
    capacities = [1, 2]
    pairs = [(0, 1)]
    for assignment in itertools.product(range(2), repeat=3):
        usage = [assignment.count(room) for room in range(2)]
        feasible = all(u <= c for u, c in zip(usage, capacities)) and assignment[0] != assignment[1]
        score = evaluate_assignment(assignment, capacities, pairs)
        assert score >= 0
        assert (score == 0) == feasible


def test_two_rooms_three_students_minimum_is_ten():
    scores = [evaluate_assignment(a, [1, 1], []) for a in itertools.product(range(2), repeat=3)]
    assert min(scores) == 10
    assert evaluate_assignment([0, 0, 1], [1, 1], []) == 10


def test_evaluate_problem_matches_raw_inputs():
    pb = _problem([2, 1], 4, pairs=[(0, 3)])
    assignment = [1, 1, 0, 1]
    assert evaluate_problem(pb, assignment) == evaluate_assignment(
        assignment, pb.capacities, pb.pairs
    )


def test_penalty_breakdown_components():
    pb = _problem([1, 1], 4, pairs=[(0, 2), (1, 3)])
    breakdown = penalty_breakdown(pb, [0, 0, 0, 1])
    assert breakdown.occupancy == (3, 1)
    assert breakdown.overflow == 20
    assert breakdown.violated_pairs == ((0, 2),)
    assert breakdown.incompatibility == 5
    assert breakdown.total == evaluate_problem(pb, [0, 0, 0, 1])


def test_single_room_scenario_always_scores_five():
    pb = _problem([5], 3, pairs=[(0, 1)])
    assert evaluate_problem(pb, [0, 0, 0]) == 5
