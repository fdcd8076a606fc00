"""Randomized search heuristics for roomsearch."""

from .fitness import (
    INCOMPATIBILITY_PENALTY,
    OVERFLOW_PENALTY,
    PenaltyBreakdown,
    evaluate_assignment,
    evaluate_problem,
    penalty_breakdown,
)
from .montecarlo import DEFAULT_WORKERS, assignment_frame, solve_monte_carlo
from .register import BestSolution, BestSolutionRegister, Improvement
from .sampling import CandidateGenerator
from .worker import SearchWorker, WorkerStats

__all__ = [
    "OVERFLOW_PENALTY",
    "INCOMPATIBILITY_PENALTY",
    "PenaltyBreakdown",
    "evaluate_assignment",
    "evaluate_problem",
    "penalty_breakdown",
    "CandidateGenerator",
    "BestSolution",
    "BestSolutionRegister",
    "Improvement",
    "SearchWorker",
    "WorkerStats",
    "DEFAULT_WORKERS",
    "assignment_frame",
    "solve_monte_carlo",
]
