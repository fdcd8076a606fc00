"""Search worker driving the generate-evaluate-improve loop."""

from __future__ import annotations

import math
import threading
from collections.abc import Iterable
from dataclasses import dataclass

from roomsearch.core.errors import RoomSearchValueError
from roomsearch.optimization.heuristics.fitness import evaluate_assignment
from roomsearch.optimization.heuristics.register import BestSolutionRegister
from roomsearch.optimization.heuristics.sampling import CandidateGenerator
from roomsearch.scenario.contract import Problem

__all__ = ["SearchWorker", "WorkerStats"]


@dataclass(slots=True)
class WorkerStats:
    """Per-worker counters reported after a run."""

    worker_id: int
    evaluations: int = 0
    improvements: int = 0
    best_fitness: float = math.inf

    def to_dict(self) -> dict[str, float | int]:
        return {
            "worker_id": self.worker_id,
            "evaluations": self.evaluations,
            "improvements": self.improvements,
            "best_fitness": self.best_fitness,
        }


class SearchWorker:
    """Draw independent random assignments and offer improvements to a shared register.

    Workers never talk to each other; the register is the only shared mutable state.
    ``stop_event`` (one event or several) is checked once per iteration so a bounded-time
    run can end early; the worker stops as soon as any of them is set.
    """

    def __init__(
        self,
        worker_id: int,
        problem: Problem,
        register: BestSolutionRegister,
        *,
        seed: int | None = None,
        stop_event: threading.Event | Iterable[threading.Event] | None = None,
    ) -> None:
        self.worker_id = worker_id
        self.problem = problem
        self.register = register
        if stop_event is None:
            self.stop_events: tuple[threading.Event, ...] = ()
        elif isinstance(stop_event, threading.Event):
            self.stop_events = (stop_event,)
        else:
            self.stop_events = tuple(stop_event)
        self._generator = CandidateGenerator(problem.num_rooms, seed=seed)

    def run(self, iterations: int) -> WorkerStats:
        """Run exactly ``iterations`` generate/evaluate/improve steps (fewer if stopped)."""
        if iterations < 0:
            raise RoomSearchValueError(f"iterations must be non-negative (got {iterations})")
        stats = WorkerStats(worker_id=self.worker_id)
        num_students = self.problem.num_students
        capacities = self.problem.capacities
        pairs = self.problem.pairs
        register = self.register
        generate = self._generator.generate
        stop_events = self.stop_events

        for iteration in range(iterations):
            if stop_events and any(event.is_set() for event in stop_events):
                break
            candidate = generate(num_students)
            fitness = evaluate_assignment(candidate, capacities, pairs)
            stats.evaluations += 1
            if fitness < stats.best_fitness:
                stats.best_fitness = fitness
            # the stored fitness only decreases, so a candidate that does not beat this read
            # cannot beat the value checked under the lock either
            if fitness < register.best_fitness and register.try_improve(
                fitness, candidate, worker_id=self.worker_id, iteration=iteration
            ):
                stats.improvements += 1
        return stats
