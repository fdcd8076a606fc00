"""Thread-safe holder of the best assignment found across search workers."""

from __future__ import annotations

import math
import threading
import time
from collections.abc import Sequence
from dataclasses import dataclass

__all__ = ["BestSolution", "Improvement", "BestSolutionRegister"]


@dataclass(frozen=True, slots=True)
class BestSolution:
    """Fitness and the assignment that produced it, always stored together."""

    fitness: float
    assignment: tuple[int, ...] | None = None

    @property
    def found(self) -> bool:
        return self.assignment is not None


@dataclass(frozen=True, slots=True)
class Improvement:
    """Accepted improvement recorded by the register."""

    fitness: int
    worker_id: int | None
    iteration: int | None
    elapsed_seconds: float


class BestSolutionRegister:
    """Shared best-solution register with a compare-and-swap style update.

    The stored fitness starts at ``+inf`` and only ever decreases. Candidates that merely tie
    the stored fitness are rejected, so among equal-fitness assignments the first one accepted
    is kept.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._best = BestSolution(fitness=math.inf)
        self._improvements: list[Improvement] = []
        self._start = time.perf_counter()

    @property
    def best_fitness(self) -> float:
        """Current stored fitness; never increases over the register's lifetime."""
        return self._best.fitness

    def try_improve(
        self,
        fitness: int,
        assignment: Sequence[int],
        *,
        worker_id: int | None = None,
        iteration: int | None = None,
    ) -> bool:
        """Store ``(fitness, assignment)`` if ``fitness`` is strictly below the stored value.

        Returns ``True`` when the candidate replaced the stored solution. The assignment is
        copied, so callers may reuse their buffer afterwards.
        """
        with self._lock:
            if not fitness < self._best.fitness:
                return False
            self._best = BestSolution(fitness=fitness, assignment=tuple(assignment))
            self._improvements.append(
                Improvement(
                    fitness=fitness,
                    worker_id=worker_id,
                    iteration=iteration,
                    elapsed_seconds=time.perf_counter() - self._start,
                )
            )
            return True

    def snapshot(self) -> BestSolution:
        """Return the stored solution (intended for use once all workers have joined)."""
        with self._lock:
            return self._best

    @property
    def improvements(self) -> list[Improvement]:
        with self._lock:
            return list(self._improvements)
