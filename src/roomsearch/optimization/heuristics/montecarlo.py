"""Parallel Monte Carlo search over student-to-room assignments."""

from __future__ import annotations

import threading
import time
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from contextlib import nullcontext
from pathlib import Path
from typing import Any

import pandas as pd

from roomsearch.core.errors import RoomSearchValueError, WorkerFailureError
from roomsearch.optimization.heuristics.register import BestSolutionRegister
from roomsearch.optimization.heuristics.worker import SearchWorker, WorkerStats
from roomsearch.scenario.contract import Problem
from roomsearch.telemetry import RunTelemetryLogger

__all__ = ["DEFAULT_WORKERS", "solve_monte_carlo", "assignment_frame"]

DEFAULT_WORKERS = 4


def assignment_frame(assignment: list[int] | tuple[int, ...] | None) -> pd.DataFrame:
    """Convert an assignment into a ``student_id, room_id`` DataFrame."""
    if not assignment:
        return pd.DataFrame({"student_id": pd.Series(dtype=int), "room_id": pd.Series(dtype=int)})
    return pd.DataFrame(
        {"student_id": list(range(len(assignment))), "room_id": list(assignment)}
    )


def _validate(pb: Problem, workers: int, iterations: int, time_limit: float | None) -> None:
    if workers < 1:
        raise RoomSearchValueError(f"Thread count must be a positive integer (got {workers})")
    if iterations < 0:
        raise RoomSearchValueError(f"Iterations per worker must be non-negative (got {iterations})")
    if pb.num_rooms < 1:
        raise RoomSearchValueError("At least one room is required")
    if time_limit is not None and time_limit <= 0:
        raise RoomSearchValueError(f"time_limit must be positive (got {time_limit})")


def _run_workers(
    search_workers: list[SearchWorker],
    iterations: int,
    stop: threading.Event,
) -> list[WorkerStats]:
    """Run every worker on its own thread and block until all of them have finished.

    The first failure sets ``stop`` right away, so the other workers leave their loops
    without spending the rest of their budget before the pool is joined.
    """
    futures: dict[Future[WorkerStats], int] = {}
    with ThreadPoolExecutor(
        max_workers=len(search_workers), thread_name_prefix="roomsearch-worker"
    ) as executor:
        for worker in search_workers:
            try:
                future = executor.submit(worker.run, iterations)
            except RuntimeError as exc:
                stop.set()
                raise WorkerFailureError(worker.worker_id, f"could not start thread ({exc})") from exc
            futures[future] = worker.worker_id

        done, _ = wait(futures, return_when=FIRST_EXCEPTION)
        for future in sorted(done, key=futures.__getitem__):
            exc = future.exception()
            if exc is not None:
                stop.set()
                raise WorkerFailureError(futures[future], repr(exc)) from exc
        results = [future.result() for future in futures]
    return results


def solve_monte_carlo(
    pb: Problem,
    workers: int = DEFAULT_WORKERS,
    iters: int | None = None,
    seed: int | None = None,
    stop_event: threading.Event | None = None,
    time_limit: float | None = None,
    telemetry_log: str | Path | None = None,
    telemetry_context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Search for a low-penalty assignment with parallel independent random sampling.

    Parameters
    ----------
    pb : roomsearch.scenario.contract.Problem
        Rooms, students and incompatibilities shared read-only by every worker.
    workers : int, default=4
        Number of worker threads. Zero or negative values are rejected before any thread starts.
    iters : int | None
        Candidates drawn per worker. ``None`` uses ``pb.scenario.iterations_per_worker``.
    seed : int | None
        Base seed; worker ``k`` uses ``seed + k``. ``None`` seeds every worker from OS entropy.
    stop_event : threading.Event | None
        Optional flag that ends the search early once set. Workers check it once per iteration.
        The search only reads it; time limits and failures use a separate internal flag.
    time_limit : float | None
        Wall-clock budget in seconds. When it elapses the internal stop flag is set.
    telemetry_log : str | pathlib.Path | None
        Optional telemetry JSONL path. Accepted improvements land in ``steps/<run_id>.jsonl``.
    telemetry_context : dict[str, Any] | None
        Additional context merged into the telemetry run record.

    Returns
    -------
    dict
        ``objective`` (int, or ``inf`` when no candidate was evaluated)
            Lowest penalty found by any worker; ties keep the first assignment accepted.
        ``assignment`` (list[int])
            Room index per student for the best solution.
        ``assignments`` (pandas.DataFrame)
            The same assignment with columns ``student_id, room_id``.
        ``meta`` (dict[str, Any])
            Run bookkeeping: ``workers``, ``iterations_per_worker``, ``evaluations``,
            ``improvements``, ``elapsed_ms``, ``stopped_early``, ``worker_stats`` and
            telemetry identifiers when enabled.
    """
    iterations = pb.scenario.iterations_per_worker if iters is None else iters
    _validate(pb, workers, iterations, time_limit)

    # internal flag for the time limit and failure paths; a caller event is only ever read
    stop = threading.Event()
    stop_events = (stop,) if stop_event is None else (stop, stop_event)
    register = BestSolutionRegister()
    search_workers = [
        SearchWorker(
            worker_id,
            pb,
            register,
            seed=None if seed is None else seed + worker_id,
            stop_event=stop_events,
        )
        for worker_id in range(workers)
    ]

    telemetry_logger: RunTelemetryLogger | None = None
    if telemetry_log:
        telemetry_logger = RunTelemetryLogger(
            log_path=Path(telemetry_log),
            scenario=pb.scenario.name,
            seed=seed,
            config={
                "workers": workers,
                "iterations_per_worker": iterations,
                "time_limit": time_limit,
                "num_students": pb.num_students,
                "num_rooms": pb.num_rooms,
            },
            context=dict(telemetry_context or {}),
        )

    with telemetry_logger if telemetry_logger else nullcontext() as run_logger:
        timer: threading.Timer | None = None
        if time_limit is not None:
            timer = threading.Timer(time_limit, stop.set)
            timer.daemon = True
        start = time.perf_counter()
        if timer is not None:
            timer.start()
        try:
            stats = _run_workers(search_workers, iterations, stop)
        finally:
            if timer is not None:
                timer.cancel()
        elapsed_ms = int(round((time.perf_counter() - start) * 1000))

        best = register.snapshot()
        improvements = register.improvements
        evaluations = sum(entry.evaluations for entry in stats)
        meta: dict[str, Any] = {
            "workers": workers,
            "iterations_per_worker": iterations,
            "evaluations": evaluations,
            "improvements": len(improvements),
            "elapsed_ms": elapsed_ms,
            "stopped_early": evaluations < workers * iterations,
            "worker_stats": [entry.to_dict() for entry in stats],
        }

        if run_logger and telemetry_logger:
            for step, improvement in enumerate(improvements, start=1):
                run_logger.log_improvement(
                    step=step,
                    fitness=improvement.fitness,
                    worker_id=improvement.worker_id,
                    iteration=improvement.iteration,
                    elapsed_seconds=improvement.elapsed_seconds,
                )
            run_logger.finalize(
                status="ok",
                metrics={
                    "best_fitness": best.fitness,
                    "evaluations": evaluations,
                    "improvements": len(improvements),
                    "elapsed_ms": elapsed_ms,
                },
            )
            meta["telemetry_run_id"] = telemetry_logger.run_id
            meta["telemetry_log_path"] = str(telemetry_logger.log_path)
            if telemetry_logger.steps_path:
                meta["telemetry_steps_path"] = str(telemetry_logger.steps_path)

    assignment = list(best.assignment) if best.assignment is not None else []
    return {
        "objective": best.fitness,
        "assignment": assignment,
        "assignments": assignment_frame(assignment),
        "meta": meta,
    }
