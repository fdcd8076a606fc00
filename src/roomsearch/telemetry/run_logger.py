"""Context manager for capturing search run telemetry."""

from __future__ import annotations

import math
import time
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping
from uuid import uuid4

from .jsonl import append_jsonl


def _iso_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def _json_number(value: float) -> float | None:
    return None if math.isinf(value) else value


@dataclass(slots=True)
class RunTelemetryLogger(AbstractContextManager["RunTelemetryLogger"]):
    """Record high-level telemetry for a search run.

    Parameters
    ----------
    log_path:
        JSONL path where run records are appended.
    solver:
        Solver identifier.
    scenario:
        Human-readable scenario name.
    seed:
        Base RNG seed, or ``None`` when workers were seeded from OS entropy.
    config:
        Dictionary capturing the run configuration (workers, iterations per worker).
    context:
        Additional metadata contextualising the run (source command, scenario path).
    log_improvements:
        When ``True`` every accepted improvement is written to ``steps/<run_id>.jsonl``
        next to ``log_path``.
    """

    log_path: Path
    solver: str = "montecarlo"
    scenario: str | None = None
    seed: int | None = None
    config: Mapping[str, Any] | None = None
    context: Mapping[str, Any] | None = None
    log_improvements: bool = True
    schema_version: str = "1.0"
    run_id: str = field(default_factory=lambda: uuid4().hex, init=False)
    _start_time: float = field(default=0.0, init=False)
    _start_timestamp: str | None = field(default=None, init=False)
    _closed: bool = field(default=False, init=False)
    _steps_path: Path | None = field(default=None, init=False)

    def __post_init__(self) -> None:
        self.log_path = Path(self.log_path)
        if self.log_improvements:
            self._steps_path = self.log_path.parent / "steps" / f"{self.run_id}.jsonl"

    def __enter__(self) -> "RunTelemetryLogger":
        self._start_time = time.perf_counter()
        self._start_timestamp = _iso_now()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type:
            self._close(status="error", metrics=None, error=repr(exc))
            return False
        self._close(status="ok", metrics=None, error=None)
        return False

    def log_improvement(
        self,
        *,
        step: int,
        fitness: int,
        worker_id: int | None,
        iteration: int | None,
        elapsed_seconds: float,
    ) -> None:
        """Persist one accepted improvement when improvement logging is enabled."""
        if not self._steps_path:
            return
        record = {
            "record_type": "step",
            "schema_version": self.schema_version,
            "run_id": self.run_id,
            "step": step,
            "fitness": fitness,
            "worker_id": worker_id,
            "iteration": iteration,
            "elapsed_seconds": round(elapsed_seconds, 6),
        }
        append_jsonl(self._steps_path, record)

    def elapsed(self) -> float:
        """Return the elapsed wall-clock seconds since the run started."""
        return time.perf_counter() - self._start_time

    @property
    def steps_path(self) -> Path | None:
        return self._steps_path

    def finalize(
        self,
        *,
        status: str = "ok",
        metrics: Mapping[str, Any] | None = None,
        error: str | None = None,
    ) -> None:
        """Write the terminal run record."""
        self._close(status=status, metrics=metrics, error=error)

    def _close(
        self,
        *,
        status: str,
        metrics: Mapping[str, Any] | None,
        error: str | None,
    ) -> None:
        if self._closed:
            return
        duration = self.elapsed() if self._start_time else 0.0
        cleaned = {
            key: _json_number(value) if isinstance(value, float) else value
            for key, value in dict(metrics or {}).items()
        }
        record = {
            "record_type": "run",
            "schema_version": self.schema_version,
            "run_id": self.run_id,
            "solver": self.solver,
            "scenario": self.scenario,
            "seed": self.seed,
            "status": status,
            "metrics": cleaned,
            "config": dict(self.config or {}),
            "context": dict(self.context or {}),
            "error": error,
            "started_at": self._start_timestamp,
            "finished_at": _iso_now(),
            "duration_seconds": round(duration, 3),
        }
        append_jsonl(self.log_path, record)
        self._closed = True


__all__ = ["RunTelemetryLogger"]
