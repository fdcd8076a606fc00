"""Run telemetry helpers (JSONL run and step logs)."""

from .jsonl import append_jsonl, iter_jsonl
from .run_logger import RunTelemetryLogger

__all__ = ["RunTelemetryLogger", "append_jsonl", "iter_jsonl"]
