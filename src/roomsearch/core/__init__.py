"""Core utilities shared across roomsearch modules."""

from .errors import RoomSearchValueError, WorkerFailureError

__all__ = ["RoomSearchValueError", "WorkerFailureError"]
