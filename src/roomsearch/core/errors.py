"""Common roomsearch exceptions."""

class RoomSearchValueError(ValueError):
    """Raised when roomsearch detects invalid user-provided configuration."""


class WorkerFailureError(RuntimeError):
    """Raised when a search worker cannot be started or aborts mid-run."""

    def __init__(self, worker_id: int, message: str) -> None:
        super().__init__(f"Worker {worker_id} failed: {message}")
        self.worker_id = worker_id


__all__ = ["RoomSearchValueError", "WorkerFailureError"]
