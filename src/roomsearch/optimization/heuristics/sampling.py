"""Uniform random candidate generation."""

from __future__ import annotations

import random as _random

from roomsearch.core.errors import RoomSearchValueError

__all__ = ["CandidateGenerator"]


class CandidateGenerator:
    """Draw assignments whose entries are independent and uniform over ``[0, num_rooms)``.

    Each generator owns a private :class:`random.Random`. Without an explicit ``seed`` it is
    seeded from operating-system entropy, so generators created by concurrent workers never
    share a sequence.
    """

    def __init__(self, num_rooms: int, *, seed: int | None = None) -> None:
        if num_rooms < 1:
            raise RoomSearchValueError(f"At least one room is required (got num_rooms={num_rooms})")
        self.num_rooms = num_rooms
        self._rng = _random.Random(seed)
        self._rooms = range(num_rooms)

    def generate(self, num_students: int) -> list[int]:
        """Return a fresh assignment for ``num_students`` students."""
        return self._rng.choices(self._rooms, k=num_students)
