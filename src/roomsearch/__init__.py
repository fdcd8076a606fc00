"""Parallel Monte Carlo search for student-to-room assignments."""

__version__ = "0.1.0"
