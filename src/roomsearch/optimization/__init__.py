"""Optimisation back-ends for roomsearch."""
