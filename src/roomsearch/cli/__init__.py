"""Command-line interface for roomsearch."""
