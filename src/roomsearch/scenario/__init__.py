"""Scenario definitions, loaders, and generators."""
