"""Parley command-line interface."""
