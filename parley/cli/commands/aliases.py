"""Aliases command listing the realtime event types Parley understands."""

from __future__ import annotations

from parley.cli.output import output_aliases


def aliases() -> None:
    """List realtime event aliases and the transcript kind each maps to."""
    output_aliases()
