"""Output formatting for Parley CLI."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.table import Table

from parley.transcript.events import EVENT_RULES, IGNORED_EVENT_TYPES

# Console instances for stdout and stderr
console = Console()
error_console = Console(stderr=True)


def output_content(content: str, output_path: Path | None, quiet: bool = False) -> None:
    """Write exported content to a file, or print it verbatim to stdout.

    Args:
        content: Exported transcript.
        output_path: Path to write output, or None for stdout.
        quiet: Suppress the confirmation message.
    """
    if output_path:
        output_path.write_text(content, encoding="utf-8")
        if not quiet:
            error_console.print(f"Written to {output_path}")
    else:
        # Transcript text is data: no markup, highlighting, or wrapping.
        console.print(content, markup=False, highlight=False, soft_wrap=True)


def output_aliases() -> None:
    """Print the event alias table."""
    table = Table(title="Realtime event aliases")
    table.add_column("Kind")
    table.add_column("Event type")
    table.add_column("Speaker")
    table.add_column("Merge")

    for rule in EVENT_RULES:
        for event_type in rule.types:
            table.add_row(
                rule.kind.value, event_type, rule.speaker.value, rule.mode.value
            )
    for event_type in sorted(IGNORED_EVENT_TYPES):
        table.add_row("ignored", event_type, "-", "-")

    console.print(table)
