"""Replay command for turning recorded event streams into transcripts."""

from __future__ import annotations

from datetime import UTC, tzinfo
from pathlib import Path
from typing import Annotated
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import typer

from parley.cli.main import state
from parley.cli.output import error_console, output_content
from parley.transcript.export import (
    ExportFormat,
    TranscriptExporter,
    download_filename,
)
from parley.transcript.replay import TranscriptReplay, parse_event_lines


def parse_timezone(value: str | None) -> tzinfo | None:
    """Parse a --timezone value; None keeps local time.

    Raises:
        typer.BadParameter: If the zone is unknown
    """
    if not value:
        return None
    if value.upper() == "UTC":
        return UTC
    try:
        return ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError):
        raise typer.BadParameter(f"Unknown timezone '{value}'") from None


def replay(
    events_file: Annotated[
        Path,
        typer.Argument(help="JSON Lines file with one realtime event per line."),
    ],
    fmt: Annotated[
        ExportFormat,
        typer.Option(
            "--format",
            "-f",
            help="Export format.",
        ),
    ] = ExportFormat.TXT,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output file, or a directory to save under the download filename.",
        ),
    ] = None,
    timezone: Annotated[
        str | None,
        typer.Option(
            "--timezone",
            "-z",
            help="Timezone for [HH:MM:SS] labels, e.g. UTC or Europe/London (default: local).",
        ),
    ] = None,
    finalized_only: Annotated[
        bool,
        typer.Option(
            "--finalized-only",
            help="Leave out entries that never received a completion event.",
        ),
    ] = False,
) -> None:
    """Replay recorded realtime events into a conversation transcript.

    Events are applied in file order. A session.created event starts a new
    session and discards the transcript built so far.

    Examples:

        parley replay session.jsonl

        parley replay session.jsonl -f json -o transcript.json

        parley replay session.jsonl --timezone UTC --finalized-only
    """
    tz = parse_timezone(timezone)
    settings = state.settings

    try:
        with events_file.open(encoding="utf-8") as f:
            player = TranscriptReplay(
                reset_on_session_created=settings.reset_on_session_created,
            )
            aggregator = player.play(parse_event_lines(f))
    except (OSError, UnicodeDecodeError) as e:
        error_console.print(f"[red]Error:[/red] Cannot read {events_file}: {e}")
        raise typer.Exit(code=1) from None

    exporter = TranscriptExporter(tz=tz, include_partial=not finalized_only)
    content = exporter.export(aggregator.transcript, fmt)

    if output is not None and output.is_dir():
        output = output / download_filename(settings.transcript_export_prefix, fmt=fmt)
    try:
        output_content(content, output, quiet=state.quiet)
    except OSError as e:
        error_console.print(f"[red]Error:[/red] Cannot write {output}: {e}")
        raise typer.Exit(code=1) from None

    if state.verbose:
        error_console.print(
            f"{player.events_replayed} events, {len(aggregator)} transcript entries"
        )
