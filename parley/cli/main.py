"""CLI entry point for Parley.

Provides the main `parley` command with global options and subcommands.
"""

from __future__ import annotations

import os
import sys
from typing import Annotated

import typer

from parley import __version__
from parley import logging as parley_logging
from parley.config import Settings, get_settings

app = typer.Typer(
    name="parley",
    help="Parley CLI - Conversation transcripts from realtime voice sessions.",
    no_args_is_help=True,
)


class State:
    """Global state container for CLI context."""

    settings: Settings
    verbose: bool = False
    quiet: bool = False


state = State()


def version_callback(value: bool) -> None:
    """Handle --version flag."""
    if value:
        print(f"parley {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbose (debug) logging to stderr.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
) -> None:
    """Parley CLI - Conversation transcripts from realtime voice sessions.

    Replay recorded realtime event streams (JSON Lines, one event per line)
    into a clean conversation transcript.

    Configuration can be provided via environment variables or a .env file
    (RESET_ON_SESSION_CREATED, TRANSCRIPT_EXPORT_PREFIX, PARLEY_LOG_LEVEL).

    Examples:

        # Print the transcript of a recorded session
        parley replay session.jsonl

        # Save it as JSON
        parley replay session.jsonl -f json -o transcript.json

        # Show the event aliases Parley understands
        parley aliases
    """
    if verbose:
        level = "DEBUG"
    else:
        level = os.environ.get("PARLEY_LOG_LEVEL", "WARNING")
    parley_logging.configure("parley-cli", level=level, stream=sys.stderr)

    state.settings = get_settings()
    state.verbose = verbose
    state.quiet = quiet


# Import and register commands after app is defined
from parley.cli.commands import aliases, replay  # noqa: E402

app.command()(replay.replay)
app.command()(aliases.aliases)


def cli() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    cli()
