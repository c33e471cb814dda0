"""Transcript export for copy and download."""

from __future__ import annotations

import json
from collections.abc import Iterable
from datetime import UTC, date, datetime, tzinfo
from enum import Enum

from parley.transcript.entries import TranscriptEntry


class ExportFormat(str, Enum):
    """Supported export formats."""

    TXT = "txt"
    JSON = "json"


class TranscriptExporter:
    """Renders a transcript as text or JSON.

    Text format, one block per entry separated by a blank line:

        [14:02:11] User: Hi, I'd like to book a visit.

        [14:02:13] Assistant: Of course. Which day suits you?
    """

    def __init__(self, tz: tzinfo | None = None, include_partial: bool = True) -> None:
        """Initialize exporter.

        Args:
            tz: Timezone for the [HH:MM:SS] labels (default: local time)
            include_partial: Whether entries still being streamed are exported
        """
        self.tz = tz
        self.include_partial = include_partial

    @staticmethod
    def format_time(timestamp: datetime, tz: tzinfo | None = None) -> str:
        """Format a timestamp as HH:MM:SS in `tz` (local time when None)."""
        return timestamp.astimezone(tz).strftime("%H:%M:%S")

    def format_entry(self, entry: TranscriptEntry) -> str:
        time = self.format_time(entry.timestamp, self.tz)
        return f"[{time}] {entry.speaker.label}: {entry.message}"

    def _select(self, entries: Iterable[TranscriptEntry]) -> list[TranscriptEntry]:
        if self.include_partial:
            return list(entries)
        return [entry for entry in entries if not entry.is_partial]

    def export_text(self, entries: Iterable[TranscriptEntry]) -> str:
        return "\n\n".join(self.format_entry(entry) for entry in self._select(entries))

    def export_json(self, entries: Iterable[TranscriptEntry]) -> str:
        return json.dumps([entry.to_dict() for entry in self._select(entries)], indent=2)

    def export(
        self, entries: Iterable[TranscriptEntry], fmt: ExportFormat | str
    ) -> str:
        """Export entries in the requested format.

        Raises:
            ValueError: If the format is not supported
        """
        export_format = ExportFormat(fmt)
        if export_format is ExportFormat.JSON:
            return self.export_json(entries)
        return self.export_text(entries)


def download_filename(
    prefix: str = "conversation-transcript",
    today: date | None = None,
    fmt: ExportFormat | str = ExportFormat.TXT,
) -> str:
    """Filename for a downloaded transcript, e.g. conversation-transcript-2024-05-01.txt."""
    day = today or datetime.now(UTC).date()
    return f"{prefix}-{day.isoformat()}.{ExportFormat(fmt).value}"
