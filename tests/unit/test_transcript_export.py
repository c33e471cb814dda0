"""Unit tests for transcript export."""

import json
from datetime import UTC, date, datetime, timedelta, timezone

import pytest

from parley.transcript.entries import Speaker, TranscriptEntry
from parley.transcript.export import (
    ExportFormat,
    TranscriptExporter,
    download_filename,
)


@pytest.fixture
def entries() -> list[TranscriptEntry]:
    return [
        TranscriptEntry.create(
            Speaker.USER,
            "Hi, I'd like to book a visit.",
            partial=False,
            entry_id="u1",
            timestamp=datetime(2024, 5, 1, 14, 2, 11, tzinfo=UTC),
        ),
        TranscriptEntry.create(
            Speaker.ASSISTANT,
            "Of course. Which day suits you?",
            partial=False,
            entry_id="a1",
            timestamp=datetime(2024, 5, 1, 14, 2, 13, tzinfo=UTC),
        ),
        TranscriptEntry.create(
            Speaker.ASSISTANT,
            "We also",
            partial=True,
            entry_id="a2",
            timestamp=datetime(2024, 5, 1, 14, 2, 20, tzinfo=UTC),
        ),
    ]


@pytest.fixture
def exporter() -> TranscriptExporter:
    return TranscriptExporter(tz=UTC)


class TestExportFormat:
    def test_values(self):
        assert ExportFormat("txt") is ExportFormat.TXT
        assert ExportFormat("json") is ExportFormat.JSON


class TestFormatTime:
    def test_utc(self):
        ts = datetime(2024, 5, 1, 7, 5, 9, tzinfo=UTC)

        assert TranscriptExporter.format_time(ts, UTC) == "07:05:09"

    def test_converts_to_requested_zone(self):
        ts = datetime(2024, 5, 1, 23, 30, 0, tzinfo=UTC)
        plus_two = timezone(timedelta(hours=2))

        assert TranscriptExporter.format_time(ts, plus_two) == "01:30:00"


class TestExportText:
    def test_exact_format(self, exporter: TranscriptExporter, entries):
        assert exporter.export_text(entries) == (
            "[14:02:11] User: Hi, I'd like to book a visit.\n"
            "\n"
            "[14:02:13] Assistant: Of course. Which day suits you?\n"
            "\n"
            "[14:02:20] Assistant: We also"
        )

    def test_finalized_only(self, entries):
        exporter = TranscriptExporter(tz=UTC, include_partial=False)

        text = exporter.export_text(entries)

        assert "We also" not in text
        assert text.count("\n\n") == 1

    def test_empty_transcript(self, exporter: TranscriptExporter):
        assert exporter.export_text([]) == ""

    def test_multiline_message_kept_verbatim(self, exporter: TranscriptExporter):
        entry = TranscriptEntry.create(
            Speaker.ASSISTANT,
            "Line one\nLine two",
            partial=False,
            timestamp=datetime(2024, 5, 1, 8, 0, 0, tzinfo=UTC),
        )

        assert exporter.format_entry(entry) == "[08:00:00] Assistant: Line one\nLine two"


class TestExportJson:
    def test_entries_serialized(self, exporter: TranscriptExporter, entries):
        data = json.loads(exporter.export_json(entries))

        assert [d["id"] for d in data] == ["u1", "a1", "a2"]
        assert data[0] == {
            "id": "u1",
            "speaker": "user",
            "message": "Hi, I'd like to book a visit.",
            "timestamp": "2024-05-01T14:02:11+00:00",
            "is_partial": False,
        }
        assert data[2]["is_partial"] is True


class TestExport:
    def test_dispatch(self, exporter: TranscriptExporter, entries):
        assert exporter.export(entries, "txt") == exporter.export_text(entries)
        assert exporter.export(entries, ExportFormat.JSON) == exporter.export_json(
            entries
        )

    def test_unknown_format(self, exporter: TranscriptExporter, entries):
        with pytest.raises(ValueError):
            exporter.export(entries, "srt")


class TestDownloadFilename:
    def test_default(self):
        assert (
            download_filename(today=date(2024, 5, 1))
            == "conversation-transcript-2024-05-01.txt"
        )

    def test_prefix_and_format(self):
        assert (
            download_filename("clinic-intake", date(2024, 12, 31), "json")
            == "clinic-intake-2024-12-31.json"
        )

    def test_defaults_to_today(self):
        name = download_filename()

        assert name.startswith("conversation-transcript-")
        assert name.endswith(".txt")
