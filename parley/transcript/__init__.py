"""Live conversation transcripts from realtime voice-assistant events.

Example usage:
    from parley.transcript import EventLog, TranscriptFeed, TranscriptExporter

    log = EventLog()
    feed = TranscriptFeed(log)

    for event in events_from_data_channel():
        log.append(event)

    print(TranscriptExporter().export_text(feed.transcript))
"""

from parley.transcript.aggregator import TranscriptAggregator
from parley.transcript.entries import EntryState, Speaker, TranscriptEntry
from parley.transcript.event_log import EventLog, TranscriptFeed
from parley.transcript.events import (
    EVENT_RULES,
    EventKind,
    EventRule,
    MergeMode,
    NormalizedEvent,
    normalize,
)
from parley.transcript.export import (
    ExportFormat,
    TranscriptExporter,
    download_filename,
)
from parley.transcript.replay import TranscriptReplay, parse_event_lines
from parley.transcript.session import RealtimeSession

__all__ = [
    # Aggregation
    "TranscriptAggregator",
    "TranscriptEntry",
    "EntryState",
    "Speaker",
    # Normalization
    "EVENT_RULES",
    "EventKind",
    "EventRule",
    "MergeMode",
    "NormalizedEvent",
    "normalize",
    # Event log and session
    "EventLog",
    "TranscriptFeed",
    "RealtimeSession",
    # Export and replay
    "ExportFormat",
    "TranscriptExporter",
    "download_filename",
    "TranscriptReplay",
    "parse_event_lines",
]
