"""Incremental transcript aggregation for realtime sessions.

Consumes realtime events one at a time and keeps the conversation
transcript: streamed fragments are merged into the trailing partial entry,
completion events close it, and every event_id is applied at most once.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import structlog

from parley.transcript.entries import TranscriptEntry, generate_entry_id
from parley.transcript.events import MergeMode, NormalizedEvent, normalize

logger = structlog.get_logger()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TranscriptAggregator:
    """Builds an ordered, deduplicated transcript from realtime events.

    Merge target selection is positional: a delta grows the last entry when
    that entry is partial and belongs to the same speaker, a completion
    closes the last entry when it is partial. Two interleaved partial
    streams of the same speaker therefore share one entry.

    The caller delivers events serially in arrival order; `ingest` never
    blocks and never raises for a bad event.

    Example:
        aggregator = TranscriptAggregator()

        aggregator.ingest({"event_id": "e1", "type": "response.audio_transcript.delta", "delta": "Hel"})
        aggregator.ingest({"event_id": "e2", "type": "response.audio_transcript.delta", "delta": "lo"})
        # one partial assistant entry: "Hello"

        aggregator.ingest({"event_id": "e3", "type": "response.audio_transcript.done", "transcript": "Hello there"})
        # the same entry, final: "Hello there"
    """

    def __init__(
        self,
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        """Initialize an empty transcript.

        Args:
            clock: Returns the capture time for new entries (default: now, UTC)
            id_factory: Generates IDs for entries created by id-less events
        """
        self._entries: list[TranscriptEntry] = []
        self._seen_ids: set[str] = set()
        self._clock = clock or _utcnow
        self._id_factory = id_factory or generate_entry_id

    @property
    def transcript(self) -> tuple[TranscriptEntry, ...]:
        """The full transcript in arrival order."""
        return tuple(self._entries)

    @property
    def partial_entry(self) -> TranscriptEntry | None:
        """The trailing entry if it is still open for deltas."""
        if self._entries and self._entries[-1].is_partial:
            return self._entries[-1]
        return None

    @property
    def seen_count(self) -> int:
        """Number of distinct event IDs recorded this session."""
        return len(self._seen_ids)

    def __len__(self) -> int:
        return len(self._entries)

    def ingest(self, event: Any) -> tuple[TranscriptEntry, ...]:
        """Apply one realtime event and return the updated transcript.

        Args:
            event: Raw event mapping as delivered by the transport

        Returns:
            The full transcript after the event was applied
        """
        normalized = normalize(event)
        event_id = normalized.event_id

        if event_id is not None and event_id in self._seen_ids:
            logger.debug(
                "duplicate_event_skipped",
                event_id=event_id,
                event_type=normalized.event_type,
            )
            return self.transcript

        if normalized.is_actionable:
            self._apply(normalized)
        else:
            logger.debug(
                "event_ignored",
                event_id=event_id,
                event_type=normalized.event_type,
                kind=normalized.kind.value,
            )

        if event_id is not None:
            self._seen_ids.add(event_id)

        return self.transcript

    def reset(self) -> None:
        """Discard the transcript and the dedup ledger for a new session."""
        logger.info(
            "transcript_reset",
            entries=len(self._entries),
            seen_events=len(self._seen_ids),
        )
        self._entries.clear()
        self._seen_ids.clear()

    def _apply(self, event: NormalizedEvent) -> None:
        last = self._entries[-1] if self._entries else None

        if event.mode is MergeMode.DELTA:
            if last is not None and last.is_partial and last.speaker is event.speaker:
                self._entries[-1] = last.extend(event.text)
            else:
                self._append(event, partial=True)
            return

        if event.mode is MergeMode.COMPLETE:
            if (
                last is not None
                and last.is_partial
                and (event.any_speaker or last.speaker is event.speaker)
            ):
                self._entries[-1] = last.finalize(event.text)
                logger.debug(
                    "entry_finalized",
                    entry_id=last.id,
                    speaker=last.speaker.value,
                    kind=event.kind.value,
                )
            else:
                self._append(event, partial=False)
            return

        self._append(event, partial=False)

    def _append(self, event: NormalizedEvent, partial: bool) -> None:
        entry = TranscriptEntry.create(
            event.speaker,
            event.text,
            partial=partial,
            entry_id=event.event_id or self._id_factory(),
            timestamp=self._clock(),
        )
        self._entries.append(entry)
        logger.debug(
            "entry_added",
            entry_id=entry.id,
            speaker=entry.speaker.value,
            partial=partial,
            kind=event.kind.value,
        )
