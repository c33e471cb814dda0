"""Transcript entries.

An entry is an immutable snapshot. Growing an utterance or closing it
produces a new snapshot through an explicit transition, so the rule
"delta appends, completion replaces" lives in one place:

    PARTIAL --extend(delta)--> PARTIAL  (text appended)
    PARTIAL --finalize(text)--> FINAL   (text replaced)

FINAL entries accept no further transitions.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from parley.exceptions import TranscriptStateError


class Speaker(str, Enum):
    """Who an utterance belongs to."""

    USER = "user"
    ASSISTANT = "assistant"

    @property
    def label(self) -> str:
        """Capitalized name used in exported transcripts."""
        return self.value.capitalize()


class EntryState(str, Enum):
    PARTIAL = "partial"
    FINAL = "final"


def generate_entry_id() -> str:
    """Generate an entry ID for events that carry no event_id."""
    return f"entry_{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True)
class TranscriptEntry:
    """One utterance in the conversation transcript.

    Attributes:
        id: event_id of the event that created the entry, or a generated ID
        speaker: Speaker the utterance is attributed to
        message: Utterance text
        timestamp: Capture time of the creating event (timezone-aware)
        state: PARTIAL while deltas may still arrive, FINAL afterwards
    """

    id: str
    speaker: Speaker
    message: str
    timestamp: datetime
    state: EntryState = EntryState.FINAL

    @classmethod
    def create(
        cls,
        speaker: Speaker,
        message: str,
        *,
        partial: bool,
        entry_id: str | None = None,
        timestamp: datetime | None = None,
    ) -> TranscriptEntry:
        return cls(
            id=entry_id or generate_entry_id(),
            speaker=speaker,
            message=message,
            timestamp=timestamp or datetime.now(UTC),
            state=EntryState.PARTIAL if partial else EntryState.FINAL,
        )

    @property
    def is_partial(self) -> bool:
        return self.state is EntryState.PARTIAL

    def extend(self, delta: str) -> TranscriptEntry:
        """Return this partial entry with `delta` appended.

        Raises:
            TranscriptStateError: If the entry is already final
        """
        if not self.is_partial:
            raise TranscriptStateError(self.id, "extend")
        return replace(self, message=self.message + delta)

    def finalize(self, text: str) -> TranscriptEntry:
        """Return this entry closed with `text` as its complete message.

        The final text replaces whatever the deltas accumulated.

        Raises:
            TranscriptStateError: If the entry is already final
        """
        if not self.is_partial:
            raise TranscriptStateError(self.id, "finalize")
        return replace(self, message=text, state=EntryState.FINAL)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "speaker": self.speaker.value,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
            "is_partial": self.is_partial,
        }
