"""Normalization of realtime events into logical transcript events.

Realtime runtimes emit the same occurrence under several names
(`response.audio_transcript.delta` vs `response.output_audio_transcript.delta`,
conversation-level vs buffer-level input transcription, and so on). Every
alias is listed once in EVENT_RULES together with how to pull the text out of
it; the aggregator only ever sees a NormalizedEvent.

Reference: https://platform.openai.com/docs/api-reference/realtime-server-events
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from parley.transcript.entries import Speaker

RawEvent = Mapping[str, Any]
Extractor = Callable[[RawEvent], str | None]


class EventKind(str, Enum):
    """Vendor-independent classification of a realtime event."""

    USER_MESSAGE_COMPLETE = "user_message_complete"
    USER_AUDIO_DELTA = "user_audio_delta"
    USER_AUDIO_COMPLETE = "user_audio_complete"
    USER_AUDIO_ITEM_ADDED = "user_audio_item_added"
    ASSISTANT_AUDIO_DELTA = "assistant_audio_delta"
    ASSISTANT_AUDIO_COMPLETE = "assistant_audio_complete"
    ASSISTANT_TEXT_DELTA = "assistant_text_delta"
    ASSISTANT_TEXT_COMPLETE = "assistant_text_complete"
    IGNORED = "ignored"


class MergeMode(str, Enum):
    """How an event's text lands in the transcript."""

    DELTA = "delta"  # grow the trailing partial entry, or open one
    COMPLETE = "complete"  # close the trailing partial entry, or add a final one
    APPEND = "append"  # always a new final entry


# Voice activity and buffer bookkeeping; they never carry transcript text.
IGNORED_EVENT_TYPES = frozenset(
    {
        "input_audio_buffer.speech_started",
        "input_audio_buffer.speech_stopped",
        "input_audio_buffer.committed",
    }
)


# -----------------------------------------------------------------------------
# Extractors
# -----------------------------------------------------------------------------


def first_text(event: RawEvent, *fields: str) -> str | None:
    """Return the first field of `event` holding a non-empty string."""
    for name in fields:
        value = event.get(name)
        if isinstance(value, str) and value:
            return value
    return None


def _fields(*names: str) -> Extractor:
    def extract(event: RawEvent) -> str | None:
        return first_text(event, *names)

    return extract


def _user_item_content(content_type: str, field: str) -> Extractor:
    """Extract text from the first content part of a user message item."""

    def extract(event: RawEvent) -> str | None:
        item = event.get("item")
        if not isinstance(item, Mapping):
            return None
        if item.get("type") != "message" or item.get("role") != "user":
            return None
        content = item.get("content")
        if not isinstance(content, Sequence) or isinstance(content, str) or not content:
            return None
        part = content[0]
        if not isinstance(part, Mapping) or part.get("type") != content_type:
            return None
        return first_text(part, field)

    return extract


# -----------------------------------------------------------------------------
# Rule table
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class EventRule:
    """One logical event kind and every raw type that means it.

    Attributes:
        kind: Logical kind produced by this rule
        types: Raw `type` values (aliases) matched by this rule
        speaker: Speaker the extracted text belongs to
        mode: How the text is merged into the transcript
        extract: Pulls the text out of a raw event, None when absent
        any_speaker: A completion may close a partial entry of either speaker
    """

    kind: EventKind
    types: tuple[str, ...]
    speaker: Speaker
    mode: MergeMode
    extract: Extractor
    any_speaker: bool = False


EVENT_RULES: tuple[EventRule, ...] = (
    EventRule(
        kind=EventKind.USER_MESSAGE_COMPLETE,
        types=("conversation.item.create",),
        speaker=Speaker.USER,
        mode=MergeMode.APPEND,
        extract=_user_item_content("input_text", "text"),
    ),
    EventRule(
        kind=EventKind.USER_AUDIO_DELTA,
        types=(
            "conversation.item.input_audio_transcription.delta",
            "input_audio_buffer.transcription.delta",
        ),
        speaker=Speaker.USER,
        mode=MergeMode.DELTA,
        extract=_fields("delta", "text"),
    ),
    EventRule(
        kind=EventKind.USER_AUDIO_COMPLETE,
        types=(
            "conversation.item.input_audio_transcription.completed",
            "input_audio_buffer.transcription.completed",
        ),
        speaker=Speaker.USER,
        mode=MergeMode.COMPLETE,
        extract=_fields("transcript"),
    ),
    EventRule(
        kind=EventKind.USER_AUDIO_ITEM_ADDED,
        types=("conversation.item.added",),
        speaker=Speaker.USER,
        mode=MergeMode.APPEND,
        extract=_user_item_content("input_audio", "transcript"),
    ),
    EventRule(
        kind=EventKind.ASSISTANT_AUDIO_DELTA,
        types=(
            "response.audio_transcript.delta",
            "response.output_audio_transcript.delta",
        ),
        speaker=Speaker.ASSISTANT,
        mode=MergeMode.DELTA,
        extract=_fields("delta", "text"),
    ),
    EventRule(
        kind=EventKind.ASSISTANT_AUDIO_COMPLETE,
        types=(
            "response.audio_transcript.done",
            "response.output_audio_transcript.done",
        ),
        speaker=Speaker.ASSISTANT,
        mode=MergeMode.COMPLETE,
        extract=_fields("transcript", "text"),
        any_speaker=True,
    ),
    EventRule(
        kind=EventKind.ASSISTANT_TEXT_DELTA,
        types=("response.text.delta", "response.output_text.delta"),
        speaker=Speaker.ASSISTANT,
        mode=MergeMode.DELTA,
        extract=_fields("delta", "text"),
    ),
    EventRule(
        kind=EventKind.ASSISTANT_TEXT_COMPLETE,
        types=("response.text.done", "response.output_text.done"),
        speaker=Speaker.ASSISTANT,
        mode=MergeMode.COMPLETE,
        extract=_fields("text", "output_text", "transcript"),
        any_speaker=True,
    ),
)

RULES_BY_TYPE: dict[str, EventRule] = {
    event_type: rule for rule in EVENT_RULES for event_type in rule.types
}


# -----------------------------------------------------------------------------
# Normalization
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class NormalizedEvent:
    """A raw event reduced to what the aggregator needs."""

    kind: EventKind
    event_type: str | None = None
    event_id: str | None = None
    speaker: Speaker | None = None
    text: str | None = None
    mode: MergeMode | None = None
    any_speaker: bool = False

    @property
    def is_actionable(self) -> bool:
        """True when the event should change the transcript."""
        return self.kind is not EventKind.IGNORED and bool(self.text)


def get_event_id(event: Any) -> str | None:
    """Return the event's event_id, or None when absent or unusable.

    Integer ids are accepted and compared in their string form.
    """
    if not isinstance(event, Mapping):
        return None
    value = event.get("event_id")
    if isinstance(value, str) and value:
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return None


def normalize(event: Any) -> NormalizedEvent:
    """Classify a raw event and extract its transcript text.

    Never raises: anything that is not a mapping, carries an unknown type,
    or lacks the expected payload comes back with no text, and callers
    treat it as a no-op.
    """
    if not isinstance(event, Mapping):
        return NormalizedEvent(kind=EventKind.IGNORED)

    event_type = event.get("type")
    if not isinstance(event_type, str):
        event_type = None
    event_id = get_event_id(event)

    rule = RULES_BY_TYPE.get(event_type) if event_type else None
    if rule is None:
        return NormalizedEvent(
            kind=EventKind.IGNORED, event_type=event_type, event_id=event_id
        )

    return NormalizedEvent(
        kind=rule.kind,
        event_type=event_type,
        event_id=event_id,
        speaker=rule.speaker,
        text=rule.extract(event),
        mode=rule.mode,
        any_speaker=rule.any_speaker,
    )
