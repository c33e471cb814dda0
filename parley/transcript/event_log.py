"""Session event log and the feed that drives transcript aggregation.

The event log holds every event a session has seen, newest first, exactly
as a console UI shows it. The transcript is derived from the log: each time
the log changes its newest event is handed to the aggregator, and an emptied
log (a new data channel) resets the transcript.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Mapping, MutableMapping
from datetime import datetime
from typing import Any

import structlog

from parley.transcript.aggregator import TranscriptAggregator
from parley.transcript.entries import TranscriptEntry

logger = structlog.get_logger()

LogObserver = Callable[["EventLog"], None]


def local_time_label(now: datetime | None = None) -> str:
    """Wall-clock label stamped onto events that arrive without one."""
    return (now or datetime.now()).strftime("%H:%M:%S")


class EventLog:
    """Newest-first log of realtime events for one session."""

    def __init__(self, clock: Callable[[], str] | None = None) -> None:
        self._events: deque[Mapping[str, Any]] = deque()
        self._observers: list[LogObserver] = []
        self._clock = clock or local_time_label

    @property
    def events(self) -> tuple[Mapping[str, Any], ...]:
        """All events, newest first."""
        return tuple(self._events)

    @property
    def latest(self) -> Mapping[str, Any] | None:
        return self._events[0] if self._events else None

    def __len__(self) -> int:
        return len(self._events)

    def subscribe(self, observer: LogObserver) -> Callable[[], None]:
        """Register an observer called after every change.

        Returns:
            A callable that removes the observer again
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def append(self, event: Mapping[str, Any]) -> None:
        """Record a new event at the head of the log.

        Events without a `timestamp` are stamped in place with the local
        wall-clock time.
        """
        if isinstance(event, MutableMapping) and not event.get("timestamp"):
            event["timestamp"] = self._clock()
        self._events.appendleft(event)
        self._notify()

    def clear(self) -> None:
        """Drop every event; observers see an empty log."""
        self._events.clear()
        self._notify()

    def _notify(self) -> None:
        for observer in list(self._observers):
            observer(self)


class TranscriptFeed:
    """Keeps a TranscriptAggregator in step with an EventLog.

    Example:
        log = EventLog()
        feed = TranscriptFeed(log)

        log.append({"type": "response.audio_transcript.delta", "delta": "Hi"})
        feed.transcript  # (TranscriptEntry(speaker=ASSISTANT, message="Hi", ...),)

        log.clear()
        feed.transcript  # ()
    """

    def __init__(
        self,
        event_log: EventLog,
        aggregator: TranscriptAggregator | None = None,
    ) -> None:
        self.event_log = event_log
        self.aggregator = aggregator if aggregator is not None else TranscriptAggregator()
        self._unsubscribe = event_log.subscribe(self._on_log_changed)

    @property
    def transcript(self) -> tuple[TranscriptEntry, ...]:
        return self.aggregator.transcript

    def close(self) -> None:
        """Stop following the event log."""
        self._unsubscribe()

    def _on_log_changed(self, event_log: EventLog) -> None:
        latest = event_log.latest
        if latest is None:
            self.aggregator.reset()
            return
        self.aggregator.ingest(latest)
