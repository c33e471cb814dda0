"""Replay of recorded realtime event streams.

A recording is JSON Lines: one raw event per line, in arrival order. Each
event goes through an EventLog and TranscriptFeed exactly as a live session
would, so the resulting transcript matches what the console showed.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Iterator
from typing import Any

import structlog

from parley.logging import reset_context
from parley.transcript.aggregator import TranscriptAggregator
from parley.transcript.event_log import EventLog, TranscriptFeed

logger = structlog.get_logger()

SESSION_CREATED = "session.created"


def parse_event_lines(lines: Iterable[str]) -> Iterator[dict[str, Any]]:
    """Decode JSON Lines into event dicts.

    Blank lines are skipped. Lines that are not JSON objects are logged and
    skipped so one corrupt record does not end the replay.
    """
    for line_no, line in enumerate(lines, start=1):
        line = line.strip()
        if not line:
            continue
        try:
            event = json.loads(line)
        except json.JSONDecodeError as e:
            logger.warning("replay_line_malformed", line=line_no, error=str(e))
            continue
        if not isinstance(event, dict):
            logger.warning(
                "replay_line_not_object",
                line=line_no,
                value_type=type(event).__name__,
            )
            continue
        yield event


class TranscriptReplay:
    """Feeds recorded events through an event log into an aggregator."""

    def __init__(
        self,
        aggregator: TranscriptAggregator | None = None,
        reset_on_session_created: bool = True,
    ) -> None:
        """Initialize replay.

        Args:
            aggregator: Aggregator to feed (default: a new one)
            reset_on_session_created: Start a new session at each
                session.created event, as a reopened data channel would
        """
        self.event_log = EventLog()
        self.feed = TranscriptFeed(self.event_log, aggregator)
        self.reset_on_session_created = reset_on_session_created
        self.events_replayed = 0
        self.sessions = 0

    @property
    def aggregator(self) -> TranscriptAggregator:
        return self.feed.aggregator

    def play(self, events: Iterable[dict[str, Any]]) -> TranscriptAggregator:
        for event in events:
            if self.reset_on_session_created and event.get("type") == SESSION_CREATED:
                self.sessions += 1
                reset_context(replay_session=self.sessions)
                if len(self.event_log):
                    self.event_log.clear()
            self.event_log.append(event)
            self.events_replayed += 1

        logger.info(
            "replay_finished",
            events=self.events_replayed,
            sessions=self.sessions,
            entries=len(self.aggregator),
        )
        return self.aggregator
