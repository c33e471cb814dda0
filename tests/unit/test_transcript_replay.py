"""Unit tests for recorded event replay."""

import json

import structlog

from parley.transcript.aggregator import TranscriptAggregator
from parley.transcript.replay import TranscriptReplay, parse_event_lines


def jsonl(*events) -> list[str]:
    return [json.dumps(e) + "\n" for e in events]


class TestParseEventLines:
    def test_parses_objects(self):
        lines = jsonl({"type": "a"}, {"type": "b"})

        assert [e["type"] for e in parse_event_lines(lines)] == ["a", "b"]

    def test_skips_blank_and_malformed_lines(self):
        lines = ["\n", '{"type": "a"}\n', "not json\n", "[1, 2]\n", "   \n", '{"type": "b"}']

        assert [e["type"] for e in parse_event_lines(lines)] == ["a", "b"]


class TestTranscriptReplay:
    def test_builds_transcript(self):
        player = TranscriptReplay()

        aggregator = player.play(
            [
                {"type": "response.audio_transcript.delta", "event_id": "a1", "delta": "Hi"},
                {"type": "response.audio_transcript.delta", "event_id": "a2", "delta": "!"},
                {"type": "response.audio_transcript.done", "event_id": "a3", "transcript": "Hi!"},
            ]
        )

        assert [(e.message, e.is_partial) for e in aggregator.transcript] == [
            ("Hi!", False)
        ]
        assert player.events_replayed == 3

    def test_session_created_starts_new_session(self):
        player = TranscriptReplay()

        aggregator = player.play(
            [
                {"type": "session.created", "event_id": "s1"},
                {"type": "response.text.done", "event_id": "t1", "text": "Old session"},
                {"type": "session.created", "event_id": "s2"},
                {"type": "response.text.done", "event_id": "t1", "text": "New session"},
            ]
        )

        assert [e.message for e in aggregator.transcript] == ["New session"]
        assert player.sessions == 2
        assert len(player.event_log) == 2

    def test_session_created_reset_can_be_disabled(self):
        player = TranscriptReplay(reset_on_session_created=False)

        aggregator = player.play(
            [
                {"type": "response.text.done", "event_id": "t1", "text": "First"},
                {"type": "session.created", "event_id": "s2"},
                {"type": "response.text.done", "event_id": "t2", "text": "Second"},
            ]
        )

        assert [e.message for e in aggregator.transcript] == ["First", "Second"]
        assert player.sessions == 0

    def test_duplicate_redelivery_in_recording(self):
        event = {"type": "response.text.delta", "event_id": "d1", "delta": "once"}

        aggregator = TranscriptReplay().play([event, dict(event)])

        assert [e.message for e in aggregator.transcript] == ["once"]

    def test_session_boundary_rebinds_log_context(self):
        structlog.contextvars.bind_contextvars(replay_session=0, stale="yes")

        TranscriptReplay().play(
            [
                {"type": "session.created", "event_id": "s1"},
                {"type": "session.created", "event_id": "s2"},
            ]
        )

        context = structlog.contextvars.get_contextvars()
        assert context["replay_session"] == 2
        assert "stale" not in context
        structlog.contextvars.clear_contextvars()

    def test_plays_into_given_aggregator(self):
        aggregator = TranscriptAggregator()

        returned = TranscriptReplay(aggregator=aggregator).play(
            [{"type": "response.text.done", "event_id": "t1", "text": "Kept"}]
        )

        assert returned is aggregator
        assert [e.message for e in aggregator.transcript] == ["Kept"]
