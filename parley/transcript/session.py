"""Client side of a realtime voice session.

RealtimeSession holds the behaviour of the browser client that sits on top of
the data channel: it logs every client and server event, configures the
session when the channel opens, and asks for an assistant turn once the
user's speech has been transcribed. The transport is any callable that
delivers a JSON string (a WebRTC data channel, a WebSocket, a test double).

Example:
    sent = []
    session = RealtimeSession(sent.append)
    feed = TranscriptFeed(session.event_log)

    session.open()
    session.send_text_message("What are your opening hours?")
    session.receive('{"type": "response.audio_transcript.delta", "delta": "We"}')
"""

from __future__ import annotations

import json
import uuid
from collections.abc import Callable
from typing import Any

import structlog

from parley.config import Settings, get_settings
from parley.exceptions import SessionNotActiveError
from parley.transcript.event_log import EventLog

logger = structlog.get_logger()

Transport = Callable[[str], Any]

INPUT_TRANSCRIPTION_COMPLETED = "conversation.item.input_audio_transcription.completed"


# =============================================================================
# Client event builders
# =============================================================================


def generate_event_id() -> str:
    """Generate an event ID for client events."""
    return str(uuid.uuid4())


def build_text_message(text: str) -> dict[str, Any]:
    """Build the conversation.item.create event for a typed user message."""
    return {
        "type": "conversation.item.create",
        "item": {
            "type": "message",
            "role": "user",
            "content": [{"type": "input_text", "text": text}],
        },
    }


def build_response_create(modalities: list[str] | None = None) -> dict[str, Any]:
    """Build a response.create event, optionally restricting modalities."""
    event: dict[str, Any] = {"type": "response.create"}
    if modalities:
        event["response"] = {"modalities": list(modalities)}
    return event


def build_session_update(settings: Settings) -> dict[str, Any]:
    """Build the session.update sent when the data channel opens."""
    return {
        "type": "session.update",
        "session": {
            "input_audio_transcription": {
                "model": settings.input_transcription_model,
            },
            "instructions": settings.session_instructions,
        },
    }


def build_session_config(settings: Settings) -> dict[str, Any]:
    """Build the session configuration a token proxy submits upstream.

    Requesting input audio transcription here is what makes the server emit
    the user-side transcription events the transcript depends on.
    """
    return {
        "session": {
            "type": "realtime",
            "model": settings.realtime_model,
            "audio": {"output": {"voice": settings.realtime_voice}},
            "input_audio_transcription": {
                "model": settings.input_transcription_model,
            },
        },
    }


# =============================================================================
# Session
# =============================================================================


class RealtimeSession:
    """Event bookkeeping for one realtime data channel."""

    def __init__(
        self,
        send: Transport,
        event_log: EventLog | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize a closed session.

        Args:
            send: Delivers a JSON-encoded client event to the server
            event_log: Log receiving client and server events
            settings: Session settings (default: process settings)
        """
        self._send = send
        self.event_log = event_log if event_log is not None else EventLog()
        self._settings = settings or get_settings()
        self._active = False

    @property
    def is_active(self) -> bool:
        return self._active

    def open(self) -> None:
        """Handle the data channel opening.

        Starts a fresh event log (which resets any transcript fed from it)
        and enables input audio transcription for the session.
        """
        self._active = True
        self.event_log.clear()
        logger.info("realtime_session_opened", model=self._settings.realtime_model)
        self.send_client_event(build_session_update(self._settings))

    def close(self) -> None:
        """Handle the data channel closing. The event log is kept."""
        self._active = False
        logger.info("realtime_session_closed", events=len(self.event_log))

    def send_client_event(self, event: dict[str, Any]) -> dict[str, Any]:
        """Send a client event and record it in the event log.

        The event gets an event_id if it has none. The local timestamp is
        added only after sending since the server does not expect it.

        Returns:
            The event as recorded in the log

        Raises:
            SessionNotActiveError: If the data channel is not open
        """
        if not self._active:
            logger.error("client_event_not_sent", event_type=event.get("type"))
            raise SessionNotActiveError(event.get("type"))

        if not event.get("event_id"):
            event["event_id"] = generate_event_id()

        self._send(json.dumps(event))
        self.event_log.append(event)
        return event

    def send_text_message(self, text: str) -> None:
        """Send a typed user message and request an audio+text response."""
        self.send_client_event(build_text_message(text))
        self.send_client_event(build_response_create(["audio", "text"]))

    def receive(self, payload: str | bytes) -> dict[str, Any] | None:
        """Handle a server message from the data channel.

        Returns:
            The decoded event, or None if the payload was not a JSON object
        """
        try:
            event = json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("server_event_malformed", error=str(e))
            return None

        if not isinstance(event, dict):
            logger.warning("server_event_not_object", value_type=type(event).__name__)
            return None

        self.event_log.append(event)

        if (
            event.get("type") == INPUT_TRANSCRIPTION_COMPLETED
            and self._settings.auto_response_on_transcription
            and self._active
        ):
            # The user finished speaking; let the assistant take its turn.
            self.send_client_event(build_response_create())

        return event
