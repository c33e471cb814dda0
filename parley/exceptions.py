"""Parley exceptions."""

from __future__ import annotations


class ParleyError(Exception):
    """Base class for all Parley errors."""


class TranscriptStateError(ParleyError):
    """Raised when a transcript entry is asked for an illegal transition.

    Finalized entries are immutable: extending or re-finalizing one is a
    programming error, never the result of a bad event.
    """

    def __init__(self, entry_id: str, operation: str) -> None:
        super().__init__(f"Cannot {operation} finalized transcript entry {entry_id}")
        self.entry_id = entry_id
        self.operation = operation


class SessionNotActiveError(ParleyError):
    """Raised when a client event is sent without an open channel."""

    def __init__(self, event_type: str | None = None) -> None:
        message = "Realtime session is not active"
        if event_type:
            message = f"{message}; cannot send {event_type}"
        super().__init__(message)
        self.event_type = event_type
