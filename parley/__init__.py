"""Parley: live transcripts for realtime voice-assistant sessions."""

__version__ = "0.1.0"
