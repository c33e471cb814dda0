"""Unit tests for Parley settings."""

import pytest

from parley.config import DEFAULT_SESSION_INSTRUCTIONS, Settings, get_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "REALTIME_MODEL",
        "REALTIME_VOICE",
        "INPUT_TRANSCRIPTION_MODEL",
        "SESSION_INSTRUCTIONS",
        "AUTO_RESPONSE_ON_TRANSCRIPTION",
        "RESET_ON_SESSION_CREATED",
        "TRANSCRIPT_EXPORT_PREFIX",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.realtime_model == "gpt-4o-realtime-preview"
        assert settings.realtime_voice == "marin"
        assert settings.input_transcription_model == "whisper-1"
        assert settings.session_instructions == DEFAULT_SESSION_INSTRUCTIONS
        assert settings.auto_response_on_transcription is True
        assert settings.reset_on_session_created is True
        assert settings.transcript_export_prefix == "conversation-transcript"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("REALTIME_MODEL", "gpt-realtime")
        monkeypatch.setenv("RESET_ON_SESSION_CREATED", "false")
        monkeypatch.setenv("TRANSCRIPT_EXPORT_PREFIX", "intake")

        settings = Settings(_env_file=None)

        assert settings.realtime_model == "gpt-realtime"
        assert settings.reset_on_session_created is False
        assert settings.transcript_export_prefix == "intake"

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()
