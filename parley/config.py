from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SESSION_INSTRUCTIONS = (
    "You are a friendly, professional voice assistant. Speak warmly and "
    "clearly, keep answers short, and ask a follow-up question when the "
    "user's request is vague. Respond in English unless the user clearly "
    "prefers another language."
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Realtime session
    realtime_model: str = Field(
        default="gpt-4o-realtime-preview",
        alias="REALTIME_MODEL",
    )
    realtime_voice: str = Field(
        default="marin",
        alias="REALTIME_VOICE",
        description="Output voice requested for assistant audio",
    )
    input_transcription_model: str = Field(
        default="whisper-1",
        alias="INPUT_TRANSCRIPTION_MODEL",
        description="Model used to transcribe the user's microphone audio",
    )
    session_instructions: str = Field(
        default=DEFAULT_SESSION_INSTRUCTIONS,
        alias="SESSION_INSTRUCTIONS",
        description="Instructions sent in session.update when the channel opens",
    )
    auto_response_on_transcription: bool = Field(
        default=True,
        alias="AUTO_RESPONSE_ON_TRANSCRIPTION",
        description=(
            "Send response.create after the user's speech has been transcribed "
            "so the assistant takes its turn"
        ),
    )

    # Transcript replay and export
    reset_on_session_created: bool = Field(
        default=True,
        alias="RESET_ON_SESSION_CREATED",
        description=(
            "Treat a session.created event in a recorded stream as a new "
            "session: the event log (and with it the transcript) is cleared"
        ),
    )
    transcript_export_prefix: str = Field(
        default="conversation-transcript",
        alias="TRANSCRIPT_EXPORT_PREFIX",
        description="Filename prefix for downloaded transcripts",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are read from environment variables and .env file once,
    then cached for the lifetime of the process.
    """
    return Settings()
