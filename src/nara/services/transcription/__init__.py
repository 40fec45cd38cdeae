"""Speech-to-text transcription."""

from nara.services.transcription.providers import WhisperAPIProvider

__all__ = ["WhisperAPIProvider"]
