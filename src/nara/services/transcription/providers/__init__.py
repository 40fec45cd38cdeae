"""Transcription providers."""

from nara.services.transcription.providers.whisper import WhisperAPIProvider

__all__ = ["WhisperAPIProvider"]
