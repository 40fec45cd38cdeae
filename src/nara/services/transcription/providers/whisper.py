"""Whisper API transcription provider."""

import logging
import os
from pathlib import Path

import openai

from nara.errors import TranscriptionError

logger = logging.getLogger(__name__)


class WhisperAPIProvider:
    """Transcription provider using the OpenAI Whisper API.

    The client is created on first use so that a missing API key only
    matters when the transcription fallback is actually taken.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "whisper-1",
        client: openai.AsyncOpenAI | None = None,
    ) -> None:
        """Initialize WhisperAPIProvider.

        Args:
            api_key: OpenAI API key. Falls back to OPENAI_API_KEY env var.
            model: Transcription model name
            client: Preconfigured client (mainly for tests)
        """
        self._api_key = api_key or os.environ.get("OPENAI_API_KEY")
        self.model_name = model
        self._client = client

    @property
    def name(self) -> str:
        """Provider name identifier."""
        return f"openai-{self.model_name}"

    def _get_client(self) -> openai.AsyncOpenAI:
        if self._client is None:
            if not self._api_key:
                raise TranscriptionError("Transcription unavailable: no OpenAI API key")
            self._client = openai.AsyncOpenAI(api_key=self._api_key)
        return self._client

    async def transcribe(self, audio_path: Path) -> str:
        """Transcribe audio with Whisper.

        Args:
            audio_path: Path to the audio file

        Returns:
            Transcript text

        Raises:
            TranscriptionError: If the file is missing, the API fails or
                returns no text
        """
        audio_path = Path(audio_path)
        if not audio_path.exists():
            raise TranscriptionError(f"Audio file not found: {audio_path}")

        client = self._get_client()
        logger.info("Transcribing '%s' with %s", audio_path.name, self.name)

        try:
            with open(audio_path, "rb") as audio_file:
                response = await client.audio.transcriptions.create(
                    model=self.model_name,
                    file=audio_file,
                )
        except openai.APIError as e:
            raise TranscriptionError(f"Transcription failed: {e}") from e

        text = getattr(response, "text", None)
        if not text or not text.strip():
            raise TranscriptionError(f"Transcription failed: {response!r}")
        return text
