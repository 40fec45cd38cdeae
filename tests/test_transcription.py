"""Tests for the Whisper API transcription provider."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

from nara.errors import TranscriptionError
from nara.services.transcription import WhisperAPIProvider


def _client(**create_kwargs) -> MagicMock:
    client = MagicMock()
    client.audio.transcriptions.create = AsyncMock(**create_kwargs)
    return client


@pytest.fixture
def audio_file(tmp_path):
    path = tmp_path / "audio-temp.wav"
    path.write_bytes(b"RIFF0000WAVE")
    return path


class TestWhisperAPIProvider:
    def test_name_includes_model(self):
        assert WhisperAPIProvider(client=MagicMock(), model="whisper-1").name == "openai-whisper-1"

    @pytest.mark.asyncio
    async def test_returns_text(self, audio_file):
        client = _client(return_value=SimpleNamespace(text="hello there"))
        provider = WhisperAPIProvider(client=client)

        assert await provider.transcribe(audio_file) == "hello there"
        assert client.audio.transcriptions.create.await_args.kwargs["model"] == "whisper-1"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", None])
    async def test_empty_text_fails(self, audio_file, text):
        provider = WhisperAPIProvider(client=_client(return_value=SimpleNamespace(text=text)))

        with pytest.raises(TranscriptionError, match="Transcription failed"):
            await provider.transcribe(audio_file)

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        provider = WhisperAPIProvider(client=_client())

        with pytest.raises(TranscriptionError, match="not found"):
            await provider.transcribe(tmp_path / "nope.wav")

    @pytest.mark.asyncio
    async def test_api_error(self, audio_file):
        request = httpx.Request("POST", "https://api.openai.com/v1/audio/transcriptions")
        provider = WhisperAPIProvider(
            client=_client(side_effect=openai.APIConnectionError(request=request))
        )

        with pytest.raises(TranscriptionError):
            await provider.transcribe(audio_file)

    @pytest.mark.asyncio
    async def test_missing_key(self, audio_file, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

        with pytest.raises(TranscriptionError, match="no OpenAI API key"):
            await WhisperAPIProvider().transcribe(audio_file)
