"""Service interfaces (Protocols) for NARA.

These protocols define the contracts of the external collaborators the
assessment pipeline depends on. Implementations are injected into the
pipeline, which keeps the core testable with in-memory doubles.
"""

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from nara.models.assessment import AssessmentPayload, ContentRecord
from nara.models.media import (
    AudioArtifact,
    ExtractionSettings,
    FrameExtraction,
    StoredArtifact,
    UploadInfo,
)


class IMediaExtractor(Protocol):
    """Interface for audio and frame extraction."""

    async def extract_audio(self, video_path: Path) -> AudioArtifact:
        """Extract the audio track and upload it.

        Args:
            video_path: Path to the uploaded video

        Returns:
            AudioArtifact with url, duration and stream metadata
        """
        ...

    async def extract_frames(
        self,
        video_path: Path,
        upload: UploadInfo,
        settings: ExtractionSettings,
    ) -> FrameExtraction:
        """Extract frames at a fixed interval and upload them.

        Args:
            video_path: Path to the uploaded video
            upload: Metadata of the upload (name, MIME type, size)
            settings: Interval, image format and quality

        Returns:
            FrameExtraction with frames ordered by timestamp
        """
        ...


class ITranscriptionProvider(Protocol):
    """Interface for speech-to-text."""

    async def transcribe(self, audio_path: Path) -> str:
        """Transcribe an audio file to plain text.

        Raises:
            TranscriptionError: If no usable text is returned
        """
        ...


class ICompletionProvider(Protocol):
    """Interface for chat-style text generation returning strict JSON."""

    async def complete(self, messages: Sequence[dict[str, str]]) -> str:
        """Send messages and return the raw response text.

        Raises:
            CompletionError: If the service call fails
        """
        ...

    @property
    def name(self) -> str:
        """Provider name identifier."""
        ...


class IArtifactStore(Protocol):
    """Interface for media artifact storage."""

    async def upload(self, path: Path, folder: str) -> StoredArtifact:
        """Store a local file and return its public location."""
        ...

    async def download(self, url: str, dest: Path) -> Path:
        """Fetch a stored artifact to a local path."""
        ...


class IResultCache(Protocol):
    """Interface for content-addressed result persistence."""

    async def get(self, identifier: str) -> ContentRecord | None:
        """Return the record for an identifier, or None."""
        ...

    async def create(self, identifier: str, payload: AssessmentPayload) -> ContentRecord:
        """Persist a payload under an identifier."""
        ...
