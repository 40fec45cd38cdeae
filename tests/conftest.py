"""Shared fixtures: in-process fakes for the pipeline's collaborators."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest

from nara.models.assessment import (
    AssessmentDocument,
    AssessmentPayload,
    CategorizedFrames,
)
from nara.models.media import (
    AudioArtifact,
    ExtractionSettings,
    Frame,
    FrameExtraction,
    StoredArtifact,
    UploadInfo,
    VideoFile,
)

SEGMENT_RESULT = {
    "recomendations": ["Tighten the pacing"],
    "assessmentIndicators": {"Engagement potential": True, "Audio clarity": False},
}
GENERAL_RESULT = {**SEGMENT_RESULT, "summary": "A product demo from intro to call to action."}
AUDIO_URL = "http://test/api/uploads/audio/abc-audio.wav"


def make_frames(timestamps: list[float]) -> list[Frame]:
    return [
        Frame(id=f"frame-{i}", timestamp=ts, url=f"http://test/api/uploads/frames/f{i}.jpeg")
        for i, ts in enumerate(timestamps)
    ]


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------

class FakeExtractor:
    """Returns canned audio and frames, tracking calls and overlap."""

    def __init__(self, frames: list[Frame], transcript: str | None = None, error: Exception | None = None):
        self.frames = frames
        self.transcript = transcript
        self.error = error
        self.audio_calls = 0
        self.frame_calls = 0
        self.in_flight = 0
        self.max_in_flight = 0

    async def _enter(self) -> None:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(0.01)
        self.in_flight -= 1
        if self.error is not None:
            raise self.error

    async def extract_audio(self, video_path: Path) -> AudioArtifact:
        self.audio_calls += 1
        await self._enter()
        return AudioArtifact(
            url=AUDIO_URL,
            name="audio/abc-audio",
            format="wav",
            size=4,
            duration=9.0,
            sample_rate=48000,
            channels=2,
            channel_layout="stereo",
            transcript=self.transcript,
        )

    async def extract_frames(
        self, video_path: Path, upload: UploadInfo, settings: ExtractionSettings
    ) -> FrameExtraction:
        self.frame_calls += 1
        await self._enter()
        return FrameExtraction(
            frames=self.frames,
            video_file=VideoFile(duration=9.0, format=upload.content_type, name=upload.filename),
            settings=settings,
        )


class FakeTranscriber:
    def __init__(self, text: str = "one two three four five six seven eight nine ten"):
        self.text = text
        self.paths: list[Path] = []

    @property
    def name(self) -> str:
        return "fake"

    async def transcribe(self, audio_path: Path) -> str:
        assert Path(audio_path).exists()
        self.paths.append(Path(audio_path))
        return self.text


class FakeCompletion:
    """Answers segment prompts and the summary prompt with canned JSON."""

    def __init__(self, segment_response: str | None = None, general_response: str | None = None):
        self.segment_response = segment_response or json.dumps(SEGMENT_RESULT)
        self.general_response = general_response or json.dumps(GENERAL_RESULT)
        self.prompts: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    @property
    def name(self) -> str:
        return "fake"

    async def complete(self, messages) -> str:
        prompt = messages[-1]["content"]
        self.prompts.append(prompt)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        await asyncio.sleep(0.01)
        self.in_flight -= 1
        if prompt.startswith("Do an assessment"):
            return self.segment_response
        return self.general_response


class FakeStore:
    def __init__(self):
        self.downloads: list[tuple[str, Path]] = []

    async def upload(self, path: Path, folder: str) -> StoredArtifact:
        return StoredArtifact(
            url=f"http://test/api/uploads/{folder}/{Path(path).name}",
            name=f"{folder}/{Path(path).stem}",
            format=Path(path).suffix.lstrip("."),
            size=Path(path).stat().st_size,
        )

    async def download(self, url: str, dest: Path) -> Path:
        self.downloads.append((url, Path(dest)))
        Path(dest).write_bytes(b"RIFF")
        return Path(dest)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def frames() -> list[Frame]:
    return make_frames([float(t) for t in range(10)])


@pytest.fixture
def extractor(frames) -> FakeExtractor:
    return FakeExtractor(frames)


@pytest.fixture
def transcriber() -> FakeTranscriber:
    return FakeTranscriber()


@pytest.fixture
def completion() -> FakeCompletion:
    return FakeCompletion()


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def upload() -> UploadInfo:
    return UploadInfo(filename="clip.mp4", content_type="video/mp4", size=16)


@pytest.fixture
def video_factory(tmp_path):
    """Write an upload file with the given bytes and return its path."""
    uploads = tmp_path / "uploads"
    uploads.mkdir()
    counter = iter(range(1000))

    def _make(content: bytes = b"fake video bytes") -> Path:
        path = uploads / f"upload-{next(counter)}"
        path.write_bytes(content)
        return path

    return _make


@pytest.fixture
def payload(frames) -> AssessmentPayload:
    categories = CategorizedFrames(opening=frames[:1], closing=frames[1:], max_timestamp=9.0)
    return AssessmentPayload(
        result=AssessmentDocument.model_validate(
            {name: SEGMENT_RESULT for name in ("opening", "setup", "main", "climax", "closing")}
            | {"general": GENERAL_RESULT}
        ),
        audio=AudioArtifact(url=AUDIO_URL, duration=9.0),
        frames=categories,
    )
