"""Media extraction service implementation using FFmpeg."""

import asyncio
import json
import logging
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Any

from nara.errors import ExtractionError
from nara.models.media import (
    AudioArtifact,
    ExtractionSettings,
    Frame,
    FrameExtraction,
    UploadInfo,
    VideoFile,
)
from nara.services.interfaces import IArtifactStore

logger = logging.getLogger(__name__)

_CHANNEL_LAYOUTS = {1: "mono", 2: "stereo"}


def _jpeg_qscale(quality: float) -> int:
    """Map quality in [0, 1] onto ffmpeg's -q:v scale (2 best, 31 worst)."""
    quality = min(max(quality, 0.0), 1.0)
    return round(31 - quality * 29)


def _quality_options(settings: ExtractionSettings) -> list[str]:
    if settings.format in ("jpeg", "jpg"):
        return ["-q:v", str(_jpeg_qscale(settings.quality))]
    if settings.format == "webp":
        return ["-quality", str(round(min(max(settings.quality, 0.0), 1.0) * 100))]
    return []


def _find_stream(data: dict[str, Any], codec_type: str) -> dict[str, Any] | None:
    for stream in data.get("streams", []):
        if stream.get("codec_type") == codec_type:
            return stream
    return None


class FFmpegMediaExtractor:
    """Extracts audio and frames with FFmpeg and uploads them to an artifact store.

    Local staging files live in a per-call directory under ``temp_dir`` and are
    removed before the call returns.
    """

    def __init__(
        self,
        store: IArtifactStore,
        temp_dir: Path,
        ffmpeg_path: str = "ffmpeg",
        ffprobe_path: str = "ffprobe",
    ) -> None:
        self._store = store
        self._temp_dir = Path(temp_dir)
        self._ffmpeg = ffmpeg_path
        self._ffprobe = ffprobe_path

    async def _run(self, cmd: list[str]) -> subprocess.CompletedProcess[str]:
        try:
            result = await asyncio.to_thread(
                subprocess.run, cmd, capture_output=True, text=True
            )
        except OSError as e:
            raise ExtractionError(f"{cmd[0]} could not be started: {e}") from e

        if result.returncode != 0:
            raise ExtractionError(f"{Path(cmd[0]).name} failed: {result.stderr}")
        return result

    async def read_metadata(self, path: Path) -> dict[str, Any]:
        """Run ffprobe and return its JSON output.

        Args:
            path: Path to the media file

        Returns:
            Parsed ffprobe output with "format" and "streams"
        """
        cmd = [
            self._ffprobe,
            "-v", "quiet",
            "-print_format", "json",
            "-show_format",
            "-show_streams",
            str(path),
        ]
        result = await self._run(cmd)
        try:
            return json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise ExtractionError(f"ffprobe returned invalid JSON for {path.name}") from e

    def _staging_dir(self, prefix: str) -> Path:
        self._temp_dir.mkdir(parents=True, exist_ok=True)
        return Path(tempfile.mkdtemp(dir=self._temp_dir, prefix=prefix))

    async def extract_audio(self, video_path: Path) -> AudioArtifact:
        """Extract the audio track as 16-bit PCM WAV and upload it.

        Args:
            video_path: Path to input video

        Returns:
            AudioArtifact with url, duration, sample rate and channel layout
        """
        work_dir = self._staging_dir("audio-")
        try:
            audio_path = work_dir / f"{Path(video_path).stem}-audio.wav"
            await self._run([
                self._ffmpeg,
                "-y",
                "-i", str(video_path),
                "-vn",  # No video
                "-acodec", "pcm_s16le",
                "-f", "wav",
                str(audio_path),
            ])

            data = await self.read_metadata(audio_path)
            stream = _find_stream(data, "audio") or {}
            duration = float(data.get("format", {}).get("duration", 0) or 0)
            sample_rate = int(stream.get("sample_rate", 0) or 0) or None
            channels = stream.get("channels") or None
            channel_layout = stream.get("channel_layout") or _CHANNEL_LAYOUTS.get(channels)

            stored = await self._store.upload(audio_path, folder="audio")
        finally:
            shutil.rmtree(work_dir, ignore_errors=True)

        logger.info("Extracted audio: %.1fs, %s Hz, %s", duration, sample_rate, channel_layout)

        return AudioArtifact(
            url=stored.url,
            name=stored.name,
            format=stored.format,
            size=stored.size,
            duration=duration,
            sample_rate=sample_rate,
            channels=channels,
            channel_layout=channel_layout,
        )

    async def extract_frames(
        self,
        video_path: Path,
        upload: UploadInfo,
        settings: ExtractionSettings,
    ) -> FrameExtraction:
        """Extract one frame every ``settings.interval`` seconds and upload them.

        Args:
            video_path: Path to input video
            upload: Metadata of the original upload
            settings: Extraction settings

        Returns:
            FrameExtraction with frames in timestamp order

        Raises:
            ExtractionError: If the file has no video stream or ffmpeg fails
        """
        meta = await self.read_metadata(Path(video_path))
        video_stream = _find_stream(meta, "video")
        if video_stream is None:
            raise ExtractionError("No video stream found")

        work_dir = self._staging_dir("frames-")
        try:
            pattern = work_dir / f"frame-%03d.{settings.format}"
            await self._run([
                self._ffmpeg,
                "-y",
                "-i", str(video_path),
                "-vf", f"fps=1/{settings.interval}",
                *_quality_options(settings),
                str(pattern),
            ])

            files = sorted(work_dir.glob(f"*.{settings.format}"))
            stored = await asyncio.gather(
                *(self._store.upload(f, folder="frames") for f in files)
            )
        finally:
            shutil.rmtree(work_dir, ignore_errors=True)

        frames = [
            Frame(
                id=f"frame-{idx}",
                timestamp=round(idx * settings.interval, 3),
                url=artifact.url,
                size=artifact.size,
            )
            for idx, artifact in enumerate(stored)
        ]

        video_file = VideoFile(
            duration=float(meta.get("format", {}).get("duration", 0) or 0),
            width=video_stream.get("width"),
            height=video_stream.get("height"),
            format=upload.content_type,
            size=upload.size,
            name=upload.filename,
        )

        logger.info(
            "Extracted %d frames every %ss (%s, %s)",
            len(frames),
            settings.interval,
            settings.format,
            video_file.resolution or "unknown resolution",
        )

        return FrameExtraction(frames=frames, video_file=video_file, settings=settings)
