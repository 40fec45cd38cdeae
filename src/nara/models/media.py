"""Media-related data models."""

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_FRAME_INTERVAL = 0.8
DEFAULT_FRAME_FORMAT = "jpeg"
DEFAULT_FRAME_QUALITY = 0.8
FRAME_FORMATS = ("jpeg", "jpg", "png", "webp")


class Frame(BaseModel):
    """A still image extracted from the video at a known timestamp."""

    id: str = Field(..., description="Frame identifier (frame-<index>)")
    timestamp: float = Field(..., ge=0, description="Position in the video in seconds")
    url: str = Field(..., description="Public URL of the uploaded image")
    size: int = Field(default=0, description="Image size in bytes")


class StoredArtifact(BaseModel):
    """A file uploaded to the artifact store."""

    url: str = Field(..., description="Public URL")
    name: str = Field(..., description="Stored artifact name")
    format: str = Field(default="", description="File format (extension)")
    size: int = Field(default=0, description="Size in bytes")


class AudioArtifact(BaseModel):
    """Uploaded audio track extracted from the video."""

    model_config = ConfigDict(populate_by_name=True)

    url: str = Field(..., description="Public URL of the audio file")
    name: str = Field(default="", description="Stored artifact name")
    format: str = Field(default="wav", description="Audio container format")
    size: int = Field(default=0, description="Size in bytes")
    duration: float = Field(default=0.0, description="Duration in seconds")
    sample_rate: int | None = Field(None, alias="sampleRate", description="Sample rate in Hz")
    channels: int | None = Field(None, description="Number of channels")
    channel_layout: str | None = Field(
        None, alias="channelLayout", description="Channel layout (mono, stereo, ...)"
    )
    transcript: str | None = Field(
        None, description="Transcript, if the extractor already produced one"
    )


class VideoFile(BaseModel):
    """Metadata of the uploaded source video."""

    url: str | None = Field(None, description="Public URL (source video is not re-uploaded)")
    duration: float = Field(default=0.0, description="Duration in seconds")
    width: int | None = Field(None, description="Video width in pixels")
    height: int | None = Field(None, description="Video height in pixels")
    format: str | None = Field(None, description="MIME type of the upload")
    size: int = Field(default=0, description="Upload size in bytes")
    name: str = Field(default="", description="Stored upload name")

    @property
    def resolution(self) -> str | None:
        """Return resolution string (e.g., '1920x1080')."""
        if self.width and self.height:
            return f"{self.width}x{self.height}"
        return None


class UploadInfo(BaseModel):
    """Metadata about the uploaded file as received from the client."""

    model_config = ConfigDict(populate_by_name=True)

    filename: str = Field(..., description="Stored upload file name")
    content_type: str | None = Field(None, alias="contentType", description="MIME type")
    size: int = Field(default=0, description="Size in bytes")


def _positive_number(value: Any, default: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or number <= 0:
        return default
    return number


class ExtractionSettings(BaseModel):
    """Frame extraction settings echoed back with the frames."""

    interval: float = Field(default=DEFAULT_FRAME_INTERVAL, gt=0, description="Seconds between frames")
    format: str = Field(default=DEFAULT_FRAME_FORMAT, description="Image codec / extension")
    quality: float = Field(default=DEFAULT_FRAME_QUALITY, description="Image quality (0-1)")

    @field_validator("format")
    @classmethod
    def _known_format(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in FRAME_FORMATS:
            raise ValueError(f"Unsupported frame format: {value!r}")
        return value

    @classmethod
    def from_form(
        cls,
        interval: Any = None,
        format: str | None = None,
        quality: Any = None,
        defaults: "ExtractionSettings | None" = None,
    ) -> "ExtractionSettings":
        """Build settings from loosely typed request values.

        Missing, zero, negative or non-numeric values fall back to the defaults,
        as does any format outside FRAME_FORMATS.
        """
        base = defaults or cls()
        image_format = (format or "").strip().lower()
        return cls(
            interval=_positive_number(interval, base.interval),
            format=image_format if image_format in FRAME_FORMATS else base.format,
            quality=_positive_number(quality, base.quality),
        )


class FrameExtraction(BaseModel):
    """Result of frame extraction: uploaded frames plus video metadata."""

    model_config = ConfigDict(populate_by_name=True)

    frames: list[Frame] = Field(default_factory=list, description="Frames ordered by timestamp")
    video_file: VideoFile = Field(..., alias="videoFile", description="Source video metadata")
    settings: ExtractionSettings = Field(default_factory=ExtractionSettings)
