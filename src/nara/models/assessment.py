"""Assessment data models: narrative segments and the AI result document."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from nara.models.media import AudioArtifact, Frame

# Fixed narrative order; the categorizer and splitter both walk it.
SEGMENT_NAMES: tuple[str, ...] = ("opening", "setup", "main", "climax", "closing")


class CategorizedFrames(BaseModel):
    """Frames partitioned into the five narrative segments."""

    model_config = ConfigDict(populate_by_name=True)

    opening: list[Frame] = Field(default_factory=list)
    setup: list[Frame] = Field(default_factory=list)
    main: list[Frame] = Field(default_factory=list)
    climax: list[Frame] = Field(default_factory=list)
    closing: list[Frame] = Field(default_factory=list)
    max_timestamp: float = Field(default=0.0, alias="maxTimestamp")

    def bucket(self, name: str) -> list[Frame]:
        """Return the frames of one segment."""
        if name not in SEGMENT_NAMES:
            raise KeyError(name)
        return getattr(self, name)

    @property
    def total_frames(self) -> int:
        """Number of frames across all segments."""
        return sum(len(self.bucket(name)) for name in SEGMENT_NAMES)


class TranscriptSegments(BaseModel):
    """Transcript text per segment; ``general`` is the whole transcript."""

    opening: str = ""
    setup: str = ""
    main: str = ""
    climax: str = ""
    closing: str = ""
    general: str = ""

    def segment(self, name: str) -> str:
        """Return the transcript slice of one segment."""
        if name not in SEGMENT_NAMES:
            raise KeyError(name)
        return getattr(self, name)


class ResultItem(BaseModel):
    """Assessment of one segment.

    Keys beyond the two contract fields are kept as returned by the
    completion service and stored with the result.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    recomendations: list[str] = Field(default_factory=list, description="Actionable recommendations")
    assessment_indicators: dict[str, bool] = Field(
        default_factory=dict,
        alias="assessmentIndicators",
        description="Indicator name -> satisfied",
    )


class GeneralResultItem(ResultItem):
    """Whole-video result with a narrative summary."""

    summary: str = Field(..., description="What the video is about, start to end")


class AssessmentDocument(BaseModel):
    """Validated assessment of all segments plus the general summary."""

    general: GeneralResultItem
    opening: ResultItem
    setup: ResultItem
    main: ResultItem
    climax: ResultItem
    closing: ResultItem


class AssessmentPayload(BaseModel):
    """Assessment document plus the media data it was computed from."""

    result: AssessmentDocument
    audio: AudioArtifact
    frames: CategorizedFrames


class ContentRecord(BaseModel):
    """Cached payload keyed by the video's content identifier."""

    model_config = ConfigDict(populate_by_name=True)

    identifier: str = Field(..., description="Hex SHA-256 digest of the video bytes")
    result: AssessmentPayload
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), alias="createdAt"
    )
