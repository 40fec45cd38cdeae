"""Data models for NARA."""

from nara.models.assessment import (
    SEGMENT_NAMES,
    AssessmentDocument,
    AssessmentPayload,
    CategorizedFrames,
    ContentRecord,
    GeneralResultItem,
    ResultItem,
    TranscriptSegments,
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
from nara.models.pipeline import PipelineState

__all__ = [
    # Media
    "Frame",
    "StoredArtifact",
    "AudioArtifact",
    "VideoFile",
    "UploadInfo",
    "ExtractionSettings",
    "FrameExtraction",
    # Assessment
    "SEGMENT_NAMES",
    "CategorizedFrames",
    "TranscriptSegments",
    "ResultItem",
    "GeneralResultItem",
    "AssessmentDocument",
    "AssessmentPayload",
    "ContentRecord",
    # Pipeline
    "PipelineState",
]
