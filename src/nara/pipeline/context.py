"""Per-invocation state of an assessment run."""

import tempfile
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from nara.models.assessment import CategorizedFrames, TranscriptSegments
from nara.models.media import AudioArtifact, ExtractionSettings, FrameExtraction, UploadInfo
from nara.models.pipeline import PipelineState


class AssessmentRun(BaseModel):
    """Context owned by a single pipeline invocation.

    It accumulates intermediate results as the run moves through its states.
    The upload and the working directory belong to this run alone and are
    removed when it ends.
    """

    video_path: Path = Field(..., description="Uploaded video (deleted when the run ends)")
    upload: UploadInfo = Field(..., description="Upload metadata")
    settings: ExtractionSettings = Field(default_factory=ExtractionSettings)
    temp_root: Path = Field(..., description="Directory under which the working dir is created")
    working_dir: Path | None = Field(None, description="Scratch directory for this run")

    state: PipelineState = PipelineState.INIT
    identifier: str | None = None

    audio: AudioArtifact | None = None
    extraction: FrameExtraction | None = None
    transcript: str | None = None
    categories: CategorizedFrames | None = None
    segments: TranscriptSegments | None = None
    segment_results: dict[str, Any] = Field(default_factory=dict)

    def ensure_working_dir(self) -> Path:
        """Create the scratch directory on first use."""
        if self.working_dir is None:
            self.temp_root.mkdir(parents=True, exist_ok=True)
            self.working_dir = Path(tempfile.mkdtemp(dir=self.temp_root, prefix="run-"))
        return self.working_dir
