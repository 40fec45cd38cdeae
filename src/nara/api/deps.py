"""FastAPI dependencies."""

from __future__ import annotations

from nara.config import Settings
from nara.pipeline import AssessmentPipeline, StateCallback
from nara.services.artifacts import LocalArtifactStore
from nara.services.cache import JsonFileResultCache
from nara.services.completion import create_completion_provider
from nara.services.media import FFmpegMediaExtractor
from nara.services.transcription import WhisperAPIProvider

_pipeline: AssessmentPipeline | None = None


def build_pipeline(
    settings: Settings,
    state_callback: StateCallback | None = None,
) -> AssessmentPipeline:
    """Wire the pipeline with the collaborators configured in ``settings``."""
    store = LocalArtifactStore(settings.artifacts_dir, settings.public_base_url)
    return AssessmentPipeline(
        cache=JsonFileResultCache(settings.cache_dir),
        extractor=FFmpegMediaExtractor(
            store,
            temp_dir=settings.temp_dir,
            ffmpeg_path=settings.ffmpeg_path,
            ffprobe_path=settings.ffprobe_path,
        ),
        transcriber=WhisperAPIProvider(
            api_key=settings.openai_api_key,
            model=settings.transcription_model,
        ),
        completion=create_completion_provider(settings),
        store=store,
        temp_dir=settings.temp_dir,
        state_callback=state_callback,
    )


def init_pipeline(settings: Settings) -> AssessmentPipeline:
    """Initialize the process-wide pipeline (called at app startup)."""
    global _pipeline
    _pipeline = build_pipeline(settings)
    return _pipeline


def get_pipeline() -> AssessmentPipeline:
    """Dependency that provides the AssessmentPipeline instance."""
    if _pipeline is None:
        raise RuntimeError("AssessmentPipeline not initialized; call init_pipeline() first")
    return _pipeline
