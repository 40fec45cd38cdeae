"""Narrative-arc assessment pipeline.

Run flow::

    hashing -> cache_lookup -> cache_hit -> done
                            -> extracting -> transcribing -> segmenting
                               -> evaluating -> summarizing -> validating
                               -> persisting -> done

Any failure moves the run to ``failed`` and is re-raised unchanged. The
upload and the run's scratch files are removed on every exit path.

Identical uploads running at the same time are not serialized: both may miss
the cache, both compute, and the cache keeps the last write.
"""

import asyncio
import logging
import shutil
from collections.abc import Awaitable, Callable, Sequence
from pathlib import Path
from typing import Any, TypeVar

from pydantic import ValidationError

from nara.errors import InvalidResultShape
from nara.models.assessment import SEGMENT_NAMES, AssessmentDocument, AssessmentPayload
from nara.models.media import AudioArtifact, ExtractionSettings, Frame, FrameExtraction, UploadInfo
from nara.models.pipeline import PipelineState
from nara.pipeline.context import AssessmentRun
from nara.services.completion import complete_json
from nara.services.identifier import hash_file
from nara.services.interfaces import (
    IArtifactStore,
    ICompletionProvider,
    IMediaExtractor,
    IResultCache,
    ITranscriptionProvider,
)
from nara.services.prompts import build_messages, build_segment_prompt, build_summary_prompt
from nara.services.segmentation import categorize_frames, split_transcript
from nara.services.validation import has_content, is_assessment_document

logger = logging.getLogger(__name__)

StateCallback = Callable[[PipelineState, str | None], None]

T = TypeVar("T")


async def _gather_all(*aws: Awaitable[T]) -> list[T]:
    """Run awaitables concurrently; cancel the rest as soon as one fails."""
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class AssessmentPipeline:
    """Turns an uploaded video into a cached, validated assessment.

    All collaborators are injected. One pipeline instance serves many runs;
    per-run state lives in :class:`AssessmentRun`.
    """

    def __init__(
        self,
        cache: IResultCache,
        extractor: IMediaExtractor,
        transcriber: ITranscriptionProvider,
        completion: ICompletionProvider,
        store: IArtifactStore,
        temp_dir: Path,
        state_callback: StateCallback | None = None,
    ) -> None:
        self._cache = cache
        self._extractor = extractor
        self._transcriber = transcriber
        self._completion = completion
        self._store = store
        self._temp_dir = Path(temp_dir)
        self._state_callback = state_callback

    async def run(
        self,
        video_path: Path,
        upload: UploadInfo,
        settings: ExtractionSettings | None = None,
    ) -> AssessmentPayload:
        """Assess a video, returning the cached result when the content is known.

        Args:
            video_path: Uploaded video; the pipeline takes ownership and deletes it
            upload: Upload metadata
            settings: Frame extraction settings (defaults if None)

        Returns:
            AssessmentPayload with the document, audio metadata and frames

        Raises:
            OSError: If the upload cannot be read
            ExtractionError, ArtifactError, TranscriptionError, CompletionError,
            JsonParseError, InvalidResultShape, CacheError: From the failing state
        """
        run = AssessmentRun(
            video_path=Path(video_path),
            upload=upload,
            settings=settings or ExtractionSettings(),
            temp_root=self._temp_dir,
        )
        try:
            return await self._execute(run)
        except Exception:
            logger.error("Assessment failed during '%s' (%s)", run.state.value, run.identifier)
            self._transition(run, PipelineState.FAILED)
            raise
        finally:
            self._cleanup(run)

    async def _execute(self, run: AssessmentRun) -> AssessmentPayload:
        self._transition(run, PipelineState.HASHING)
        run.identifier = hash_file(run.video_path)
        logger.info("File hash identifier: %s", run.identifier)

        self._transition(run, PipelineState.CACHE_LOOKUP)
        existing = await self._cache.get(run.identifier)
        if existing is not None:
            logger.info("Result already cached for %s", run.identifier)
            self._transition(run, PipelineState.CACHE_HIT)
            self._transition(run, PipelineState.DONE)
            return existing.result
        logger.info("No cached result for %s, processing", run.identifier)

        self._transition(run, PipelineState.EXTRACTING)
        run.audio, run.extraction = await self._extract(run)

        self._transition(run, PipelineState.TRANSCRIBING)
        run.transcript = await self._transcribe(run, run.audio)

        self._transition(run, PipelineState.SEGMENTING)
        run.categories = categorize_frames(run.extraction.frames)
        run.segments = split_transcript(run.transcript, run.categories)

        self._transition(run, PipelineState.EVALUATING)
        results = await _gather_all(
            *(
                self._evaluate_segment(
                    name,
                    run.segments.segment(name),
                    run.categories.bucket(name),
                )
                for name in SEGMENT_NAMES
            )
        )
        run.segment_results = dict(zip(SEGMENT_NAMES, results))

        self._transition(run, PipelineState.SUMMARIZING)
        general = await self._summarize(run.segment_results, run.segments.general)

        self._transition(run, PipelineState.VALIDATING)
        document = self._validate({"general": general, **run.segment_results})

        self._transition(run, PipelineState.PERSISTING)
        payload = AssessmentPayload(result=document, audio=run.audio, frames=run.categories)
        record = await self._cache.create(run.identifier, payload)

        self._transition(run, PipelineState.DONE)
        return record.result

    async def _extract(self, run: AssessmentRun) -> tuple[AudioArtifact, FrameExtraction]:
        audio, extraction = await _gather_all(
            self._extractor.extract_audio(run.video_path),
            self._extractor.extract_frames(run.video_path, run.upload, run.settings),
        )
        logger.info(
            "Extraction complete: %.1fs audio, %d frames",
            audio.duration,
            len(extraction.frames),
        )
        return audio, extraction

    async def _transcribe(self, run: AssessmentRun, audio: AudioArtifact) -> str:
        if audio.transcript:
            return audio.transcript

        working_dir = run.ensure_working_dir()
        local_audio = working_dir / f"audio-temp.{audio.format or 'wav'}"
        await self._store.download(audio.url, local_audio)
        try:
            return await self._transcriber.transcribe(local_audio)
        finally:
            local_audio.unlink(missing_ok=True)

    async def _evaluate_segment(
        self,
        name: str,
        transcript: str,
        frames: Sequence[Frame],
    ) -> Any:
        prompt = build_segment_prompt(name, transcript, frames)
        result = await complete_json(self._completion, build_messages(prompt))
        if not has_content(result):
            logger.warning("Segment '%s' came back without recommendations or indicators", name)
        return result

    async def _summarize(self, segment_results: dict[str, Any], transcript: str) -> Any:
        prompt = build_summary_prompt(segment_results, transcript)
        return await complete_json(self._completion, build_messages(prompt))

    @staticmethod
    def _validate(document: dict[str, Any]) -> AssessmentDocument:
        if not is_assessment_document(document):
            raise InvalidResultShape(
                "Invalid result structure from completion service "
                "(does not match expected interface)"
            )
        try:
            return AssessmentDocument.model_validate(document)
        except ValidationError as e:
            raise InvalidResultShape(f"Invalid result structure: {e}") from e

    def _transition(self, run: AssessmentRun, state: PipelineState) -> None:
        run.state = state
        logger.info("Run %s -> %s", run.identifier or "<unhashed>", state.value)
        if self._state_callback:
            self._state_callback(state, run.identifier)

    def _cleanup(self, run: AssessmentRun) -> None:
        """Remove the upload and scratch files; failures are logged, not raised."""
        try:
            run.video_path.unlink(missing_ok=True)
        except OSError:
            logger.exception("Failed to remove upload: %s", run.video_path)

        if run.working_dir is not None:
            try:
                shutil.rmtree(run.working_dir)
            except FileNotFoundError:
                pass
            except OSError:
                logger.exception("Failed to remove working dir: %s", run.working_dir)
