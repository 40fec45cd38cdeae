"""Video assessment endpoint."""

from __future__ import annotations

import logging
from pathlib import Path
from uuid import uuid4

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse

from nara.api.deps import get_pipeline
from nara.api.schemas import ErrorResponse
from nara.config import settings
from nara.models.media import ExtractionSettings, UploadInfo
from nara.pipeline import AssessmentPipeline

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["assessment"])

_COPY_CHUNK_SIZE = 1024 * 1024


async def _save_upload(upload: UploadFile, upload_dir: Path) -> Path:
    """Stream an upload to disk under a random name.

    A partially written file is removed if the read or write fails.
    """
    upload_dir.mkdir(parents=True, exist_ok=True)
    dest = upload_dir / uuid4().hex
    try:
        with open(dest, "wb") as f:
            while chunk := await upload.read(_COPY_CHUNK_SIZE):
                f.write(chunk)
    except BaseException:
        dest.unlink(missing_ok=True)
        raise
    return dest


@router.post(
    "/main",
    responses={
        400: {"model": ErrorResponse, "description": "No video file uploaded"},
        500: {"model": ErrorResponse, "description": "Assessment failed"},
    },
)
async def assess_video(
    video: UploadFile | None = File(None),
    interval: str | None = Form(None),
    format: str | None = Form(None),
    quality: str | None = Form(None),
    pipeline: AssessmentPipeline = Depends(get_pipeline),
) -> JSONResponse:
    """Assess an uploaded video and return the payload (cached by content)."""
    if video is None or not video.filename:
        return JSONResponse(status_code=400, content={"message": "No video file uploaded"})

    input_path: Path | None = None
    try:
        input_path = await _save_upload(video, settings.upload_dir)
        upload = UploadInfo(
            filename=input_path.name,
            content_type=video.content_type,
            size=input_path.stat().st_size,
        )
        extraction_settings = ExtractionSettings.from_form(
            interval,
            format,
            quality,
            defaults=ExtractionSettings(
                interval=settings.frame_interval,
                format=settings.frame_format,
                quality=settings.frame_quality,
            ),
        )
        payload = await pipeline.run(input_path, upload, extraction_settings)
    except Exception as e:
        logger.exception("Assessment request failed")
        if input_path is not None:
            input_path.unlink(missing_ok=True)
        return JSONResponse(
            status_code=500,
            content={"message": "Sorry there's a problem", "error": str(e)},
        )

    return JSONResponse(status_code=200, content=payload.model_dump(mode="json", by_alias=True))
