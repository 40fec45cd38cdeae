"""Tests for the HTTP API."""

import json

import pytest
from fastapi.testclient import TestClient

from nara import __version__
from nara.api.deps import get_pipeline
from nara.api.routes import assessment
from nara.config import settings
from nara.errors import CompletionError
from nara.main import app


class _StubPipeline:
    """Records the arguments of each run and returns a canned payload."""

    def __init__(self, payload=None, error=None):
        self.payload = payload
        self.error = error
        self.calls = []

    async def run(self, video_path, upload, extraction_settings=None):
        self.calls.append(
            {
                "exists": video_path.exists(),
                "content": video_path.read_bytes(),
                "upload": upload,
                "settings": extraction_settings,
            }
        )
        if self.error is not None:
            raise self.error
        video_path.unlink()
        return self.payload


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "upload_dir", path)
    return path


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


def _use(pipeline):
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    return pipeline


class TestHealth:
    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json() == {"status": 200, "message": f"Hello World {settings.app_name}"}

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": __version__}


class TestAssessEndpoint:
    def test_missing_video(self, client, upload_dir):
        pipeline = _use(_StubPipeline())

        response = client.post("/api/main", data={"interval": "1"})

        assert response.status_code == 400
        assert response.json() == {"message": "No video file uploaded"}
        assert pipeline.calls == []

    def test_success(self, client, upload_dir, payload):
        pipeline = _use(_StubPipeline(payload=payload))

        response = client.post(
            "/api/main",
            files={"video": ("clip.mp4", b"video-bytes", "video/mp4")},
            data={"interval": "2", "format": "PNG", "quality": "bogus"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["result"]["general"]["summary"] == payload.result.general.summary
        assert body["result"]["opening"]["assessmentIndicators"]
        assert body["frames"]["maxTimestamp"] == payload.frames.max_timestamp
        assert body["audio"]["url"] == payload.audio.url

        call = pipeline.calls[0]
        assert call["exists"]
        assert call["content"] == b"video-bytes"
        assert call["upload"].content_type == "video/mp4"
        assert call["upload"].size == len(b"video-bytes")
        assert call["settings"].interval == 2.0
        assert call["settings"].format == "png"
        assert call["settings"].quality == settings.frame_quality

    def test_defaults_from_settings(self, client, upload_dir, payload):
        pipeline = _use(_StubPipeline(payload=payload))

        client.post("/api/main", files={"video": ("clip.mp4", b"x", "video/mp4")})

        s = pipeline.calls[0]["settings"]
        assert (s.interval, s.format, s.quality) == (
            settings.frame_interval,
            settings.frame_format,
            settings.frame_quality,
        )

    def test_pipeline_failure(self, client, upload_dir):
        _use(_StubPipeline(error=CompletionError("OpenAI API error: timeout")))

        response = client.post(
            "/api/main", files={"video": ("clip.mp4", b"video-bytes", "video/mp4")}
        )

        assert response.status_code == 500
        assert response.json() == {
            "message": "Sorry there's a problem",
            "error": "OpenAI API error: timeout",
        }
        assert list(upload_dir.iterdir()) == []

    def test_openapi_declares_error_responses(self, client):
        openapi = client.get("/openapi.json").json()

        responses = openapi["paths"]["/api/main"]["post"]["responses"]
        for code in ("400", "500"):
            schema = responses[code]["content"]["application/json"]["schema"]
            assert schema["$ref"].endswith("/ErrorResponse")


class _DroppingUpload:
    """Upload whose connection drops after the first chunk."""

    filename = "clip.mp4"
    content_type = "video/mp4"

    def __init__(self):
        self.reads = 0

    async def read(self, size=-1):
        self.reads += 1
        if self.reads == 1:
            return b"0123456789"
        raise OSError("client disconnected")


class TestPartialUpload:
    @pytest.mark.asyncio
    async def test_interrupted_upload_is_removed(self, upload_dir):
        pipeline = _StubPipeline()

        response = await assessment.assess_video(
            video=_DroppingUpload(),
            interval=None,
            format=None,
            quality=None,
            pipeline=pipeline,
        )

        assert response.status_code == 500
        assert json.loads(response.body)["error"] == "client disconnected"
        assert pipeline.calls == []
        assert list(upload_dir.iterdir()) == []
