"""Tests for artifact storage and download."""

import httpx
import pytest

from nara.errors import ArtifactError
from nara.services.artifacts import LocalArtifactStore, download_url


@pytest.fixture
def store(tmp_path):
    return LocalArtifactStore(tmp_path / "artifacts", "http://localhost:8000/")


@pytest.fixture
def frame_file(tmp_path):
    path = tmp_path / "frame-001.jpeg"
    path.write_bytes(b"jpeg-bytes")
    return path


class TestLocalArtifactStore:
    @pytest.mark.asyncio
    async def test_upload_copies_and_returns_public_url(self, store, frame_file, tmp_path):
        stored = await store.upload(frame_file, folder="frames")

        assert stored.url.startswith("http://localhost:8000/api/uploads/frames/")
        assert stored.url.endswith("-frame-001.jpeg")
        assert stored.name.startswith("frames/")
        assert stored.format == "jpeg"
        assert stored.size == len(b"jpeg-bytes")
        assert frame_file.exists()
        copies = list((tmp_path / "artifacts" / "frames").iterdir())
        assert len(copies) == 1
        assert copies[0].read_bytes() == b"jpeg-bytes"

    @pytest.mark.asyncio
    async def test_same_file_twice_gets_distinct_names(self, store, frame_file):
        a = await store.upload(frame_file, folder="frames")
        b = await store.upload(frame_file, folder="frames")

        assert a.url != b.url

    @pytest.mark.asyncio
    async def test_upload_missing_file(self, store, tmp_path):
        with pytest.raises(ArtifactError):
            await store.upload(tmp_path / "gone.wav", folder="audio")

    @pytest.mark.asyncio
    async def test_download_own_artifact_from_disk(self, store, frame_file, tmp_path):
        stored = await store.upload(frame_file, folder="frames")
        dest = tmp_path / "work" / "copy.jpeg"

        result = await store.download(stored.url, dest)

        assert result == dest
        assert dest.read_bytes() == b"jpeg-bytes"

    @pytest.mark.asyncio
    async def test_download_rejects_path_escape(self, store, tmp_path):
        url = "http://localhost:8000/api/uploads/../../secret.txt"

        with pytest.raises(ArtifactError, match="escapes"):
            await store.download(url, tmp_path / "out")

    @pytest.mark.asyncio
    async def test_download_missing_artifact(self, store, tmp_path):
        url = "http://localhost:8000/api/uploads/audio/nothing.wav"

        with pytest.raises(ArtifactError):
            await store.download(url, tmp_path / "out.wav")


class TestDownloadUrl:
    @pytest.mark.asyncio
    async def test_streams_body_to_file(self, tmp_path):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/audio.wav"
            return httpx.Response(200, content=b"remote-audio")

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            dest = await download_url(
                "https://cdn.example.com/audio.wav", tmp_path / "a" / "b.wav", client=client
            )

        assert dest.read_bytes() == b"remote-audio"

    @pytest.mark.asyncio
    async def test_non_200(self, tmp_path):
        transport = httpx.MockTransport(lambda request: httpx.Response(404))

        async with httpx.AsyncClient(transport=transport) as client:
            with pytest.raises(ArtifactError, match="HTTP 404"):
                await download_url("https://cdn.example.com/x", tmp_path / "x", client=client)

    @pytest.mark.asyncio
    async def test_connection_error(self, tmp_path):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(ArtifactError, match="Failed to download"):
                await download_url("https://cdn.example.com/x", tmp_path / "x", client=client)
