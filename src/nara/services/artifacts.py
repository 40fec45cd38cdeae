"""Artifact storage for extracted media (audio tracks and frame images)."""

import asyncio
import logging
import shutil
from pathlib import Path
from uuid import uuid4

import httpx

from nara.errors import ArtifactError
from nara.models.media import StoredArtifact

logger = logging.getLogger(__name__)

UPLOADS_MOUNT = "/api/uploads"


async def _stream_to_file(client: httpx.AsyncClient, url: str, dest: Path) -> None:
    try:
        async with client.stream("GET", url) as response:
            if response.status_code != 200:
                raise ArtifactError(
                    f"Download of {url} returned HTTP {response.status_code}"
                )
            with open(dest, "wb") as f:
                async for chunk in response.aiter_bytes():
                    f.write(chunk)
    except httpx.RequestError as e:
        raise ArtifactError(f"Failed to download {url}: {e}") from e


async def download_url(
    url: str,
    dest: Path,
    timeout: float = 60.0,
    client: httpx.AsyncClient | None = None,
) -> Path:
    """Stream a remote file to ``dest``.

    Args:
        url: Source URL
        dest: Destination path (parent directories are created)
        timeout: Request timeout when no client is given
        client: Optional shared client

    Raises:
        ArtifactError: If the request fails or returns a non-200 status
    """
    dest = Path(dest)
    dest.parent.mkdir(parents=True, exist_ok=True)

    if client is not None:
        await _stream_to_file(client, url, dest)
    else:
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as owned:
            await _stream_to_file(owned, url, dest)

    return dest

class LocalArtifactStore:
    """Stores artifacts under a directory served at ``/api/uploads``.

    Usage:
        store = LocalArtifactStore(Path("./artifacts"), "http://localhost:8000")
        stored = await store.upload(Path("frame-001.jpeg"), folder="frames")
        # stored.url == "http://localhost:8000/api/uploads/frames/<id>-frame-001.jpeg"
    """

    def __init__(
        self,
        root_dir: Path,
        public_base_url: str,
        timeout: float = 60.0,
    ) -> None:
        self.root_dir = Path(root_dir).resolve()
        self.public_prefix = f"{public_base_url.rstrip('/')}{UPLOADS_MOUNT}/"
        self.timeout = timeout

    async def upload(self, path: Path, folder: str) -> StoredArtifact:
        """Copy a local file into the store under a unique name.

        Args:
            path: File to store
            folder: Sub-folder (e.g. "audio", "frames")

        Returns:
            StoredArtifact with the public URL

        Raises:
            ArtifactError: If the copy fails
        """
        path = Path(path)
        stored_name = f"{uuid4().hex[:12]}-{path.name}"
        dest = self.root_dir / folder / stored_name

        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            await asyncio.to_thread(shutil.copyfile, path, dest)
            size = dest.stat().st_size
        except OSError as e:
            raise ArtifactError(f"Failed to store {path.name}: {e}") from e

        return StoredArtifact(
            url=f"{self.public_prefix}{folder}/{stored_name}",
            name=f"{folder}/{Path(stored_name).stem}",
            format=path.suffix.lstrip("."),
            size=size,
        )

    async def download(self, url: str, dest: Path) -> Path:
        """Fetch an artifact to ``dest``.

        URLs under this store's public prefix are copied from disk; anything
        else is downloaded over HTTP.
        """
        dest = Path(dest)
        if not url.startswith(self.public_prefix):
            return await download_url(url, dest, timeout=self.timeout)

        source = (self.root_dir / url[len(self.public_prefix):]).resolve()
        if not source.is_relative_to(self.root_dir):
            raise ArtifactError(f"Artifact URL escapes the store: {url}")

        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            await asyncio.to_thread(shutil.copyfile, source, dest)
        except OSError as e:
            raise ArtifactError(f"Failed to fetch {url}: {e}") from e

        logger.debug("Fetched local artifact %s -> %s", source, dest)
        return dest
