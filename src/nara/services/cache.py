"""Content-addressed result caches.

Writes are last-write-wins: creating a record for an identifier that already
exists replaces it. Concurrent identical uploads may both compute and both
write; no per-identifier locking is done here.
"""

import asyncio
import logging
import os
import re
import tempfile
from pathlib import Path

from pydantic import ValidationError

from nara.errors import CacheError
from nara.models.assessment import AssessmentPayload, ContentRecord

logger = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(r"[0-9a-f]{16,128}")


def _check_identifier(identifier: str) -> None:
    if not _IDENTIFIER_RE.fullmatch(identifier):
        raise CacheError(f"Invalid content identifier: {identifier!r}")


class InMemoryResultCache:
    """Dict-backed cache for tests and ephemeral runs."""

    def __init__(self) -> None:
        self._records: dict[str, ContentRecord] = {}

    async def get(self, identifier: str) -> ContentRecord | None:
        return self._records.get(identifier)

    async def create(self, identifier: str, payload: AssessmentPayload) -> ContentRecord:
        record = ContentRecord(identifier=identifier, result=payload)
        self._records[identifier] = record
        return record

    def __len__(self) -> int:
        return len(self._records)


class JsonFileResultCache:
    """Stores one ``<identifier>.json`` file per record in a directory."""

    def __init__(self, directory: Path) -> None:
        """Initialize the cache.

        Args:
            directory: Directory holding the record files (created if missing)
        """
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path_for(self, identifier: str) -> Path:
        _check_identifier(identifier)
        return self.directory / f"{identifier}.json"

    async def get(self, identifier: str) -> ContentRecord | None:
        """Load a record.

        Raises:
            CacheError: If the record exists but cannot be read or decoded
        """
        path = self._path_for(identifier)
        return await asyncio.to_thread(self._read, path)

    async def create(self, identifier: str, payload: AssessmentPayload) -> ContentRecord:
        """Write a record atomically, replacing any existing one.

        Raises:
            CacheError: If the record cannot be written
        """
        path = self._path_for(identifier)
        record = ContentRecord(identifier=identifier, result=payload)
        await asyncio.to_thread(self._write, path, record)
        logger.info("Stored result for %s", identifier)
        return record

    @staticmethod
    def _read(path: Path) -> ContentRecord | None:
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise CacheError(f"Failed to read cache record {path.name}: {e}") from e

        try:
            return ContentRecord.model_validate_json(text)
        except ValidationError as e:
            raise CacheError(f"Corrupt cache record {path.name}: {e}") from e

    @staticmethod
    def _write(path: Path, record: ContentRecord) -> None:
        data = record.model_dump_json(by_alias=True, indent=2)
        tmp_name: str | None = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name:
                Path(tmp_name).unlink(missing_ok=True)
            raise CacheError(f"Failed to write cache record {path.name}: {e}") from e
