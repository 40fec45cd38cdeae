"""Content-addressed identifiers for uploaded videos."""

import hashlib
from pathlib import Path
from typing import BinaryIO

DEFAULT_ALGORITHM = "sha256"
CHUNK_SIZE = 1024 * 1024


def hash_stream(stream: BinaryIO, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """Digest a readable binary stream chunk by chunk.

    Args:
        stream: Binary stream positioned at the start of the content
        algorithm: hashlib algorithm name

    Returns:
        Lowercase hex digest

    Raises:
        OSError: If the stream cannot be read
    """
    digest = hashlib.new(algorithm)
    for chunk in iter(lambda: stream.read(CHUNK_SIZE), b""):
        digest.update(chunk)
    return digest.hexdigest()


def hash_file(path: Path, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """Digest a file on disk without loading it into memory."""
    with open(path, "rb") as f:
        return hash_stream(f, algorithm)
