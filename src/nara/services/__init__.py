"""Services module for NARA."""

from nara.services.artifacts import LocalArtifactStore
from nara.services.cache import InMemoryResultCache, JsonFileResultCache
from nara.services.interfaces import (
    IArtifactStore,
    ICompletionProvider,
    IMediaExtractor,
    IResultCache,
    ITranscriptionProvider,
)
from nara.services.media import FFmpegMediaExtractor

__all__ = [
    "IArtifactStore",
    "ICompletionProvider",
    "IMediaExtractor",
    "IResultCache",
    "ITranscriptionProvider",
    "LocalArtifactStore",
    "InMemoryResultCache",
    "JsonFileResultCache",
    "FFmpegMediaExtractor",
]
