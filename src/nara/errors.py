"""Custom exceptions for NARA.

Stream and file access failures are not wrapped: they surface as the
built-in ``OSError`` (``IOError``).
"""


class NaraError(Exception):
    """Base exception for NARA."""

    pass


class ExtractionError(NaraError):
    """Media extraction (FFmpeg) failed."""

    pass


class ArtifactError(NaraError):
    """Uploading or fetching a media artifact failed."""

    pass


class TranscriptionError(NaraError):
    """Transcription returned no usable text."""

    pass


class CompletionError(NaraError):
    """Completion service call failed."""

    pass


class JsonParseError(NaraError):
    """Completion response was not valid JSON."""

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text


class InvalidResultShape(NaraError):
    """Aggregated assessment does not match the expected document shape."""

    pass


class CacheError(NaraError):
    """Result cache read or write failed."""

    pass
