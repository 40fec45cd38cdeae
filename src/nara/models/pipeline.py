"""Pipeline-related data models."""

from enum import Enum


class PipelineState(str, Enum):
    """States of a single assessment run."""

    INIT = "init"
    HASHING = "hashing"
    CACHE_LOOKUP = "cache_lookup"
    CACHE_HIT = "cache_hit"
    EXTRACTING = "extracting"
    TRANSCRIBING = "transcribing"
    SEGMENTING = "segmenting"
    EVALUATING = "evaluating"
    SUMMARIZING = "summarizing"
    VALIDATING = "validating"
    PERSISTING = "persisting"
    DONE = "done"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """Whether no further transition is possible."""
        return self in (PipelineState.DONE, PipelineState.FAILED)
