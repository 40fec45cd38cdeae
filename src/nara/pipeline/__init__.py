"""Pipeline module for NARA."""

from nara.pipeline.assessment import AssessmentPipeline, StateCallback
from nara.pipeline.context import AssessmentRun

__all__ = ["AssessmentPipeline", "AssessmentRun", "StateCallback"]
