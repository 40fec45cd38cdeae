"""Structural checks for assessment JSON returned by the completion service.

These checks are shape-only: empty recommendation lists or indicator maps
pass. :func:`has_content` is the separate non-emptiness policy.
"""

from typing import Any

from nara.models.assessment import SEGMENT_NAMES


def is_assessment_indicator(value: Any) -> bool:
    """True if ``value`` is a mapping whose values are all booleans."""
    if not isinstance(value, dict):
        return False
    return all(isinstance(v, bool) for v in value.values())


def is_result_item(value: Any) -> bool:
    """True if ``value`` has a list of string recommendations and valid indicators."""
    if not isinstance(value, dict):
        return False
    recommendations = value.get("recomendations")
    return (
        isinstance(recommendations, list)
        and all(isinstance(r, str) for r in recommendations)
        and is_assessment_indicator(value.get("assessmentIndicators"))
    )


def is_assessment_document(value: Any) -> bool:
    """True if every segment is a result item and ``general`` carries a summary."""
    if not isinstance(value, dict):
        return False
    if not all(is_result_item(value.get(name)) for name in SEGMENT_NAMES):
        return False
    general = value.get("general")
    return is_result_item(general) and isinstance(general.get("summary"), str)


def has_content(value: Any) -> bool:
    """True if a result item has at least one recommendation and one indicator."""
    return (
        is_result_item(value)
        and len(value["recomendations"]) > 0
        and len(value["assessmentIndicators"]) > 0
    )
