"""Shared helpers for completion providers."""

import json
import logging
from collections.abc import Sequence
from typing import Any

from nara.errors import JsonParseError
from nara.services.interfaces import ICompletionProvider

logger = logging.getLogger(__name__)


def parse_json_response(raw_text: str) -> Any:
    """Decode a completion response that is expected to be strict JSON.

    Markdown code fences around the JSON are tolerated.

    Args:
        raw_text: Raw text returned by the completion service

    Returns:
        Decoded JSON value

    Raises:
        JsonParseError: If the text is not valid JSON
    """
    text = raw_text.strip()
    if text.startswith("```"):
        lines = [line for line in text.split("\n") if not line.strip().startswith("```")]
        text = "\n".join(lines).strip()

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise JsonParseError(
            f"Invalid JSON from completion service: {raw_text[:500]}",
            raw_text=raw_text,
        ) from exc


async def complete_json(
    provider: ICompletionProvider,
    messages: Sequence[dict[str, str]],
) -> Any:
    """Call a provider and decode its JSON response."""
    raw_text = await provider.complete(messages)
    logger.debug("Provider '%s' returned %d chars", provider.name, len(raw_text))
    return parse_json_response(raw_text)
