"""Claude completion provider."""

import logging
import os
from collections.abc import Sequence

import anthropic

from nara.errors import CompletionError

logger = logging.getLogger(__name__)


class ClaudeProvider:
    """Completion provider using the Anthropic Claude API.

    System messages are passed through the ``system`` parameter; the rest are
    sent as the conversation. Gracefully handles missing API keys by marking
    itself as unavailable rather than crashing.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "claude-sonnet-4-20250514",
        max_tokens: int = 4096,
    ) -> None:
        """Initialize the Claude provider.

        Args:
            api_key: Anthropic API key. Falls back to ANTHROPIC_API_KEY env var.
            model: Claude model to use.
            max_tokens: Maximum tokens in the response.
        """
        self._api_key = api_key or os.environ.get("ANTHROPIC_API_KEY")
        self._model = model
        self._max_tokens = max_tokens
        self._available = bool(self._api_key)

        if self._available:
            self._client = anthropic.AsyncAnthropic(api_key=self._api_key)
        else:
            self._client = None
            logger.warning("ClaudeProvider: No API key found, provider unavailable")

    @property
    def name(self) -> str:
        """Provider name identifier."""
        return "claude"

    @property
    def is_available(self) -> bool:
        """Whether the Claude API key is configured."""
        return self._available

    async def complete(self, messages: Sequence[dict[str, str]]) -> str:
        """Send chat messages to Claude and return the text response.

        Raises:
            CompletionError: If the provider is unavailable or the API call fails.
        """
        if not self._available or self._client is None:
            raise CompletionError("Claude provider is not available (no API key)")

        system = "\n\n".join(m["content"] for m in messages if m["role"] == "system")
        conversation = [
            {"role": m["role"], "content": m["content"]}
            for m in messages
            if m["role"] != "system"
        ]

        try:
            response = await self._client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                system=system,
                messages=conversation,
            )
        except anthropic.APIError as exc:
            raise CompletionError(f"Claude API error: {exc}") from exc

        raw_text = ""
        for block in response.content:
            if block.type == "text":
                raw_text += block.text
        return raw_text
