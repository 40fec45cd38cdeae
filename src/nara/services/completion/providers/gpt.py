"""OpenAI chat completion provider."""

import logging
import os
from collections.abc import Sequence

import openai

from nara.errors import CompletionError

logger = logging.getLogger(__name__)


class OpenAIProvider:
    """Completion provider using OpenAI chat completions in JSON mode."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-4o",
        client: openai.AsyncOpenAI | None = None,
    ) -> None:
        """Initialize the OpenAI provider.

        Args:
            api_key: OpenAI API key. Falls back to OPENAI_API_KEY env var.
            model: Chat model to use.
            client: Preconfigured client (mainly for tests).
        """
        self._api_key = api_key or os.environ.get("OPENAI_API_KEY")
        self._model = model
        self._client = client
        if client is None and not self._api_key:
            logger.warning("OpenAIProvider: No API key found, provider unavailable")

    @property
    def name(self) -> str:
        """Provider name identifier."""
        return "openai"

    @property
    def is_available(self) -> bool:
        """Whether a client or API key is configured."""
        return self._client is not None or bool(self._api_key)

    def _get_client(self) -> openai.AsyncOpenAI:
        if self._client is None:
            if not self._api_key:
                raise CompletionError("OpenAI provider is not available (no API key)")
            self._client = openai.AsyncOpenAI(api_key=self._api_key)
        return self._client

    async def complete(self, messages: Sequence[dict[str, str]]) -> str:
        """Send chat messages and return the JSON text of the first choice.

        Raises:
            CompletionError: If the API call fails or returns no content.
        """
        client = self._get_client()
        try:
            response = await client.chat.completions.create(
                model=self._model,
                messages=list(messages),
                response_format={"type": "json_object"},
            )
        except openai.APIError as exc:
            raise CompletionError(f"OpenAI API error: {exc}") from exc

        if not response.choices or response.choices[0].message.content is None:
            raise CompletionError(f"OpenAI returned no content: {response!r}")
        return response.choices[0].message.content
