"""Completion service: providers and JSON response handling."""

from nara.config import Settings
from nara.services.completion.base import complete_json, parse_json_response
from nara.services.completion.providers import ClaudeProvider, OpenAIProvider
from nara.services.interfaces import ICompletionProvider


def create_completion_provider(settings: Settings) -> ICompletionProvider:
    """Build the provider named by ``settings.completion_provider``.

    Raises:
        ValueError: If the provider name is unknown
    """
    name = settings.completion_provider.lower()
    if name == "openai":
        return OpenAIProvider(api_key=settings.openai_api_key, model=settings.openai_model)
    if name in ("anthropic", "claude"):
        return ClaudeProvider(
            api_key=settings.anthropic_api_key,
            model=settings.anthropic_model,
            max_tokens=settings.completion_max_tokens,
        )
    raise ValueError(
        f"Unknown completion provider '{settings.completion_provider}'. "
        "Available: openai, anthropic"
    )


__all__ = [
    "ClaudeProvider",
    "OpenAIProvider",
    "complete_json",
    "create_completion_provider",
    "parse_json_response",
]
