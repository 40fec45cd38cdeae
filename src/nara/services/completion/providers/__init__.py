"""Completion providers."""

from nara.services.completion.providers.claude import ClaudeProvider
from nara.services.completion.providers.gpt import OpenAIProvider

__all__ = ["ClaudeProvider", "OpenAIProvider"]
