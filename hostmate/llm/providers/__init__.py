"""LLM provider implementations"""

from hostmate.llm.providers.base import BaseLLMProvider
from hostmate.llm.providers.openai import OpenAIProvider
from hostmate.llm.providers.anthropic import AnthropicProvider
from hostmate.llm.providers.gemini import GeminiProvider
from hostmate.llm.providers.ollama import OllamaProvider

PROVIDERS = {
    "openai": OpenAIProvider,
    "anthropic": AnthropicProvider,
    "gemini": GeminiProvider,
    "ollama": OllamaProvider,
}

__all__ = [
    "BaseLLMProvider",
    "OpenAIProvider",
    "AnthropicProvider",
    "GeminiProvider",
    "OllamaProvider",
    "PROVIDERS",
]
