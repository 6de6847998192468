"""Base LLM provider interface"""

from abc import ABC, abstractmethod
from typing import List

from hostmate.schemas.llm import LLMMessage, LLMCompletion


class BaseLLMProvider(ABC):
    """Abstract base class for chat-completion providers"""

    name = "base"

    def __init__(self, model: str):
        self.model = model

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        messages: List[LLMMessage],
        temperature: float = 0.4,
        max_tokens: int = 512,
    ) -> LLMCompletion:
        """Generate a text completion for the conversation"""
        pass
