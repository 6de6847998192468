"""Anthropic Claude LLM provider"""

from typing import List
from anthropic import AsyncAnthropic
import structlog

from hostmate.config import settings
from hostmate.schemas.llm import LLMMessage, LLMCompletion, UsageStats
from hostmate.llm.providers.base import BaseLLMProvider

logger = structlog.get_logger()


class AnthropicProvider(BaseLLMProvider):
    """Anthropic Claude provider implementation"""

    name = "anthropic"

    def __init__(self, model: str = "claude-3-5-haiku-latest"):
        super().__init__(model)
        self.client = AsyncAnthropic(api_key=settings.anthropic_api_key)

    async def complete(
        self,
        system_prompt: str,
        messages: List[LLMMessage],
        temperature: float = 0.4,
        max_tokens: int = 512,
    ) -> LLMCompletion:
        """Generate completion using the Anthropic API"""
        # Anthropic requires alternating roles, so consecutive turns are merged
        merged = []
        for msg in messages:
            role = "assistant" if msg.role == "assistant" else "user"
            if merged and merged[-1]["role"] == role:
                merged[-1]["content"] += "\n" + msg.content
            else:
                merged.append({"role": role, "content": msg.content})

        if not merged or merged[0]["role"] != "user":
            merged.insert(0, {"role": "user", "content": "Hello"})

        logger.debug("Anthropic request", model=self.model, message_count=len(merged))

        response = await self.client.messages.create(
            model=self.model,
            system=system_prompt,
            messages=merged,
            temperature=temperature,
            max_tokens=max_tokens,
        )

        text = "".join(block.text for block in response.content if block.type == "text")

        return LLMCompletion(
            content=text,
            usage=UsageStats(
                prompt_tokens=response.usage.input_tokens,
                completion_tokens=response.usage.output_tokens,
                total_tokens=response.usage.input_tokens + response.usage.output_tokens,
            ),
            provider=self.name,
            model=self.model,
        )
