"""OpenAI LLM provider"""

from typing import List
from openai import AsyncOpenAI
import structlog

from hostmate.config import settings
from hostmate.schemas.llm import LLMMessage, LLMCompletion, UsageStats
from hostmate.llm.providers.base import BaseLLMProvider

logger = structlog.get_logger()


class OpenAIProvider(BaseLLMProvider):
    """OpenAI chat completions provider"""

    name = "openai"

    def __init__(self, model: str = "gpt-4o-mini"):
        super().__init__(model)
        self.client = AsyncOpenAI(api_key=settings.openai_api_key)

    async def complete(
        self,
        system_prompt: str,
        messages: List[LLMMessage],
        temperature: float = 0.4,
        max_tokens: int = 512,
    ) -> LLMCompletion:
        """Generate completion using the OpenAI API"""
        openai_messages = [{"role": "system", "content": system_prompt}]
        openai_messages.extend({"role": msg.role, "content": msg.content} for msg in messages)

        logger.debug("OpenAI request", model=self.model, message_count=len(openai_messages))

        response = await self.client.chat.completions.create(
            model=self.model,
            messages=openai_messages,
            temperature=temperature,
            max_tokens=max_tokens,
        )

        return LLMCompletion(
            content=response.choices[0].message.content or "",
            usage=UsageStats(
                prompt_tokens=response.usage.prompt_tokens,
                completion_tokens=response.usage.completion_tokens,
                total_tokens=response.usage.total_tokens,
            ) if response.usage else None,
            provider=self.name,
            model=self.model,
        )
