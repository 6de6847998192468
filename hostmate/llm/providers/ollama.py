"""Ollama local LLM provider"""

from typing import List
import httpx
import structlog

from hostmate.config import settings
from hostmate.schemas.llm import LLMMessage, LLMCompletion, UsageStats
from hostmate.llm.providers.base import BaseLLMProvider

logger = structlog.get_logger()


class OllamaProvider(BaseLLMProvider):
    """Ollama local LLM provider implementation"""

    name = "ollama"

    def __init__(self, model: str = "llama3"):
        super().__init__(model)
        self.base_url = settings.ollama_base_url

    async def complete(
        self,
        system_prompt: str,
        messages: List[LLMMessage],
        temperature: float = 0.4,
        max_tokens: int = 512,
    ) -> LLMCompletion:
        """Generate completion using the Ollama chat API"""
        payload = {
            "model": self.model,
            "messages": [{"role": "system", "content": system_prompt}]
            + [{"role": msg.role, "content": msg.content} for msg in messages],
            "stream": False,
            "options": {
                "temperature": temperature,
                "num_predict": max_tokens,
            },
        }

        logger.debug(
            "Ollama request",
            model=self.model,
            base_url=self.base_url,
            message_count=len(payload["messages"]),
        )

        async with httpx.AsyncClient(timeout=settings.llm_timeout_seconds) as client:
            response = await client.post(f"{self.base_url}/api/chat", json=payload)
            response.raise_for_status()
            data = response.json()

        usage = None
        if "eval_count" in data:
            usage = UsageStats(
                prompt_tokens=data.get("prompt_eval_count", 0),
                completion_tokens=data.get("eval_count", 0),
                total_tokens=data.get("prompt_eval_count", 0) + data.get("eval_count", 0),
            )

        return LLMCompletion(
            content=data.get("message", {}).get("content", ""),
            usage=usage,
            provider=self.name,
            model=self.model,
        )
