"""Unified LLM adapter interface"""

import asyncio
from typing import List, Optional
import structlog

from hostmate.config import settings
from hostmate.schemas.llm import LLMMessage, LLMCompletion
from hostmate.llm.providers import PROVIDERS

logger = structlog.get_logger()


class LLMAdapter:
    """
    Unified LLM adapter that routes to any provider.
    Implements fallback logic when the primary provider fails, and bounds
    every provider call by ``timeout`` seconds.
    """

    def __init__(
        self,
        provider: str,
        model: str,
        fallback_provider: Optional[str] = None,
        fallback_model: Optional[str] = None,
        timeout: float = 20.0,
    ):
        self.provider = provider
        self.model = model
        self.fallback_provider = fallback_provider
        self.fallback_model = fallback_model
        self.timeout = timeout

    def _get_provider_instance(self, provider: str, model: str):
        """Get the appropriate provider instance"""
        provider_class = PROVIDERS.get(provider)
        if not provider_class:
            raise ValueError(f"Unknown provider: {provider}")

        return provider_class(model=model)

    async def _complete_with(
        self,
        provider: str,
        model: str,
        system_prompt: str,
        messages: List[LLMMessage],
        temperature: float,
        max_tokens: int,
    ) -> LLMCompletion:
        instance = self._get_provider_instance(provider, model)
        return await asyncio.wait_for(
            instance.complete(
                system_prompt=system_prompt,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            ),
            timeout=self.timeout,
        )

    async def complete(
        self,
        system_prompt: str,
        messages: List[LLMMessage],
        temperature: float = 0.4,
        max_tokens: int = 512,
    ) -> LLMCompletion:
        """
        Generate a completion from the LLM.
        Attempts fallback if the primary provider fails or times out.
        """
        try:
            return await self._complete_with(
                self.provider, self.model, system_prompt, messages, temperature, max_tokens
            )

        except Exception as e:
            logger.warning(
                "Primary LLM provider failed, attempting fallback",
                provider=self.provider,
                model=self.model,
                error=str(e) or type(e).__name__,
            )

            if not (self.fallback_provider and self.fallback_model):
                raise

            try:
                return await self._complete_with(
                    self.fallback_provider,
                    self.fallback_model,
                    system_prompt,
                    messages,
                    temperature,
                    max_tokens,
                )
            except Exception as fallback_error:
                logger.error(
                    "Fallback LLM provider also failed",
                    fallback_provider=self.fallback_provider,
                    fallback_model=self.fallback_model,
                    error=str(fallback_error) or type(fallback_error).__name__,
                )
                raise


def get_llm_adapter() -> LLMAdapter:
    """Build the adapter configured for the reservation agent"""
    return LLMAdapter(
        provider=settings.default_llm_provider,
        model=settings.default_llm_model,
        fallback_provider=settings.fallback_llm_provider or None,
        fallback_model=settings.fallback_llm_model or None,
        timeout=settings.llm_timeout_seconds,
    )
