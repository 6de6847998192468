"""Google Gemini LLM provider"""

from typing import List
import google.generativeai as genai
import structlog

from hostmate.config import settings
from hostmate.schemas.llm import LLMMessage, LLMCompletion, UsageStats
from hostmate.llm.providers.base import BaseLLMProvider

logger = structlog.get_logger()


class GeminiProvider(BaseLLMProvider):
    """Google Gemini provider implementation"""

    name = "gemini"

    def __init__(self, model: str = "gemini-1.5-flash"):
        super().__init__(model)
        genai.configure(api_key=settings.gemini_api_key)

    async def complete(
        self,
        system_prompt: str,
        messages: List[LLMMessage],
        temperature: float = 0.4,
        max_tokens: int = 512,
    ) -> LLMCompletion:
        """Generate completion using the Gemini API"""
        client = genai.GenerativeModel(self.model, system_instruction=system_prompt)

        contents = [
            {
                "role": "user" if msg.role == "user" else "model",
                "parts": [msg.content],
            }
            for msg in messages
        ]

        logger.debug("Gemini request", model=self.model, message_count=len(contents))

        response = await client.generate_content_async(
            contents,
            generation_config=genai.types.GenerationConfig(
                temperature=temperature,
                max_output_tokens=max_tokens,
            ),
        )

        usage = None
        metadata = getattr(response, "usage_metadata", None)
        if metadata:
            usage = UsageStats(
                prompt_tokens=metadata.prompt_token_count,
                completion_tokens=metadata.candidates_token_count,
                total_tokens=metadata.total_token_count,
            )

        return LLMCompletion(
            content=response.text or "",
            usage=usage,
            provider=self.name,
            model=self.model,
        )
