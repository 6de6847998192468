"""Tests for provider routing, fallback and timeouts in the LLM adapter"""

import asyncio

import pytest

from hostmate.llm import LLMAdapter, get_llm_adapter
from hostmate.llm.providers import PROVIDERS
from hostmate.llm.providers.base import BaseLLMProvider
from hostmate.schemas.llm import LLMCompletion, LLMMessage

MESSAGES = [LLMMessage(role="user", content="Are you open on Sunday?")]


class EchoProvider(BaseLLMProvider):
    name = "echo"

    async def complete(self, system_prompt, messages, temperature=0.4, max_tokens=512):
        return LLMCompletion(content=messages[-1].content, provider=self.name, model=self.model)


class BrokenProvider(BaseLLMProvider):
    name = "broken"

    async def complete(self, system_prompt, messages, temperature=0.4, max_tokens=512):
        raise ConnectionError("provider down")


class SlowProvider(BaseLLMProvider):
    name = "slow"

    async def complete(self, system_prompt, messages, temperature=0.4, max_tokens=512):
        await asyncio.sleep(5)
        return LLMCompletion(content="too late", provider=self.name, model=self.model)


@pytest.fixture(autouse=True)
def fake_providers(monkeypatch):
    monkeypatch.setitem(PROVIDERS, "echo", EchoProvider)
    monkeypatch.setitem(PROVIDERS, "broken", BrokenProvider)
    monkeypatch.setitem(PROVIDERS, "slow", SlowProvider)


@pytest.mark.asyncio
async def test_primary_provider_answers():
    adapter = LLMAdapter(provider="echo", model="echo-1")

    completion = await adapter.complete("system", MESSAGES)

    assert completion.content == "Are you open on Sunday?"
    assert completion.provider == "echo"


@pytest.mark.asyncio
async def test_falls_back_when_primary_fails():
    adapter = LLMAdapter(provider="broken", model="b-1", fallback_provider="echo", fallback_model="echo-1")

    completion = await adapter.complete("system", MESSAGES)

    assert completion.provider == "echo"
    assert completion.model == "echo-1"


@pytest.mark.asyncio
async def test_failure_without_fallback_raises():
    adapter = LLMAdapter(provider="broken", model="b-1")

    with pytest.raises(ConnectionError):
        await adapter.complete("system", MESSAGES)


@pytest.mark.asyncio
async def test_slow_provider_times_out_then_falls_back():
    adapter = LLMAdapter(
        provider="slow",
        model="s-1",
        fallback_provider="echo",
        fallback_model="echo-1",
        timeout=0.05,
    )

    completion = await adapter.complete("system", MESSAGES)

    assert completion.provider == "echo"


@pytest.mark.asyncio
async def test_unknown_provider():
    adapter = LLMAdapter(provider="nope", model="x")

    with pytest.raises(ValueError):
        await adapter.complete("system", MESSAGES)


def test_adapter_built_from_settings(monkeypatch):
    from hostmate.llm import adapter as adapter_module

    monkeypatch.setattr(adapter_module.settings, "fallback_llm_provider", "")

    adapter = get_llm_adapter()

    assert adapter.provider == adapter_module.settings.default_llm_provider
    assert adapter.fallback_provider is None
