"""Tests for eduai.ai.providers.mock — MockProvider contract verification."""

import pytest

from eduai.ai.providers.base import AIProvider, UsageInfo
from eduai.ai.providers.mock import MockProvider
from eduai.models import ModelConfig

# Shared test config; MockProvider ignores these but must accept them
_CONFIG = ModelConfig(provider="mock", model_id="mock-v1")
_MESSAGES: list[dict[str, str]] = [{"role": "user", "content": "Hello"}]


class TestABCContract:
    """MockProvider is a proper AIProvider subclass."""

    def test_isinstance(self) -> None:
        assert isinstance(MockProvider(), AIProvider)


class TestComplete:
    @pytest.mark.asyncio
    async def test_default_response(self) -> None:
        text, usage = await MockProvider().complete(messages=_MESSAGES, model_config=_CONFIG)
        assert text == "Hello from MockProvider"
        assert usage == UsageInfo(prompt_tokens=10, completion_tokens=5)

    @pytest.mark.asyncio
    async def test_responses_joined(self) -> None:
        provider = MockProvider(responses=["Hello ", "world"])
        text, _ = await provider.complete(messages=_MESSAGES, model_config=_CONFIG)
        assert text == "Hello world"

    @pytest.mark.asyncio
    async def test_empty_responses_give_empty_text(self) -> None:
        text, _ = await MockProvider(responses=[]).complete(
            messages=_MESSAGES, model_config=_CONFIG
        )
        assert text == ""

    @pytest.mark.asyncio
    async def test_custom_usage(self) -> None:
        usage = UsageInfo(prompt_tokens=1, completion_tokens=2)
        _, got = await MockProvider(usage=usage).complete(
            messages=_MESSAGES, model_config=_CONFIG
        )
        assert got is usage

    @pytest.mark.asyncio
    async def test_error_raised(self) -> None:
        provider = MockProvider(error=RuntimeError("boom"))
        with pytest.raises(RuntimeError, match="boom"):
            await provider.complete(messages=_MESSAGES, model_config=_CONFIG)

    @pytest.mark.asyncio
    async def test_calls_recorded(self) -> None:
        provider = MockProvider()
        await provider.complete(
            messages=_MESSAGES, model_config=_CONFIG, system_prompt="sys"
        )
        assert provider.calls == [
            {"messages": _MESSAGES, "model_config": _CONFIG, "system_prompt": "sys"}
        ]

    @pytest.mark.asyncio
    async def test_calls_recorded_even_on_error(self) -> None:
        provider = MockProvider(error=ValueError("x"))
        with pytest.raises(ValueError):
            await provider.complete(messages=_MESSAGES, model_config=_CONFIG)
        assert len(provider.calls) == 1
