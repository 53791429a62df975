"""Mock AI provider for testing and development.

Deterministic, zero-cost AIProvider implementation that returns a
configurable canned response. Used by:
- The test suite (via conftest.mock_provider fixture)
- Development mode for team members without API keys (AI_BACKEND=mock)
- Reference implementation of the AIProvider contract

Service module — imports only from base.py.
"""

import asyncio

from eduai.ai.providers.base import AIProvider, ModelConfig, UsageInfo

_DEFAULT_RESPONSES = ["Hello from MockProvider"]
_DEFAULT_USAGE = UsageInfo(prompt_tokens=10, completion_tokens=5)


class MockProvider(AIProvider):
    """Deterministic AI provider for testing.

    Args:
        responses: Text strings joined into the answer. Defaults to
            "Hello from MockProvider". An empty list simulates a response
            without a text field.
        usage: Token usage returned by complete(). Defaults to 10/5.
        error: If set, complete() raises this instead of answering.
        delay: Seconds to sleep before answering, for timeout and
            concurrency tests.

    Every call is recorded in ``calls`` as the keyword arguments received.
    """

    def __init__(
        self,
        responses: list[str] | None = None,
        usage: UsageInfo | None = None,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.responses = responses if responses is not None else list(_DEFAULT_RESPONSES)
        self.usage = usage or _DEFAULT_USAGE
        self.error = error
        self.delay = delay
        self.calls: list[dict] = []

    async def complete(
        self,
        *,
        messages: list[dict[str, str]],
        model_config: ModelConfig,
        system_prompt: str | None = None,
    ) -> tuple[str, UsageInfo]:
        """Returns concatenated responses and configured usage info.

        Raises the configured error (after the delay) if error is set.
        """
        self.calls.append(
            {
                "messages": messages,
                "model_config": model_config,
                "system_prompt": system_prompt,
            }
        )
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error

        return "".join(self.responses), self.usage
