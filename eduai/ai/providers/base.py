"""Base AI provider interface and usage type.

Defines the contract that every AI provider implementation (Anthropic,
Gemini, Mock) must satisfy: send the composed context, get text back or an
exception. The assistant engine treats any exception, and any empty text,
as a failed call.

Leaf module — imports only stdlib and eduai.models (also a leaf).
No schemas, no config, no framework imports.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from eduai.models import ModelConfig

__all__ = ["AIProvider", "ModelConfig", "UsageInfo"]


@dataclass(frozen=True)
class UsageInfo:
    """Token usage from a completed AI call. Used for usage logging."""

    prompt_tokens: int
    completion_tokens: int


class AIProvider(ABC):
    """Abstract base for AI model providers.

    Concrete implementations (AnthropicProvider, GeminiProvider,
    MockProvider) implement complete() against their respective APIs.
    Implementations make exactly one attempt per call — no retries.
    """

    @abstractmethod
    async def complete(
        self,
        *,
        messages: list[dict[str, str]],
        model_config: ModelConfig,
        system_prompt: str | None = None,
    ) -> tuple[str, UsageInfo]:
        """Returns the full response text and usage info.

        Args:
            messages: Conversation as {"role": ..., "content": ...} dicts.
                The assistant sends a single user message.
            model_config: Model ID and output cap.
            system_prompt: Optional system instruction.

        Returns:
            Tuple of (response text, token usage). The text is empty when
            the response carried no text content.
        """
