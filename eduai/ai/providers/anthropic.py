"""Anthropic Claude AI provider using the anthropic SDK.

Implements the AIProvider contract for Anthropic's Claude model family
through the Messages API. One attempt per call: the SDK's own retries are
disabled, and SDK errors propagate to the caller, which falls back to local
matching.

Service module — imports from base.py + anthropic SDK.
"""

import logging

import anthropic

from eduai.ai.providers.base import AIProvider, ModelConfig, UsageInfo

logger = logging.getLogger(__name__)

_DEFAULT_TEMPERATURE = 0.7


def extract_text(content_blocks: list) -> str:
    """Concatenates the text of all text content blocks.

    Non-text blocks are skipped. Returns an empty string when the response
    has no text block at all.
    """
    parts_text = []
    for block in content_blocks or []:
        if getattr(block, "type", None) == "text" and getattr(block, "text", None):
            parts_text.append(block.text)
    return "".join(parts_text)


class AnthropicProvider(AIProvider):
    """Anthropic Claude provider using the anthropic SDK.

    Args:
        api_key: Anthropic API key for Claude access.
    """

    def __init__(self, api_key: str) -> None:
        self._client = anthropic.AsyncAnthropic(
            api_key=api_key,
            max_retries=0,
        )

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
            model_config: Model ID and max output tokens.
            system_prompt: Optional system instruction; omitted from the
                request when None.

        Returns:
            Tuple of (response text, token usage information).

        Raises:
            anthropic.APIError: On any API or connection failure.
        """
        kwargs: dict = {
            "model": model_config.model_id,
            "messages": messages,
            "max_tokens": model_config.max_tokens,
            "temperature": _DEFAULT_TEMPERATURE,
        }
        if system_prompt is not None:
            kwargs["system"] = system_prompt

        response = await self._client.messages.create(**kwargs)

        full_text = extract_text(response.content)
        if not full_text:
            logger.debug("Anthropic response for %s had no text blocks", model_config.model_id)

        usage = UsageInfo(
            prompt_tokens=response.usage.input_tokens,
            completion_tokens=response.usage.output_tokens,
        )
        return full_text, usage
