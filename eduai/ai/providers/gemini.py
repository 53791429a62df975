"""Google Gemini AI provider using the google-genai SDK.

Implements the AIProvider contract for Google's Gemini model family.
One attempt per call (SDK retry attempts pinned to 1); thinking parts are
filtered out of the answer text. SDK errors propagate to the caller.

Service module — imports from base.py + google-genai SDK.
"""

import logging

from google import genai
from google.genai import types

from eduai.ai.providers.base import AIProvider, ModelConfig, UsageInfo

logger = logging.getLogger(__name__)

_DEFAULT_TEMPERATURE = 0.7


def _build_contents(messages: list[dict[str, str]]) -> list[types.Content]:
    """Converts provider-neutral message dicts to Gemini Content objects.

    Role mapping: "user" → "user", "assistant" → "model".
    """
    role_map = {"user": "user", "assistant": "model"}
    contents = []
    for msg in messages:
        role = role_map.get(msg["role"], msg["role"])
        contents.append(
            types.Content(
                parts=[types.Part(text=msg["content"])],
                role=role,
            )
        )
    return contents


def _build_config(
    system_prompt: str | None,
    model_config: ModelConfig,
) -> types.GenerateContentConfig:
    """Builds the GenerateContentConfig for a Gemini API call."""
    return types.GenerateContentConfig(
        system_instruction=system_prompt,
        temperature=_DEFAULT_TEMPERATURE,
        max_output_tokens=model_config.max_tokens,
    )


def _extract_text(response) -> str:
    """Joins the text of all non-thinking parts of all candidates."""
    parts_text = []
    for candidate in response.candidates or []:
        if candidate.content is None or candidate.content.parts is None:
            continue
        for part in candidate.content.parts:
            if getattr(part, "thought", False):
                continue
            if part.text is not None:
                parts_text.append(part.text)
    return "".join(parts_text)


class GeminiProvider(AIProvider):
    """Gemini AI provider using the google-genai SDK.

    Args:
        api_key: Google API key for Gemini access.
    """

    def __init__(self, api_key: str) -> None:
        self._client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(
                retry_options=types.HttpRetryOptions(attempts=1),
            ),
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
            system_prompt: Optional system instruction.

        Returns:
            Tuple of (response text, token usage information). Empty
            candidates (e.g. safety blocks) give an empty text.

        Raises:
            google.genai.errors.APIError: On any API failure.
        """
        response = await self._client.aio.models.generate_content(
            model=model_config.model_id,
            contents=_build_contents(messages),
            config=_build_config(system_prompt, model_config),
        )

        full_text = _extract_text(response)

        prompt_tokens = 0
        completion_tokens = 0
        if response.usage_metadata is not None:
            prompt_tokens = response.usage_metadata.prompt_token_count or 0
            completion_tokens = response.usage_metadata.candidates_token_count or 0

        return full_text, UsageInfo(
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
        )
