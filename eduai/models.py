"""Model ID registry — single source of truth for AI model identifiers.

Every remote assistant call resolves its model ID through this module.
The rest of the codebase imports family-name constants from here — no raw
model ID strings anywhere else.

Two layers:
  Layer 1: ASSISTANT_MODEL env var names a family ("CLAUDE_SONNET_4")
  Layer 2: MODEL_MAP resolves the family to the provider's model ID

The provider is inferred from the family prefix, so switching the assistant
from Claude to Gemini is a one-line .env change.
"""

from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Model IDs (update when providers release new versions)
# ---------------------------------------------------------------------------

# --- Claude models ---
CLAUDE_HAIKU: str = "claude-haiku-4-5-20251001"
CLAUDE_SONNET_4: str = "claude-sonnet-4-20250514"
CLAUDE_SONNET: str = "claude-sonnet-4-6"

# --- Gemini models ---
GEMINI_FLASH_LITE: str = "gemini-flash-lite-latest"
GEMINI_FLASH: str = "gemini-3-flash-preview"

# Output cap for one assistant answer. Chat replies are short.
DEFAULT_MAX_TOKENS: int = 1000


@dataclass(frozen=True)
class ModelConfig:
    """Bundles everything a provider needs to issue one assistant call.

    Leaf type — no project imports. Built by resolve_model_config(),
    consumed by provider implementations.
    """

    provider: str          # "anthropic", "gemini" or "mock"
    model_id: str          # e.g. "claude-sonnet-4-20250514"
    max_tokens: int = DEFAULT_MAX_TOKENS


# ---------------------------------------------------------------------------
# Lookup map: env var value to actual model ID
# ---------------------------------------------------------------------------
# Keys match the constant names exactly (case-sensitive).
MODEL_MAP: dict[str, str] = {
    "CLAUDE_HAIKU": CLAUDE_HAIKU,
    "CLAUDE_SONNET_4": CLAUDE_SONNET_4,
    "CLAUDE_SONNET": CLAUDE_SONNET,
    "GEMINI_FLASH_LITE": GEMINI_FLASH_LITE,
    "GEMINI_FLASH": GEMINI_FLASH,
}


def provider_for_model(model_id: str) -> str:
    """Infers the provider name from a resolved model ID.

    Args:
        model_id: A value from MODEL_MAP.

    Returns:
        "anthropic" for Claude models, "gemini" for Gemini models.

    Raises:
        ValueError: If the model ID belongs to no known family.
    """
    if model_id.startswith("claude-"):
        return "anthropic"
    if model_id.startswith("gemini-"):
        return "gemini"
    raise ValueError(f"Cannot infer provider for model {model_id!r}")


def resolve_model_config(
    ai_backend: str,
    model_id: str,
    max_tokens: int = DEFAULT_MAX_TOKENS,
) -> ModelConfig:
    """Builds the ModelConfig for the configured assistant backend.

    The "mock" backend keeps the model ID (it is only logged) but never
    reaches a real API.

    Args:
        ai_backend: Backend name from settings ("anthropic", "gemini", "mock").
        model_id: Resolved model ID.
        max_tokens: Output cap for one answer.

    Returns:
        The ModelConfig for the assistant.

    Raises:
        ValueError: If the backend is unknown or disagrees with the model family.
    """
    if ai_backend == "mock":
        return ModelConfig(provider="mock", model_id=model_id, max_tokens=max_tokens)

    if ai_backend not in ("anthropic", "gemini"):
        raise ValueError(
            f"Unknown AI backend: {ai_backend!r}. "
            f"Expected 'anthropic', 'gemini' or 'mock'."
        )

    family_provider = provider_for_model(model_id)
    if family_provider != ai_backend:
        raise ValueError(
            f"Model {model_id!r} belongs to {family_provider!r}, "
            f"but AI_BACKEND is {ai_backend!r}."
        )
    return ModelConfig(provider=ai_backend, model_id=model_id, max_tokens=max_tokens)
