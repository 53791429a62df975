"""App configuration — environment variable loading with typed defaults.

Loads settings from .env file (via python-dotenv) and os.environ.
Real environment variables take precedence over .env file values.

The assistant model env var (ASSISTANT_MODEL=CLAUDE_SONNET_4) is resolved
to the actual API model ID at load time via MODEL_MAP from eduai.models.

Usage:
    from eduai.config import get_settings
    settings = get_settings()
    print(settings.assistant_model)  # "claude-sonnet-4-20250514"
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from eduai.models import DEFAULT_MAX_TOKENS, MODEL_MAP

# Only load .env from the project root, never parent directories.
PROJECT_ROOT = Path(__file__).resolve().parent.parent
_DOTENV_PATH = PROJECT_ROOT / ".env"

_TRUTHY = {"1", "true", "yes", "on"}

# Model family used when ASSISTANT_MODEL is unset, per AI_BACKEND.
_DEFAULT_MODEL_FAMILY: dict[str, str] = {
    "anthropic": "CLAUDE_SONNET_4",
    "gemini": "GEMINI_FLASH",
    "mock": "CLAUDE_SONNET_4",
}


@dataclass(frozen=True)
class Settings:
    """Typed configuration for the EduAI Pro service.

    All fields have sensible defaults for local development.
    assistant_model stores the resolved API model ID (not the family name).
    """

    # App
    app_env: str
    app_port: int
    log_level: str
    cors_origins: list[str]

    # AI
    ai_backend: str
    assistant_model: str
    assistant_max_tokens: int
    assistant_timeout_seconds: float
    anthropic_api_key: str
    google_api_key: str

    # Data
    data_path: Path
    seed_demo_data: bool


def _resolve_model(env_var: str, value: str) -> str:
    """Resolves a family-name string to an actual model ID via MODEL_MAP.

    Args:
        env_var: Name of the environment variable (for error messages).
        value: The family-name value from the environment (e.g. "CLAUDE_SONNET_4").

    Returns:
        The resolved model ID string.

    Raises:
        ValueError: If the value doesn't match any key in MODEL_MAP.
    """
    if value in MODEL_MAP:
        return MODEL_MAP[value]
    valid = ", ".join(sorted(MODEL_MAP.keys()))
    raise ValueError(
        f"Invalid value for {env_var}: {value!r}. "
        f"Valid options: {valid}"
    )


def _split_csv(value: str) -> list[str]:
    """Splits a comma-separated string into a list of stripped, non-empty values."""
    return [item.strip() for item in value.split(",") if item.strip()]


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in _TRUTHY


def _resolve_data_path(value: str) -> Path:
    """Relative data paths are anchored at the project root, not the cwd."""
    path = Path(value)
    if not path.is_absolute():
        path = PROJECT_ROOT / path
    return path


def _load_settings() -> Settings:
    """Loads configuration from .env file and environment variables.

    Returns:
        A fully resolved Settings instance.
    """
    load_dotenv(_DOTENV_PATH)

    ai_backend = os.environ.get("AI_BACKEND", "anthropic")
    default_family = _DEFAULT_MODEL_FAMILY.get(ai_backend, "CLAUDE_SONNET_4")

    return Settings(
        # App
        app_env=os.environ.get("APP_ENV", "development"),
        app_port=int(os.environ.get("APP_PORT", "8000")),
        log_level=os.environ.get("LOG_LEVEL", "info"),
        cors_origins=_split_csv(
            os.environ.get("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173")
        ),
        # AI
        ai_backend=ai_backend,
        assistant_model=_resolve_model(
            "ASSISTANT_MODEL",
            os.environ.get("ASSISTANT_MODEL", default_family),
        ),
        assistant_max_tokens=int(
            os.environ.get("ASSISTANT_MAX_TOKENS", str(DEFAULT_MAX_TOKENS))
        ),
        assistant_timeout_seconds=float(
            os.environ.get("ASSISTANT_TIMEOUT_SECONDS", "0")
        ),
        anthropic_api_key=os.environ.get("ANTHROPIC_API_KEY", ""),
        google_api_key=os.environ.get("GOOGLE_API_KEY", ""),
        # Data
        data_path=_resolve_data_path(
            os.environ.get("DATA_PATH", "data/eduai_pro_data.json")
        ),
        seed_demo_data=_parse_bool(os.environ.get("SEED_DEMO_DATA", "true")),
    )


_settings: Settings | None = None


def get_settings() -> Settings:
    """Returns the singleton Settings instance. Loads .env on first call."""
    global _settings
    if _settings is None:
        _settings = _load_settings()
    return _settings
