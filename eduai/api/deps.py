"""Shared FastAPI dependencies — auth, clock, classroom and assistant injection.

Module-level singletons for each service. Route handlers access them via
FastAPI's Depends() system — never by importing implementations directly.
When the team swaps an implementation, they change the assignment here
(or in main.py's startup) and every downstream handler picks it up.

TEAM: To wire your real services, replace the implementation on the right
side of each singleton assignment below. The get_* functions and all route
handlers stay unchanged.

Usage:
    from eduai.api.deps import get_classroom, require_teacher

    @router.get("/something")
    async def do_thing(
        user: User = Depends(require_teacher),
        classroom: ClassroomService = Depends(get_classroom),
    ): ...
"""

import logging

from fastapi import Depends, Header, HTTPException

from eduai.ai.assistant import AssistantEngine
from eduai.ai.providers.base import AIProvider
from eduai.classroom.service import ClassroomService
from eduai.config import Settings
from eduai.hooks.auth import InMemoryAuthService
from eduai.hooks.clock import SystemClock
from eduai.hooks.interfaces import AuthService, Clock
from eduai.models import ModelConfig
from eduai.schemas import ApiError, ApiResponse, User

logger = logging.getLogger("eduai")

# ---------------------------------------------------------------------------
# Service singletons: the swap point
# ---------------------------------------------------------------------------

# TEAM: Replace with your real implementations here.
_auth_service: AuthService = InMemoryAuthService()
_clock: Clock = SystemClock()

# Set by main.py at startup (_init_data_store / _init_ai_services)
_classroom: ClassroomService | None = None
_assistant_engine: AssistantEngine | None = None


def _unavailable(what: str) -> HTTPException:
    return HTTPException(
        status_code=503,
        detail=ApiResponse(
            ok=False,
            error=ApiError(
                code="SERVICE_UNAVAILABLE",
                message=f"{what} is not yet available. Server is starting up.",
            ),
        ).model_dump(),
    )


# ---------------------------------------------------------------------------
# Dependency providers
# ---------------------------------------------------------------------------


def get_auth_service() -> AuthService:
    """Returns the auth service singleton."""
    return _auth_service


def get_clock() -> Clock:
    """Returns the clock singleton."""
    return _clock


def get_classroom() -> ClassroomService:
    """Returns the classroom service singleton.

    Raises HTTPException(503) if the Data Store hasn't been loaded yet.
    """
    if _classroom is None:
        raise _unavailable("Classroom data")
    return _classroom


def get_assistant_engine() -> AssistantEngine:
    """Returns the assistant engine singleton.

    Raises HTTPException(503) if the engine hasn't been initialized yet.
    """
    if _assistant_engine is None:
        raise _unavailable("Assistant")
    return _assistant_engine


# ---------------------------------------------------------------------------
# AI provider factory
# ---------------------------------------------------------------------------


def create_provider(model_config: ModelConfig, settings: Settings) -> AIProvider | None:
    """Routes a ModelConfig to the correct concrete provider instance.

    Args:
        model_config: The resolved assistant model configuration.
        settings: Application settings with API keys.

    Returns:
        A concrete AIProvider, or None when the provider's API key is
        missing (the assistant then answers from the fallback matcher).

    Raises:
        ValueError: If the provider name is not recognized.
    """
    # Local imports to avoid pulling SDK dependencies at module load time.
    if model_config.provider == "mock":
        from eduai.ai.providers.mock import MockProvider

        return MockProvider()

    api_key = _get_api_key_for_provider(model_config.provider, settings)

    if model_config.provider == "anthropic":
        if not api_key:
            return None
        from eduai.ai.providers.anthropic import AnthropicProvider

        return AnthropicProvider(api_key=api_key)

    if model_config.provider == "gemini":
        if not api_key:
            return None
        from eduai.ai.providers.gemini import GeminiProvider

        return GeminiProvider(api_key=api_key)

    raise ValueError(
        f"Unknown provider: {model_config.provider!r}. "
        f"Expected 'anthropic', 'gemini' or 'mock'."
    )


def _get_api_key_for_provider(provider: str, settings: Settings) -> str:
    """Returns the API key for a given provider name ("" if unknown/unset)."""
    if provider == "anthropic":
        return settings.anthropic_api_key
    if provider == "gemini":
        return settings.google_api_key
    return ""


# ---------------------------------------------------------------------------
# Auth dependencies: used by route handlers
# ---------------------------------------------------------------------------


def _unauthorized(message: str) -> HTTPException:
    return HTTPException(
        status_code=401,
        detail=ApiResponse(
            ok=False,
            error=ApiError(code="UNAUTHORIZED", message=message),
        ).model_dump(),
    )


async def get_bearer_token(
    authorization: str | None = Header(default=None),
) -> str:
    """Extracts the token from an ``Authorization: Bearer <token>`` header.

    Raises:
        HTTPException: 401 on missing or malformed header.
    """
    if not authorization:
        raise _unauthorized("Missing authorization header.")

    parts = authorization.split(" ", maxsplit=1)
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1].strip():
        raise _unauthorized("Invalid authorization header format.")

    return parts[1].strip()


async def get_current_user(
    token: str = Depends(get_bearer_token),
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """Resolves the bearer token to the signed-in User.

    Raises:
        HTTPException: 401 with ApiResponse envelope on unknown tokens.
    """
    user = await auth_service.validate_token(token)
    if user is None:
        raise _unauthorized("Invalid or expired token.")
    return user


def _forbidden(message: str) -> HTTPException:
    return HTTPException(
        status_code=403,
        detail=ApiResponse(
            ok=False,
            error=ApiError(code="FORBIDDEN", message=message),
        ).model_dump(),
    )


async def require_teacher(user: User = Depends(get_current_user)) -> User:
    """Lets only teachers through. Students get 403."""
    if user.role != "teacher":
        raise _forbidden("Teacher role required.")
    return user


async def require_student(user: User = Depends(get_current_user)) -> User:
    """Lets only students through. Teachers get 403."""
    if user.role != "student" or not user.class_id:
        raise _forbidden("Student role required.")
    return user
