"""FastAPI application — entry point, middleware, and health endpoint.

Creates the EduAI Pro API with:
- API versioning via router prefix (/api/v1/)
- CORS middleware (origins from settings)
- Request logging middleware (raw ASGI — no response body buffering)
- Global exception handlers (HTTPException, validation, classroom errors,
  catch-all)
- Health endpoint
- Data Store loading at startup and a final save at shutdown

Run with: uvicorn eduai.main:app --reload

Orchestration module: imports from config, api/deps, classroom, hooks,
schemas.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from eduai.classroom.errors import ClassroomError
from eduai.config import get_settings
from eduai.schemas import ApiError, ApiResponse

logger = logging.getLogger("eduai")


# ---------------------------------------------------------------------------
# Request logging middleware (raw ASGI)
# ---------------------------------------------------------------------------


class RequestLoggingMiddleware:
    """Logs method, path, status code, and duration for every request.

    Uses raw ASGI to avoid response body buffering. Does NOT log
    request/response bodies, query params, auth headers, or client IPs:
    student questions and names stay out of the access log.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Wraps the ASGI call to measure timing and capture status code."""
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        method = scope.get("method", "?")
        path = scope.get("path", "?")
        start = time.monotonic()
        status_code = 0

        async def logging_send(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message.get("status", 0)
            await send(message)

        try:
            await self.app(scope, receive, logging_send)
        finally:
            duration_ms = (time.monotonic() - start) * 1000
            logger.info(
                "%s %s %d %.1fms", method, path, status_code, duration_ms
            )


# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------


def _http_exception_response(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Wraps HTTPException in ApiResponse envelope.

    If the detail is already an ApiResponse dict (from deps.py auth),
    returns it directly. Otherwise wraps in a generic error.
    """
    if isinstance(exc.detail, dict) and "ok" in exc.detail:
        return JSONResponse(status_code=exc.status_code, content=exc.detail)

    return JSONResponse(
        status_code=exc.status_code,
        content=ApiResponse(
            ok=False,
            error=ApiError(code="HTTP_ERROR", message=str(exc.detail)),
        ).model_dump(),
    )


def _validation_error_response(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Wraps Pydantic validation errors in ApiResponse envelope.

    Returns a human-readable summary without leaking internal details.
    """
    errors = exc.errors()
    if errors:
        first = errors[0]
        loc = " -> ".join(str(part) for part in first.get("loc", []))
        msg = first.get("msg", "Validation error")
        detail = f"{loc}: {msg}" if loc else msg
    else:
        detail = "Request validation failed."

    return JSONResponse(
        status_code=422,
        content=ApiResponse(
            ok=False,
            error=ApiError(code="VALIDATION_ERROR", message=detail),
        ).model_dump(),
    )


def _classroom_error_response(request: Request, exc: ClassroomError) -> JSONResponse:
    """Maps a ClassroomError to its status code and error code."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ApiResponse(
            ok=False,
            error=ApiError(code=exc.code, message=exc.message),
        ).model_dump(),
    )


def _unhandled_exception_response(request: Request, exc: Exception) -> JSONResponse:
    """Catches all unhandled exceptions — never leaks internals to client.

    Logs the full traceback server-side. Returns a generic 500 response.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)

    return JSONResponse(
        status_code=500,
        content=ApiResponse(
            ok=False,
            error=ApiError(
                code="INTERNAL_ERROR",
                message="An unexpected error occurred.",
            ),
        ).model_dump(),
    )


# ---------------------------------------------------------------------------
# App creation
# ---------------------------------------------------------------------------


def _init_data_store() -> None:
    """Loads the Data Store and sets the classroom singleton in deps.py.

    An absent persistence file starts an empty store, seeded with the demo
    class when SEED_DEMO_DATA is on. A corrupt file is an error: the
    server refuses to start rather than overwrite it.
    """
    from eduai.api import deps
    from eduai.classroom.demo import seed_demo_data
    from eduai.classroom.service import ClassroomService
    from eduai.hooks.persistence import JsonFilePersistence
    from eduai.schemas import DataStore

    settings = get_settings()
    persistence = JsonFilePersistence(settings.data_path)

    store = persistence.load()
    if store is None:
        store = DataStore()
        if settings.seed_demo_data:
            seed_demo_data(store, deps._clock)
        persistence.save(store)

    deps._classroom = ClassroomService(store, persistence, deps._clock)
    logger.info(
        "Data store ready: %d classes, %d knowledge items (%s)",
        len(store.classes),
        len(store.knowledge),
        settings.data_path,
    )


def _init_ai_services() -> None:
    """Initializes the assistant engine singleton during app startup.

    Resolves the configured model and creates the provider. A missing API
    key is logged as a warning and leaves the engine without a provider:
    the server still starts and every answer comes from the fallback
    matcher.

    Must be called AFTER _init_data_store() (the engine needs the
    classroom service).
    """
    from eduai.ai.assistant import AssistantEngine
    from eduai.api import deps
    from eduai.models import resolve_model_config

    settings = get_settings()

    model_config = resolve_model_config(
        settings.ai_backend,
        settings.assistant_model,
        settings.assistant_max_tokens,
    )
    provider = deps.create_provider(model_config, settings)
    if provider is None:
        logger.warning(
            "Missing API key for provider '%s'. "
            "Assistant answers will come from the knowledge base matcher only.",
            model_config.provider,
        )

    deps._assistant_engine = AssistantEngine(
        provider,
        model_config,
        deps.get_classroom(),
        deps._clock,
        timeout_seconds=settings.assistant_timeout_seconds,
    )

    logger.info(
        "AI services initialized: provider=%s, model=%s, timeout=%s",
        model_config.provider,
        model_config.model_id,
        settings.assistant_timeout_seconds or "none",
    )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Saves the Data Store once more when the server shuts down."""
    yield
    from eduai.api import deps

    if deps._classroom is not None:
        deps._classroom.save()
        logger.info("Data store saved on shutdown")


def create_app() -> FastAPI:
    """Creates and configures the FastAPI application."""
    settings = get_settings()

    # Configure logging level
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))

    application = FastAPI(
        title="EduAI Pro",
        description="Classroom assistant answering student questions from a teacher-curated knowledge base",
        version="0.1.0",
        lifespan=_lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --

    # CORS must be outermost to handle preflight before auth
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request logging (raw ASGI)
    application.add_middleware(RequestLoggingMiddleware)

    # -- Exception handlers --
    application.add_exception_handler(StarletteHTTPException, _http_exception_response)
    application.add_exception_handler(RequestValidationError, _validation_error_response)
    application.add_exception_handler(ClassroomError, _classroom_error_response)
    application.add_exception_handler(Exception, _unhandled_exception_response)

    # -- Routers --
    _register_routes(application)

    # -- Data store --
    _init_data_store()

    # -- AI services (must come after the data store) --
    _init_ai_services()

    return application


def _register_routes(application: FastAPI) -> None:
    """Registers all API routers on the application."""
    from fastapi import APIRouter

    v1 = APIRouter(prefix="/api/v1")

    @v1.get("/health")
    async def health() -> dict[str, Any]:
        return ApiResponse(ok=True, data={"status": "healthy"}).model_dump()

    # Sub-routers (BEFORE including v1 into the app):
    from eduai.api.auth import router as auth_router

    v1.include_router(auth_router, prefix="/auth", tags=["auth"])

    from eduai.api.teacher import router as teacher_router

    v1.include_router(teacher_router, prefix="/teacher", tags=["teacher"])

    from eduai.api.student import router as student_router

    v1.include_router(student_router, prefix="/student", tags=["student"])

    application.include_router(v1)


app = create_app()
