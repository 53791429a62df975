"""Tests for the FastAPI app — startup wiring, middleware, and error envelopes.

Covers: health endpoint, CORS headers, bearer auth dependency (happy path +
failures), exception handlers (HTTPException, validation, classroom errors,
unhandled), request logging, Data Store initialization and provider wiring.

Uses httpx.AsyncClient with ASGITransport (async test client). All tests use
explicit @pytest.mark.asyncio per strict mode.
"""

import logging

import httpx
import pytest
from fastapi import APIRouter, Depends
from httpx import ASGITransport
from pydantic import BaseModel

from eduai.ai.providers.mock import MockProvider
from eduai.api import deps
from eduai.api.deps import create_provider, get_current_user
from eduai.classroom.demo import DEMO_CLASS_CODE
from eduai.classroom.errors import NotFound
from eduai.config import get_settings
from eduai.main import _lifespan, app
from eduai.models import ModelConfig
from eduai.schemas import User


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def client() -> httpx.AsyncClient:
    """Async test client wired to the app."""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    return httpx.AsyncClient(transport=transport, base_url="http://test")


# ---------------------------------------------------------------------------
# Helper: mount a tiny test route for auth and error testing
# ---------------------------------------------------------------------------

_test_router = APIRouter(prefix="/api/v1/test")


@_test_router.get("/protected")
async def protected_route(user: User = Depends(get_current_user)) -> dict:
    return {"user_id": user.id, "role": user.role}


class _BodyModel(BaseModel):
    name: str
    age: int


@_test_router.post("/validated")
async def validated_route(body: _BodyModel) -> dict:
    return {"name": body.name}


@_test_router.get("/explode")
async def exploding_route() -> dict:
    raise RuntimeError("Something went terribly wrong")


@_test_router.get("/missing-class")
async def missing_class_route() -> dict:
    raise NotFound("Class 'x' not found.", code="CLASS_NOT_FOUND")


app.include_router(_test_router)


# ---------------------------------------------------------------------------
# Health endpoint
# ---------------------------------------------------------------------------


class TestHealthEndpoint:
    @pytest.mark.asyncio
    async def test_health_returns_api_response(self, client: httpx.AsyncClient) -> None:
        async with client:
            resp = await client.get("/api/v1/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["ok"] is True
        assert body["data"]["status"] == "healthy"
        assert body["error"] is None


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------


class TestCORS:
    """CORS middleware — allows configured origins, blocks others."""

    @pytest.mark.asyncio
    async def test_allowed_origin_gets_cors_header(self, client: httpx.AsyncClient) -> None:
        async with client:
            resp = await client.options(
                "/api/v1/health",
                headers={
                    "Origin": "http://localhost:3000",
                    "Access-Control-Request-Method": "GET",
                },
            )
        assert resp.headers.get("access-control-allow-origin") == "http://localhost:3000"

    @pytest.mark.asyncio
    async def test_disallowed_origin_no_cors_header(self, client: httpx.AsyncClient) -> None:
        async with client:
            resp = await client.options(
                "/api/v1/health",
                headers={
                    "Origin": "http://evil.example.com",
                    "Access-Control-Request-Method": "GET",
                },
            )
        assert "access-control-allow-origin" not in resp.headers


# ---------------------------------------------------------------------------
# Auth dependency
# ---------------------------------------------------------------------------


class TestAuthDependency:
    """get_current_user — Bearer token extraction and validation."""

    @pytest.mark.asyncio
    async def test_issued_token_resolves_user(self, client: httpx.AsyncClient) -> None:
        user = User(id="teacher-1", role="teacher", name="ms.frizzle")
        token = await deps.get_auth_service().issue_token(user)

        async with client:
            resp = await client.get(
                "/api/v1/test/protected",
                headers={"Authorization": f"Bearer {token}"},
            )
        assert resp.status_code == 200
        assert resp.json() == {"user_id": "teacher-1", "role": "teacher"}

    @pytest.mark.asyncio
    async def test_unknown_token_returns_401(self, client: httpx.AsyncClient) -> None:
        async with client:
            resp = await client.get(
                "/api/v1/test/protected",
                headers={"Authorization": "Bearer not-issued"},
            )
        assert resp.status_code == 401
        assert resp.json()["error"]["code"] == "UNAUTHORIZED"

    @pytest.mark.asyncio
    async def test_missing_header_returns_401(self, client: httpx.AsyncClient) -> None:
        async with client:
            resp = await client.get("/api/v1/test/protected")
        assert resp.status_code == 401
        body = resp.json()
        assert body["ok"] is False
        assert body["error"]["code"] == "UNAUTHORIZED"

    @pytest.mark.asyncio
    async def test_malformed_header_returns_401(self, client: httpx.AsyncClient) -> None:
        async with client:
            resp = await client.get(
                "/api/v1/test/protected",
                headers={"Authorization": "Basic abc123"},
            )
        assert resp.status_code == 401

    @pytest.mark.asyncio
    async def test_no_scheme_returns_401(self, client: httpx.AsyncClient) -> None:
        async with client:
            resp = await client.get(
                "/api/v1/test/protected",
                headers={"Authorization": "just-a-token"},
            )
        assert resp.status_code == 401


# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------


class TestExceptionHandlers:
    """Global exception handling — consistent ApiResponse envelopes."""

    @pytest.mark.asyncio
    async def test_unhandled_exception_returns_500(self, client: httpx.AsyncClient) -> None:
        async with client:
            resp = await client.get("/api/v1/test/explode")
        assert resp.status_code == 500
        body = resp.json()
        assert body["ok"] is False
        assert body["error"]["code"] == "INTERNAL_ERROR"
        assert "went terribly wrong" not in resp.text

    @pytest.mark.asyncio
    async def test_classroom_error_mapped(self, client: httpx.AsyncClient) -> None:
        async with client:
            resp = await client.get("/api/v1/test/missing-class")
        assert resp.status_code == 404
        assert resp.json()["error"] == {
            "code": "CLASS_NOT_FOUND",
            "message": "Class 'x' not found.",
        }

    @pytest.mark.asyncio
    async def test_validation_error_returns_422(self, client: httpx.AsyncClient) -> None:
        async with client:
            resp = await client.post("/api/v1/test/validated", json={"name": "test"})
        assert resp.status_code == 422
        assert resp.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_404_returns_api_response(self, client: httpx.AsyncClient) -> None:
        async with client:
            resp = await client.get("/api/v1/nonexistent")
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "HTTP_ERROR"


# ---------------------------------------------------------------------------
# Request logging
# ---------------------------------------------------------------------------


class TestRequestLogging:
    @pytest.mark.asyncio
    async def test_request_is_logged(
        self, client: httpx.AsyncClient, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.INFO, logger="eduai"):
            async with client:
                await client.get("/api/v1/health")

        log_messages = [r.message for r in caplog.records if r.name == "eduai"]
        assert any(
            "GET" in msg and "/api/v1/health" in msg and "200" in msg and "ms" in msg
            for msg in log_messages
        )


# ---------------------------------------------------------------------------
# Startup wiring
# ---------------------------------------------------------------------------


class TestStartup:
    def test_data_store_seeded_and_saved(self) -> None:
        classroom = deps.get_classroom()
        assert [c.code for c in classroom.store.classes] == [DEMO_CLASS_CODE]
        assert get_settings().data_path.exists()

    def test_engine_uses_mock_backend(self) -> None:
        engine = deps.get_assistant_engine()
        assert engine.has_provider

    @pytest.mark.asyncio
    async def test_shutdown_saves_store(self, monkeypatch: pytest.MonkeyPatch) -> None:
        classroom = deps.get_classroom()
        calls = []
        monkeypatch.setattr(classroom, "save", lambda: calls.append(True))

        async with _lifespan(app):
            pass

        assert calls == [True]

    def test_missing_singletons_give_503(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from fastapi import HTTPException

        monkeypatch.setattr(deps, "_classroom", None)
        with pytest.raises(HTTPException) as exc_info:
            deps.get_classroom()
        assert exc_info.value.status_code == 503
        assert exc_info.value.detail["error"]["code"] == "SERVICE_UNAVAILABLE"


class TestCreateProvider:
    def test_mock(self) -> None:
        config = ModelConfig(provider="mock", model_id="x")
        assert isinstance(create_provider(config, get_settings()), MockProvider)

    def test_missing_key_gives_none(self) -> None:
        settings = get_settings()
        if settings.anthropic_api_key:
            pytest.skip("ANTHROPIC_API_KEY set in environment")
        config = ModelConfig(provider="anthropic", model_id="claude-sonnet-4-20250514")
        assert create_provider(config, settings) is None

    def test_unknown_provider(self) -> None:
        with pytest.raises(ValueError):
            create_provider(ModelConfig(provider="openai", model_id="x"), get_settings())
