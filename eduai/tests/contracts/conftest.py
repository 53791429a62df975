"""Fixtures for contract tests — one parameterized fixture per hook interface.

Each fixture yields a fresh implementation instance. The params list names
every implementation the contract runs against ("stub" is the in-memory
development implementation).

TEAM: To test your implementation against the contracts:
    1. Add your param string (e.g., "postgres") to the params list.
    2. Add an elif branch that yields your implementation instance.
    3. Run: python -m pytest eduai/tests/contracts/ -v
    All tests should pass. If any fail, your implementation doesn't satisfy
    the contract — read the failing test's docstring for what's expected.

Async hooks use @pytest_asyncio.fixture for async fixture support in strict
mode; the synchronous hooks (persistence, clock) use plain pytest fixtures.
"""

from datetime import datetime, timezone

import pytest
import pytest_asyncio

from eduai.hooks.auth import InMemoryAuthService
from eduai.hooks.clock import FixedClock, SystemClock
from eduai.hooks.persistence import InMemoryPersistence, JsonFilePersistence
from eduai.schemas import (
    ConversationTurn,
    DataStore,
    KnowledgeItem,
    SchoolClass,
    TurnRole,
    User,
)

_CREATED = datetime(2026, 2, 18, 10, 30, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Interface fixtures (parameterized for future implementations)
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture(params=["stub"])
async def auth_service(request):
    """Yields an AuthService implementation.

    TEAM: Add your session backend here:
        @pytest_asyncio.fixture(params=["stub", "redis"])
        async def auth_service(request):
            if request.param == "stub":
                yield InMemoryAuthService()
            elif request.param == "redis":
                yield YourRedisAuthService(test_url)
    """
    if request.param == "stub":
        yield InMemoryAuthService()


@pytest.fixture(params=["stub", "json"])
def persistence(request, tmp_path):
    """Yields a StorePersistence implementation with nothing saved yet.

    The "json" param writes to an isolated temp directory.
    """
    if request.param == "stub":
        yield InMemoryPersistence()
    elif request.param == "json":
        yield JsonFilePersistence(tmp_path / "data" / "store.json")


@pytest.fixture(params=["system", "fixed"])
def clock(request):
    """Yields a Clock implementation."""
    if request.param == "system":
        yield SystemClock()
    elif request.param == "fixed":
        yield FixedClock(_CREATED)


# ---------------------------------------------------------------------------
# Helper fixtures (shared test data)
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def sample_user():
    """A student User with every optional field filled in."""
    return User(
        id="student-contract-1",
        role="student",
        name="Ada",
        class_id="class-contract-1",
        class_name="AP Biology",
        class_code="ABC234",
    )


@pytest.fixture
def sample_store():
    """A DataStore with non-default values in every collection it uses."""
    store = DataStore(
        classes=[
            SchoolClass(
                id="class-contract-1",
                name="AP Biology",
                subject="Biology",
                code="ABC234",
                created_at=_CREATED,
            )
        ],
        knowledge=[
            KnowledgeItem(
                id="k-1",
                class_id="class-contract-1",
                question="When is the lab report due?",
                answer="Friday.",
                tags=["deadline"],
                created_at=_CREATED,
            )
        ],
        conversations={
            "class-contract-1_student-contract-1_general": [
                ConversationTurn(role=TurnRole.USER, content="Hi?", timestamp=_CREATED)
            ]
        },
    )
    store.rules.global_rules = "Be encouraging."
    store.rules.classes["class-contract-1"] = "Cite sources."
    return store
