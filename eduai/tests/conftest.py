"""Shared test fixtures for the EduAI Pro suite.

Factory-pattern fixtures that return callables accepting **overrides.
Test modules import from here — no reinventing test scaffolding.

The environment is pinned before any eduai module is imported: the mock
AI backend (no API keys needed) and a throwaway data file, so importing
eduai.main never touches the real data directory.

Fixtures:
    mock_provider: Factory for MockProvider instances
    fixed_clock: FixedClock at 2026-03-01 12:00 UTC
    make_knowledge: Factory for KnowledgeItem instances
    make_store: Factory for DataStore instances
    classroom: ClassroomService over an InMemoryPersistence
"""

import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from uuid import uuid4

os.environ["AI_BACKEND"] = "mock"
os.environ["SEED_DEMO_DATA"] = "true"
os.environ["DATA_PATH"] = str(
    Path(tempfile.mkdtemp(prefix="eduai-test-")) / "eduai_pro_data.json"
)

import pytest  # noqa: E402

from eduai.ai.providers.mock import MockProvider  # noqa: E402
from eduai.classroom.service import ClassroomService  # noqa: E402
from eduai.hooks.clock import FixedClock  # noqa: E402
from eduai.hooks.persistence import InMemoryPersistence  # noqa: E402
from eduai.schemas import DataStore, KnowledgeItem  # noqa: E402

FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# MockProvider factory
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_provider():
    """Returns a factory function for creating MockProvider instances."""

    def _make(**kwargs) -> MockProvider:
        return MockProvider(**kwargs)

    return _make


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------


@pytest.fixture
def fixed_clock() -> FixedClock:
    """A clock frozen at FIXED_NOW. Advance it explicitly in tests."""
    return FixedClock(FIXED_NOW)


# ---------------------------------------------------------------------------
# KnowledgeItem / DataStore factories
# ---------------------------------------------------------------------------


@pytest.fixture
def make_knowledge():
    """Returns a factory function for creating KnowledgeItem instances.

    Defaults produce a class-wide item in class "class-1" with a unique id.
    Override any field via kwargs.
    """

    def _make(**overrides) -> KnowledgeItem:
        defaults = {
            "id": f"k-{uuid4().hex[:8]}",
            "class_id": "class-1",
            "project_id": None,
            "question": "What are the office hours?",
            "answer": "Monday and Wednesday 3:00-4:00 PM in Room 201.",
            "tags": [],
            "created_at": FIXED_NOW,
        }
        defaults.update(overrides)
        return KnowledgeItem(**defaults)

    return _make


@pytest.fixture
def make_store():
    """Returns a factory function for creating DataStore instances.

    Accepts any DataStore field as a keyword; everything else is empty.
    """

    def _make(**fields) -> DataStore:
        return DataStore(**fields)

    return _make


# ---------------------------------------------------------------------------
# ClassroomService
# ---------------------------------------------------------------------------


@pytest.fixture
def persistence() -> InMemoryPersistence:
    return InMemoryPersistence()


@pytest.fixture
def classroom(persistence, fixed_clock) -> ClassroomService:
    """A ClassroomService over an empty store with in-memory persistence."""
    return ClassroomService(DataStore(), persistence, fixed_clock)
