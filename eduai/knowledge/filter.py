"""Knowledge selection — which items a view or an assistant call may use.

Two project predicates live here and must stay distinct:

- ``FilterMode.SCOPED`` (teacher catalog): an item belongs to a project
  only if its project_id equals the selected project.
- ``FilterMode.CONTEXTUAL`` (assistant context): class-wide items (no
  project) stay visible inside every project of the class.

All functions are pure and keep the input order.
"""

from collections.abc import Iterable, Sequence
from enum import Enum

from eduai.schemas import KnowledgeItem

# Words that mark a question as deadline/submission information for the
# student quick-info panel.
_IMPORTANT_MARKERS = ("due", "deadline", "submit")


class FilterMode(str, Enum):
    """How a project filter treats class-wide knowledge."""

    SCOPED = "scoped"
    CONTEXTUAL = "contextual"


def _matches_query(item: KnowledgeItem, needle: str) -> bool:
    if needle in item.question.lower() or needle in item.answer.lower():
        return True
    return any(needle in tag.lower() for tag in item.tags)


def search_knowledge(
    knowledge: Iterable[KnowledgeItem], query: str | None
) -> list[KnowledgeItem]:
    """Keeps items whose question, answer or any tag contains ``query``.

    Case-insensitive substring match. An empty or None query keeps everything.
    """
    if not query:
        return list(knowledge)
    needle = query.lower()
    return [item for item in knowledge if _matches_query(item, needle)]


def filter_knowledge(
    knowledge: Iterable[KnowledgeItem],
    class_id: str,
    project_id: str | None = None,
    query: str | None = None,
    mode: FilterMode = FilterMode.SCOPED,
) -> list[KnowledgeItem]:
    """Selects the knowledge items of one class, optionally one project.

    Args:
        knowledge: All knowledge items, in insertion order.
        class_id: Only items of this class are kept.
        project_id: Optional project. How it applies depends on ``mode``.
        query: Optional free-text search (catalog browsing).
        mode: SCOPED for strict project equality, CONTEXTUAL to also keep
            class-wide items.

    Returns:
        The matching items in their original order.
    """
    items = [item for item in knowledge if item.class_id == class_id]

    if project_id:
        if mode is FilterMode.CONTEXTUAL:
            items = [
                item for item in items
                if item.project_id == project_id or not item.project_id
            ]
        else:
            items = [item for item in items if item.project_id == project_id]

    return search_knowledge(items, query)


def important_knowledge(
    knowledge: Sequence[KnowledgeItem], limit: int = 5
) -> list[KnowledgeItem]:
    """Picks deadline and submission items for the student quick-info panel.

    An item qualifies when its question mentions "due", "deadline" or
    "submit" (case-insensitive). At most ``limit`` items, input order.
    """
    picked = [
        item for item in knowledge
        if any(marker in item.question.lower() for marker in _IMPORTANT_MARKERS)
    ]
    return picked[:limit]
