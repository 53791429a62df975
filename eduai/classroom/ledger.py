"""Conversation ledger and activity log.

Conversations are stored in DataStore.conversations under a key derived
from (class, student, project). Every scope gets its own history; a
student's general chat and each project chat never share turns.

The activity log keeps the most recent ACTIVITY_LIMIT entries only.
"""

from eduai.hooks.interfaces import Clock
from eduai.schemas import ActivityEntry, ConversationTurn, DataStore, TurnRole

GENERAL_SCOPE = "general"
ACTIVITY_LIMIT = 50

_SEPARATOR = "_"
_PROJECT_PREFIX = "project:"


def conversation_key(class_id: str, student_id: str, project_id: str | None) -> str:
    """Derives the storage key of one chat history.

    No project maps to the "general" sentinel. Project IDs carry a prefix,
    so a project that happens to be called "general" keeps its own history.

    Args:
        class_id: The student's class.
        student_id: The student.
        project_id: Selected project, or None/empty for general questions.

    Returns:
        A deterministic key string.
    """
    scope = f"{_PROJECT_PREFIX}{project_id}" if project_id else GENERAL_SCOPE
    return _SEPARATOR.join((class_id, student_id, scope))


def get_history(store: DataStore, key: str) -> list[ConversationTurn]:
    """Returns the turns stored under ``key`` (empty list if none)."""
    return list(store.conversations.get(key, []))


def append_turn(
    store: DataStore,
    key: str,
    role: TurnRole,
    content: str,
    clock: Clock,
) -> ConversationTurn:
    """Appends one turn to a conversation, creating it on first use.

    Args:
        store: The Data Store to mutate.
        key: Conversation key from conversation_key().
        role: USER or ASSISTANT.
        content: The message text.
        clock: Source of the turn timestamp.

    Returns:
        The stored turn.
    """
    turn = ConversationTurn(role=role, content=content, timestamp=clock.now())
    store.conversations.setdefault(key, []).append(turn)
    return turn


def log_activity(store: DataStore, entry: ActivityEntry) -> None:
    """Appends an activity entry and drops the oldest beyond ACTIVITY_LIMIT."""
    store.activity.append(entry)
    if len(store.activity) > ACTIVITY_LIMIT:
        store.activity = store.activity[-ACTIVITY_LIMIT:]


def recent_activity(store: DataStore, limit: int = 5) -> list[ActivityEntry]:
    """Newest-first slice of the activity log."""
    if limit <= 0:
        return []
    return list(reversed(store.activity[-limit:]))
