"""Core data models — shared Pydantic types for EduAI Pro.

Every class, knowledge item, rule, conversation turn and API response flows
through these types. DataStore is the single tree the whole service reads
and writes; the persistence hook serializes it wholesale.

This is a leaf module: it imports only from pydantic and the stdlib.
No project imports allowed — everything else imports from here.

Usage:
    from eduai.schemas import DataStore, KnowledgeItem, ApiResponse
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class TurnRole(str, Enum):
    """Who said a conversation turn."""

    USER = "user"
    ASSISTANT = "assistant"


class RuleScope(str, Enum):
    """Specificity level of a rule string. Composed in declaration order."""

    GLOBAL = "global"
    CLASS = "class"
    PROJECT = "project"


# ---------------------------------------------------------------------------
# Classroom entities
# ---------------------------------------------------------------------------


class SchoolClass(BaseModel):
    """A teacher's class. Students join it with the 6-character code."""

    id: str
    name: str
    subject: str
    grade: str = ""
    description: str = ""
    code: str
    created_at: datetime


class Project(BaseModel):
    """An assignment inside a class. Knowledge can be scoped to it."""

    id: str
    class_id: str
    name: str
    due_date: date | None = None
    description: str = ""
    created_at: datetime


class KnowledgeItem(BaseModel):
    """One question/answer pair curated by a teacher.

    project_id is None for class-wide knowledge. Mutable: edited in place,
    and project_id is nulled when the owning project is deleted.
    """

    id: str
    class_id: str
    project_id: str | None = None
    question: str
    answer: str
    tags: list[str] = Field(default_factory=list)
    created_at: datetime


class Student(BaseModel):
    """A student who joined a class by code. Names are unique per class code."""

    id: str
    name: str
    class_code: str
    class_id: str
    class_name: str
    joined_at: datetime


class RuleSet(BaseModel):
    """Policy text at three scopes. Empty string means "no override".

    Serialized with the key ``global`` (a Python keyword), so the field is
    aliased. Dump with ``by_alias=True`` to keep the stored shape.
    """

    model_config = ConfigDict(populate_by_name=True)

    global_rules: str = Field(default="", alias="global")
    classes: dict[str, str] = Field(default_factory=dict)
    projects: dict[str, str] = Field(default_factory=dict)


class ConversationTurn(BaseModel):
    """One chat turn. Append-only within a conversation key."""

    model_config = ConfigDict(frozen=True)

    role: TurnRole
    content: str
    timestamp: datetime


class ActivityEntry(BaseModel):
    """One line of the teacher's activity feed."""

    model_config = ConfigDict(frozen=True)

    type: Literal["student_joined", "knowledge_added", "project_created"]
    class_id: str
    student_name: str | None = None
    project_name: str | None = None
    timestamp: datetime


class DataStore(BaseModel):
    """The whole application state. One instance per process.

    Lists keep insertion order; conversations is keyed by conversation key
    (see eduai.classroom.ledger.conversation_key).
    """

    classes: list[SchoolClass] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)
    knowledge: list[KnowledgeItem] = Field(default_factory=list)
    students: list[Student] = Field(default_factory=list)
    rules: RuleSet = Field(default_factory=RuleSet)
    conversations: dict[str, list[ConversationTurn]] = Field(default_factory=dict)
    activity: list[ActivityEntry] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


class User(BaseModel):
    """Identity model returned by the auth layer.

    Frozen — users are identity objects, no mutation after creation.
    Students carry the class they joined; teachers carry their e-mail.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    role: Literal["student", "teacher"]
    name: str
    email: str | None = None
    class_id: str | None = None
    class_name: str | None = None
    class_code: str | None = None


# ---------------------------------------------------------------------------
# API envelope
# ---------------------------------------------------------------------------


class ApiError(BaseModel):
    """Error detail inside ApiResponse.error.

    code is an uppercase string like "CLASS_NOT_FOUND", "VALIDATION_ERROR",
    "SEND_IN_PROGRESS". Not an enum — error codes grow with the API.
    """

    model_config = ConfigDict(frozen=True)

    code: str
    message: str


class ApiResponse(BaseModel):
    """Universal response envelope — every API endpoint returns this shape."""

    model_config = ConfigDict(frozen=True)

    ok: bool
    data: Any | None = None
    error: ApiError | None = None
