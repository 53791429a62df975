"""Student-facing API routes — projects, quick info, conversation, messages.

The student's side of EduAI Pro, always within the class they joined:
- Projects of the class (the chat scope selector)
- Quick info: deadline and submission items for the selected scope
- Conversation history of the selected scope
- Messages: ask the assistant one question

All responses use the ApiResponse envelope. Student role required on every
endpoint via the require_student dependency. ``project_id`` selects a
project scope; omitted means general questions.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from eduai.ai.assistant import AssistantEngine
from eduai.api.deps import get_assistant_engine, get_classroom, require_student
from eduai.classroom.ledger import conversation_key, get_history
from eduai.classroom.service import ClassroomService
from eduai.knowledge.filter import FilterMode, filter_knowledge, important_knowledge
from eduai.schemas import ApiResponse, SchoolClass, User

router = APIRouter()

WELCOME_TEMPLATE = (
    "Welcome to {class_name}! Ask me anything about the class or your assignments."
)


# ---------------------------------------------------------------------------
# Request bodies (API-boundary types, local to this module)
# ---------------------------------------------------------------------------


class SendMessageRequest(BaseModel):
    """Request body for POST /messages."""

    question: str
    project_id: str | None = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _check_scope(
    classroom: ClassroomService, user: User, project_id: str | None
) -> SchoolClass:
    """Returns the student's class, checking it still exists and owns the project.

    Raises:
        NotFound: CLASS_NOT_FOUND or PROJECT_NOT_FOUND.
    """
    school_class = classroom.get_class(user.class_id)
    if project_id:
        classroom.get_class_project(user.class_id, project_id)
    return school_class


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("/projects")
async def list_projects(
    user: User = Depends(require_student),
    classroom: ClassroomService = Depends(get_classroom),
) -> dict:
    projects = classroom.list_projects(user.class_id)
    return ApiResponse(
        ok=True,
        data={"projects": [p.model_dump(mode="json") for p in projects]},
    ).model_dump()


@router.get("/quick-info")
async def quick_info(
    project_id: str | None = None,
    user: User = Depends(require_student),
    classroom: ClassroomService = Depends(get_classroom),
) -> dict:
    """Deadline and submission items of the class or the selected project."""
    _check_scope(classroom, user, project_id)
    scoped = filter_knowledge(
        classroom.store.knowledge,
        user.class_id,
        project_id=project_id,
        mode=FilterMode.SCOPED,
    )
    items = [
        {"question": item.question, "answer": item.answer}
        for item in important_knowledge(scoped)
    ]
    return ApiResponse(ok=True, data={"items": items}).model_dump()


@router.get("/conversation")
async def get_conversation(
    project_id: str | None = None,
    user: User = Depends(require_student),
    classroom: ClassroomService = Depends(get_classroom),
    engine: AssistantEngine = Depends(get_assistant_engine),
) -> dict:
    """History of the selected scope, with the welcome line for empty chats.

    ``sending`` is true while a question in this scope awaits its answer;
    ``ai_available`` is false when every answer comes from the fallback
    matcher.
    """
    school_class = _check_scope(classroom, user, project_id)
    key = conversation_key(user.class_id, user.id, project_id)
    history = get_history(classroom.store, key)
    return ApiResponse(
        ok=True,
        data={
            "conversation_key": key,
            "messages": [turn.model_dump(mode="json") for turn in history],
            "welcome": WELCOME_TEMPLATE.format(class_name=school_class.name),
            "sending": engine.send_guard.is_busy(key),
            "ai_available": engine.has_provider,
        },
    ).model_dump()


@router.post("/messages")
async def send_message(
    body: SendMessageRequest,
    user: User = Depends(require_student),
    classroom: ClassroomService = Depends(get_classroom),
    engine: AssistantEngine = Depends(get_assistant_engine),
) -> dict:
    """Asks the assistant one question in the selected scope.

    Both turns are stored before the response is sent. ``source`` tells
    whether the remote model (``ai``) or the local matcher (``fallback``)
    produced the answer. A second question while the first is still
    being answered gets 409 SEND_IN_PROGRESS.
    """
    project_id = body.project_id or None
    school_class = _check_scope(classroom, user, project_id)

    reply = await engine.ask(
        class_id=user.class_id,
        class_name=school_class.name,
        student_id=user.id,
        project_id=project_id,
        question=body.question,
    )

    return ApiResponse(
        ok=True,
        data={
            "conversation_key": reply.conversation_key,
            "message": reply.assistant_turn.model_dump(mode="json"),
            "source": reply.source,
            "history_length": reply.history_length,
        },
    ).model_dump()
