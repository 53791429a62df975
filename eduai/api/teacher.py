"""Teacher-facing API routes — dashboard, classes, projects, knowledge, rules.

The teacher's window into EduAI Pro:
- Overview: entity counts, recent classes, recent activity feed
- Classes and projects: create, list, delete (with cascades)
- Knowledge base: browse with class/project/search filters, add, edit, delete
- Rules: read and write the global, class and project rule texts
- Students: who joined which class

All responses use the ApiResponse envelope. Teacher role required on every
endpoint via the require_teacher dependency. Deletes are destructive and
need ``?confirm=true``; without it the server answers 409 and changes
nothing.
"""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from eduai.api.deps import get_classroom, get_clock, require_teacher
from eduai.classroom.formatting import describe_activity, format_timestamp
from eduai.classroom.ledger import recent_activity
from eduai.classroom.service import ClassroomService, ClassSummary
from eduai.hooks.interfaces import Clock
from eduai.schemas import ApiError, ApiResponse, RuleScope, User

router = APIRouter()


# ---------------------------------------------------------------------------
# Request bodies (API-boundary types, local to this module)
# ---------------------------------------------------------------------------


class CreateClassRequest(BaseModel):
    """Request body for POST /classes."""

    name: str
    subject: str
    grade: str = ""
    description: str = ""


class CreateProjectRequest(BaseModel):
    """Request body for POST /projects."""

    class_id: str
    name: str
    due_date: date | None = None
    description: str = ""


class AddKnowledgeRequest(BaseModel):
    """Request body for POST /knowledge.

    tags may be comma-separated text or a list.
    """

    class_id: str
    question: str
    answer: str
    project_id: str | None = None
    tags: str | list[str] = ""


class EditKnowledgeRequest(BaseModel):
    """Request body for PATCH /knowledge/{knowledge_id}."""

    question: str
    answer: str


class SaveRulesRequest(BaseModel):
    """Request body for PUT /rules/{scope}."""

    text: str = ""
    target_id: str | None = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _require_confirmation(confirm: bool, what: str) -> None:
    """Rejects a destructive request that was not explicitly confirmed."""
    if not confirm:
        raise HTTPException(
            status_code=409,
            detail=ApiResponse(
                ok=False,
                error=ApiError(
                    code="CONFIRMATION_REQUIRED",
                    message=f"Deleting a {what} cannot be undone. Repeat with confirm=true.",
                ),
            ).model_dump(),
        )


def _summary_to_dict(summary: ClassSummary) -> dict:
    data = summary.school_class.model_dump(mode="json")
    data.update({
        "student_count": summary.student_count,
        "project_count": summary.project_count,
        "knowledge_count": summary.knowledge_count,
    })
    return data


# ---------------------------------------------------------------------------
# Overview
# ---------------------------------------------------------------------------


@router.get("/overview")
async def overview(
    user: User = Depends(require_teacher),
    classroom: ClassroomService = Depends(get_classroom),
    clock: Clock = Depends(get_clock),
) -> dict:
    """Dashboard: counts, the three newest classes, the five newest events."""
    activity = [
        {
            "type": entry.type,
            "class_id": entry.class_id,
            "text": describe_activity(entry),
            "time": format_timestamp(entry.timestamp, clock),
        }
        for entry in recent_activity(classroom.store)
    ]
    return ApiResponse(
        ok=True,
        data={
            "stats": classroom.stats(),
            "recent_classes": [_summary_to_dict(s) for s in classroom.recent_classes()],
            "recent_activity": activity,
        },
    ).model_dump()


# ---------------------------------------------------------------------------
# Classes
# ---------------------------------------------------------------------------


@router.get("/classes")
async def list_classes(
    user: User = Depends(require_teacher),
    classroom: ClassroomService = Depends(get_classroom),
) -> dict:
    return ApiResponse(
        ok=True,
        data={"classes": [_summary_to_dict(s) for s in classroom.class_summaries()]},
    ).model_dump()


@router.post("/classes")
async def create_class(
    body: CreateClassRequest,
    user: User = Depends(require_teacher),
    classroom: ClassroomService = Depends(get_classroom),
) -> dict:
    """Creates a class. The response carries the generated join code."""
    school_class = classroom.create_class(
        body.name, body.subject, grade=body.grade, description=body.description
    )
    return ApiResponse(ok=True, data=school_class.model_dump(mode="json")).model_dump()


@router.delete("/classes/{class_id}")
async def delete_class(
    class_id: str,
    confirm: bool = False,
    user: User = Depends(require_teacher),
    classroom: ClassroomService = Depends(get_classroom),
) -> dict:
    """Deletes a class with all its projects, knowledge items and students."""
    _require_confirmation(confirm, "class")
    classroom.delete_class(class_id)
    return ApiResponse(ok=True, data={"deleted": class_id}).model_dump()


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


@router.get("/projects")
async def list_projects(
    class_id: str | None = None,
    user: User = Depends(require_teacher),
    classroom: ClassroomService = Depends(get_classroom),
) -> dict:
    projects = classroom.list_projects(class_id)
    return ApiResponse(
        ok=True,
        data={"projects": [p.model_dump(mode="json") for p in projects]},
    ).model_dump()


@router.post("/projects")
async def create_project(
    body: CreateProjectRequest,
    user: User = Depends(require_teacher),
    classroom: ClassroomService = Depends(get_classroom),
) -> dict:
    project = classroom.create_project(
        body.class_id, body.name, due_date=body.due_date, description=body.description
    )
    return ApiResponse(ok=True, data=project.model_dump(mode="json")).model_dump()


@router.delete("/projects/{project_id}")
async def delete_project(
    project_id: str,
    confirm: bool = False,
    user: User = Depends(require_teacher),
    classroom: ClassroomService = Depends(get_classroom),
) -> dict:
    """Deletes a project. Its knowledge items stay, as class-wide items."""
    _require_confirmation(confirm, "project")
    classroom.delete_project(project_id)
    return ApiResponse(ok=True, data={"deleted": project_id}).model_dump()


# ---------------------------------------------------------------------------
# Knowledge base
# ---------------------------------------------------------------------------


@router.get("/knowledge")
async def list_knowledge(
    class_id: str | None = None,
    project_id: str | None = None,
    search: str | None = None,
    user: User = Depends(require_teacher),
    classroom: ClassroomService = Depends(get_classroom),
) -> dict:
    """Browses the knowledge base.

    The project filter is strict here: class-wide items are not listed
    under a project.
    """
    items = classroom.list_knowledge(class_id, project_id, search)
    return ApiResponse(
        ok=True,
        data={"knowledge": [k.model_dump(mode="json") for k in items]},
    ).model_dump()


@router.post("/knowledge")
async def add_knowledge(
    body: AddKnowledgeRequest,
    user: User = Depends(require_teacher),
    classroom: ClassroomService = Depends(get_classroom),
) -> dict:
    item = classroom.add_knowledge(
        body.class_id,
        body.question,
        body.answer,
        project_id=body.project_id,
        tags=body.tags,
    )
    return ApiResponse(ok=True, data=item.model_dump(mode="json")).model_dump()


@router.patch("/knowledge/{knowledge_id}")
async def edit_knowledge(
    knowledge_id: str,
    body: EditKnowledgeRequest,
    user: User = Depends(require_teacher),
    classroom: ClassroomService = Depends(get_classroom),
) -> dict:
    item = classroom.edit_knowledge(knowledge_id, body.question, body.answer)
    return ApiResponse(ok=True, data=item.model_dump(mode="json")).model_dump()


@router.delete("/knowledge/{knowledge_id}")
async def delete_knowledge(
    knowledge_id: str,
    confirm: bool = False,
    user: User = Depends(require_teacher),
    classroom: ClassroomService = Depends(get_classroom),
) -> dict:
    _require_confirmation(confirm, "knowledge item")
    classroom.delete_knowledge(knowledge_id)
    return ApiResponse(ok=True, data={"deleted": knowledge_id}).model_dump()


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


@router.get("/rules")
async def get_all_rules(
    user: User = Depends(require_teacher),
    classroom: ClassroomService = Depends(get_classroom),
) -> dict:
    """Returns the whole rule set, keyed ``global``, ``classes``, ``projects``."""
    return ApiResponse(
        ok=True,
        data=classroom.store.rules.model_dump(by_alias=True),
    ).model_dump()


@router.get("/rules/{scope}")
async def get_rules(
    scope: RuleScope,
    target_id: str | None = None,
    user: User = Depends(require_teacher),
    classroom: ClassroomService = Depends(get_classroom),
) -> dict:
    return ApiResponse(
        ok=True,
        data={
            "scope": scope.value,
            "target_id": target_id,
            "text": classroom.get_rules(scope, target_id),
        },
    ).model_dump()


@router.put("/rules/{scope}")
async def save_rules(
    scope: RuleScope,
    body: SaveRulesRequest,
    user: User = Depends(require_teacher),
    classroom: ClassroomService = Depends(get_classroom),
) -> dict:
    """Stores one scope's rule text. Empty text clears the override."""
    classroom.save_rules(scope, body.text, body.target_id)
    return ApiResponse(
        ok=True,
        data={"scope": scope.value, "target_id": body.target_id, "text": body.text},
    ).model_dump()


# ---------------------------------------------------------------------------
# Students
# ---------------------------------------------------------------------------


@router.get("/students")
async def list_students(
    class_id: str | None = None,
    user: User = Depends(require_teacher),
    classroom: ClassroomService = Depends(get_classroom),
) -> dict:
    students = classroom.list_students(class_id)
    return ApiResponse(
        ok=True,
        data={"students": [s.model_dump(mode="json") for s in students]},
    ).model_dump()
