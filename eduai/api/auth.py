"""Sign-in routes — teacher login, student join, logout.

There are no passwords: a teacher signs in with an e-mail address and a
student joins a class with their name and the class code. Both issue an
opaque bearer token through the AuthService hook.

All responses use the ApiResponse envelope.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from eduai.api.deps import (
    get_auth_service,
    get_bearer_token,
    get_classroom,
    get_current_user,
)
from eduai.classroom.errors import ValidationFailed
from eduai.classroom.service import ClassroomService
from eduai.hooks.interfaces import AuthService
from eduai.ids import new_id
from eduai.schemas import ApiResponse, User

router = APIRouter()


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------


class TeacherLoginRequest(BaseModel):
    """Request body for POST /auth/teacher."""

    email: str


class StudentJoinRequest(BaseModel):
    """Request body for POST /auth/student."""

    name: str
    class_code: str


def _session_payload(token: str, user: User) -> dict:
    return ApiResponse(
        ok=True,
        data={"token": token, "user": user.model_dump()},
    ).model_dump()


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.post("/teacher")
async def teacher_login(
    body: TeacherLoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> dict:
    """Signs a teacher in. The display name is the e-mail's local part."""
    email = body.email.strip()
    if not email:
        raise ValidationFailed("Please enter your email.")

    user = User(
        id=new_id(),
        role="teacher",
        name=email.split("@", 1)[0],
        email=email,
    )
    token = await auth_service.issue_token(user)
    return _session_payload(token, user)


@router.post("/student")
async def student_join(
    body: StudentJoinRequest,
    auth_service: AuthService = Depends(get_auth_service),
    classroom: ClassroomService = Depends(get_classroom),
) -> dict:
    """Joins (or re-joins) a class by code and signs the student in."""
    student = classroom.join_class(body.name, body.class_code)

    user = User(
        id=student.id,
        role="student",
        name=student.name,
        class_id=student.class_id,
        class_name=student.class_name,
        class_code=student.class_code,
    )
    token = await auth_service.issue_token(user)
    return _session_payload(token, user)


@router.post("/logout")
async def logout(
    token: str = Depends(get_bearer_token),
    auth_service: AuthService = Depends(get_auth_service),
) -> dict:
    await auth_service.revoke_token(token)
    return ApiResponse(ok=True, data={"logged_out": True}).model_dump()


@router.get("/me")
async def me(user: User = Depends(get_current_user)) -> dict:
    """Returns the signed-in user."""
    return ApiResponse(ok=True, data=user.model_dump()).model_dump()
