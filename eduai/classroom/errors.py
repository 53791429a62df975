"""Classroom exception hierarchy.

Every user-facing failure of a classroom action is a ClassroomError with an
uppercase error code and the HTTP status the API layer should answer with.
Raising one means nothing was mutated.

Remote assistant failures are deliberately absent: they never reach the
user and are handled inside the assistant engine.
"""


class ClassroomError(Exception):
    """Base exception for classroom actions."""

    code = "CLASSROOM_ERROR"
    status_code = 400

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class ValidationFailed(ClassroomError):
    """A required field is missing or blank."""

    code = "VALIDATION_ERROR"
    status_code = 422


class NotFound(ClassroomError):
    """An identifier or class code does not resolve to anything."""

    code = "NOT_FOUND"
    status_code = 404


class SendInProgress(ClassroomError):
    """A message is already awaiting an answer in this conversation."""

    code = "SEND_IN_PROGRESS"
    status_code = 409

    def __init__(self, conversation_key: str) -> None:
        super().__init__("A message is already being answered in this conversation.")
        self.conversation_key = conversation_key
