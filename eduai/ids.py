"""Identifier and class-code generation.

new_id() gives every entity a unique opaque string. new_class_code() gives
classes a short join code from an alphabet without look-alike characters
(no I, O, 0 or 1), so students can type it from a whiteboard.
"""

import secrets
from collections.abc import Collection
from uuid import uuid4

CLASS_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
CLASS_CODE_LENGTH = 6


def new_id() -> str:
    """Returns a fresh unique identifier."""
    return uuid4().hex


def new_class_code(existing: Collection[str] = ()) -> str:
    """Returns a class code that is not in ``existing``.

    Draws again on collision.

    Args:
        existing: Codes already assigned to classes.
    """
    while True:
        code = "".join(
            secrets.choice(CLASS_CODE_ALPHABET) for _ in range(CLASS_CODE_LENGTH)
        )
        if code not in existing:
            return code
