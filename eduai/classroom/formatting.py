"""Human-readable text for dashboard views.

Relative timestamps and activity descriptions, the way the teacher
overview shows them. "Now" always comes from the injected Clock.
"""

from datetime import datetime, timezone

from eduai.hooks.interfaces import Clock
from eduai.schemas import ActivityEntry


def format_timestamp(timestamp: datetime, clock: Clock) -> str:
    """Formats a timestamp relative to the clock's now.

    Returns "Just now" under a minute, "N min ago" under an hour,
    "N hours ago" under a day, and the ISO calendar date beyond that.
    Future timestamps read as "Just now".
    """
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    seconds = (clock.now() - timestamp).total_seconds()

    if seconds < 60:
        return "Just now"
    if seconds < 3600:
        return f"{int(seconds // 60)} min ago"
    if seconds < 86400:
        return f"{int(seconds // 3600)} hours ago"
    return timestamp.date().isoformat()


def describe_activity(entry: ActivityEntry) -> str:
    """One-line description of an activity entry."""
    if entry.type == "student_joined":
        return f"{entry.student_name} joined the class"
    if entry.type == "knowledge_added":
        return "New knowledge item added"
    return f'Project "{entry.project_name}" created'
