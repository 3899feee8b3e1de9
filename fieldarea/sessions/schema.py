"""
Schema definitions for persisted sessions.

Single source of truth for the versions and limits shared by the migration
module and the session store. Increment CURRENT_SCHEMA_VERSION when the
TrackedPoint or SessionData wire shape changes, and add the matching step
to the migration chain.
"""

from datetime import datetime, timezone

CURRENT_SCHEMA_VERSION = 1
INDEX_VERSION = 1

SESSION_NAME_MAX_LENGTH = 100

DEFAULT_SESSION_NAME = "Unnamed Session"
DEFAULT_META_NAME = "Unnamed"


def format_timestamp(dt: datetime) -> str:
    """
    Render a datetime as ISO-8601 UTC with millisecond precision.

    Naive datetimes are treated as UTC. Output looks like
    ``2024-01-31T10:20:00.000Z``.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    return format_timestamp(utc_now())


def now_ms() -> int:
    """Current time as Unix epoch milliseconds."""
    return int(utc_now().timestamp() * 1000)
