"""
Data model for recorded points and persisted sessions.

These dataclasses are the in-memory form of the session blob and index
blob. ``to_dict()`` produces the exact wire shape (camelCase keys);
decoding goes through ``fieldarea.sessions.migration`` so that untrusted
JSON is always normalized before it becomes a model.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from fieldarea.geometry.base import Point
from fieldarea.sessions.schema import CURRENT_SCHEMA_VERSION, INDEX_VERSION


class PointKind(str, Enum):
    """How a point was captured."""

    MANUAL = "manual"
    AUTO = "auto"


@dataclass(frozen=True)
class TrackedPoint:
    """
    A single recorded observation.

    Sequences of tracked points are ordered by ``captured_at_ms`` by
    convention; nothing enforces it.

    Attributes:
        point: The coordinate.
        kind: Manual tap or automatic interval capture.
        captured_at_ms: Unix epoch milliseconds.
    """

    point: Point
    kind: PointKind
    captured_at_ms: int

    @property
    def lat(self) -> float:
        return self.point.lat

    @property
    def lng(self) -> float:
        return self.point.lng

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire shape."""
        return {
            "point": self.point.to_dict(),
            "type": self.kind.value,
            "timestamp": self.captured_at_ms,
        }


@dataclass
class SessionMeta:
    """
    Summary of a session, stored in the user's index.

    Attributes:
        id: Unique identifier within the user's index (UUID v4 by convention).
        name: Display name, not unique.
        created_at: ISO-8601 creation timestamp.
        updated_at: ISO-8601 timestamp of the last change.
        area: Area in square meters at the last save.
        point_count: Number of tracked points at the last save.
    """

    id: str
    name: str
    created_at: str
    updated_at: str
    area: float = 0.0
    point_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire shape."""
        return {
            "id": self.id,
            "name": self.name,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "area": self.area,
            "pointCount": self.point_count,
        }


@dataclass
class SessionData:
    """
    Full persisted session blob.

    Attributes:
        id: Matches the blob key and the index entry.
        name: Name at the time of the last blob write. The index entry
            is authoritative for display.
        created_at: ISO-8601 creation timestamp.
        updated_at: ISO-8601 timestamp of the last blob write.
        schema_version: Wire schema version of the blob.
        points: Recorded points in capture order.
        area: Area in square meters.
        notes: Optional free-form notes.
    """

    id: str
    name: str
    created_at: str
    updated_at: str
    schema_version: int = CURRENT_SCHEMA_VERSION
    points: List[TrackedPoint] = field(default_factory=list)
    area: float = 0.0
    notes: Optional[str] = None

    def to_meta(self) -> SessionMeta:
        """Build the index entry describing this session."""
        return SessionMeta(
            id=self.id,
            name=self.name,
            created_at=self.created_at,
            updated_at=self.updated_at,
            area=self.area,
            point_count=len(self.points),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire shape. ``notes`` is omitted when unset."""
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "schemaVersion": self.schema_version,
            "points": [p.to_dict() for p in self.points],
            "area": self.area,
        }
        if self.notes is not None:
            data["notes"] = self.notes
        return data


@dataclass
class UserSessionIndex:
    """
    Per-user directory of session summaries.

    Attributes:
        version: Index schema version.
        sessions: Session summaries, in no particular order.
        last_modified: ISO-8601 timestamp of the last index write.
    """

    version: int = INDEX_VERSION
    sessions: List[SessionMeta] = field(default_factory=list)
    last_modified: str = ""

    def find(self, session_id: str) -> Optional[SessionMeta]:
        """Return the entry for ``session_id``, or None."""
        for meta in self.sessions:
            if meta.id == session_id:
                return meta
        return None

    def remove(self, session_id: str) -> bool:
        """
        Drop every entry with ``session_id``.

        Returns:
            True if anything was removed.
        """
        remaining = [m for m in self.sessions if m.id != session_id]
        removed = len(remaining) < len(self.sessions)
        self.sessions = remaining
        return removed

    def sorted_sessions(self) -> List[SessionMeta]:
        """Entries ordered for display, most recently updated first."""
        return sorted(self.sessions, key=lambda m: m.updated_at, reverse=True)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire shape."""
        return {
            "version": self.version,
            "lastModified": self.last_modified,
            "sessions": [m.to_dict() for m in self.sessions],
        }


@dataclass(frozen=True)
class CurrentSessionState:
    """
    The caller's record of which saved session it is editing.

    Never persisted by the session store. ``None`` in its place means the
    caller is working on a new, unsaved measurement.

    Attributes:
        id: Session id in the object store.
        name: Session name for display.
        last_saved_at: ISO-8601 timestamp of the last save or load.
        points_hash_at_save: Change-hash of the points at that moment.
    """

    id: str
    name: str
    last_saved_at: str
    points_hash_at_save: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "name": self.name,
            "lastSavedAt": self.last_saved_at,
            "pointsHashAtSave": self.points_hash_at_save,
        }
