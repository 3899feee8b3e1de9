"""
Caller-side session state helpers.

The session store is stateless between calls. Whoever drives it (the CLI
here, a UI elsewhere) holds a ``CurrentSessionState`` or ``None`` and
passes it around explicitly; these helpers build that value and answer
"has anything changed since the last save?".
"""

from typing import List, Optional, Sequence

from fieldarea.geometry.area import compute_polygon_area
from fieldarea.sessions.hashing import hash_points
from fieldarea.sessions.models import (
    CurrentSessionState,
    PointKind,
    SessionData,
    SessionMeta,
    TrackedPoint,
)


def state_from_saved(meta: SessionMeta, points: Sequence[TrackedPoint]) -> CurrentSessionState:
    """State after ``points`` were saved as the session described by ``meta``."""
    return CurrentSessionState(
        id=meta.id,
        name=meta.name,
        last_saved_at=meta.updated_at,
        points_hash_at_save=hash_points(points),
    )


def state_from_loaded(data: SessionData, name: Optional[str] = None) -> CurrentSessionState:
    """
    State after a session was loaded.

    Args:
        data: The loaded (migrated) session.
        name: Display name from the index entry, which wins over the
            possibly stale name stored in the blob.
    """
    return CurrentSessionState(
        id=data.id,
        name=name or data.name,
        last_saved_at=data.updated_at,
        points_hash_at_save=hash_points(data.points),
    )


def has_unsaved_changes(
    current: Optional[CurrentSessionState],
    points: Sequence[TrackedPoint],
) -> bool:
    """
    Whether ``points`` differ from what was last saved or loaded.

    A measurement that was never saved (``current is None``) reports
    False; it has no baseline to differ from.
    """
    if current is None:
        return False
    return hash_points(points) != current.points_hash_at_save


def visible_points(
    points: Sequence[TrackedPoint],
    include_manual: bool = True,
    include_auto: bool = True,
) -> List[TrackedPoint]:
    """
    Points of the selected kinds, ordered by capture time.

    The sort is stable, so points sharing a timestamp keep their order.
    """
    kinds = set()
    if include_manual:
        kinds.add(PointKind.MANUAL)
    if include_auto:
        kinds.add(PointKind.AUTO)
    selected = [p for p in points if p.kind in kinds]
    return sorted(selected, key=lambda p: p.captured_at_ms)


def measured_area(
    points: Sequence[TrackedPoint],
    include_manual: bool = True,
    include_auto: bool = True,
) -> float:
    """Area in m² of the polygon traced by the visible points."""
    ring = [p.point for p in visible_points(points, include_manual, include_auto)]
    return compute_polygon_area(ring)
