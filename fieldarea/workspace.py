"""
Local Draft Workspace.

Keeps the measurement in progress on disk between CLI invocations:

    ./recorded_points.json   - Tracked points not necessarily saved anywhere
    ./current_session.json   - CurrentSessionState of the loaded/saved session

The workspace survives corruption: an unreadable file is logged and
treated as empty rather than blocking the user from recording.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from fieldarea.geometry.base import Point
from fieldarea.sessions.migration import migrate_points
from fieldarea.sessions.models import CurrentSessionState, PointKind, TrackedPoint
from fieldarea.sessions.schema import now_ms

logger = logging.getLogger(__name__)

POINTS_FILENAME = "recorded_points.json"
SESSION_FILENAME = "current_session.json"


class DraftWorkspace:
    """
    Manages the local draft directory.

    Args:
        base_path: Directory for the draft files. Created on first write.
    """

    def __init__(self, base_path: Union[str, Path]) -> None:
        self.base_path = Path(base_path)
        self._points_path = self.base_path / POINTS_FILENAME
        self._session_path = self.base_path / SESSION_FILENAME

    def _read_json(self, path: Path) -> Optional[Any]:
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load {path.name}: {e}")
            return None

    def _write_json(self, path: Path, data: Any) -> None:
        self.base_path.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    # ------------------------------------------------------------------
    # Points
    # ------------------------------------------------------------------

    def load_points(self) -> List[TrackedPoint]:
        """Recorded points, in the order they were stored."""
        raw = self._read_json(self._points_path)
        if raw is None:
            return []
        if not isinstance(raw, list):
            logger.warning(f"Ignoring {POINTS_FILENAME}: expected a list")
            return []
        return migrate_points(raw)

    def save_points(self, points: Sequence[TrackedPoint]) -> None:
        self._write_json(self._points_path, [p.to_dict() for p in points])

    def record_point(
        self,
        lat: float,
        lng: float,
        kind: PointKind = PointKind.MANUAL,
        captured_at_ms: Optional[int] = None,
    ) -> TrackedPoint:
        """
        Append a point to the draft.

        Args:
            lat: Latitude in degrees.
            lng: Longitude in degrees.
            kind: Capture kind.
            captured_at_ms: Capture time; defaults to now.

        Returns:
            The recorded point.
        """
        point = TrackedPoint(
            point=Point(lat=lat, lng=lng),
            kind=kind,
            captured_at_ms=captured_at_ms if captured_at_ms is not None else now_ms(),
        )
        points = self.load_points()
        points.append(point)
        self.save_points(points)
        return point

    # ------------------------------------------------------------------
    # Current session
    # ------------------------------------------------------------------

    def current_session(self) -> Optional[CurrentSessionState]:
        """The session the draft was last saved as or loaded from, if any."""
        raw = self._read_json(self._session_path)
        if not isinstance(raw, dict):
            return None
        fields: Dict[str, Any] = {
            "id": raw.get("id"),
            "name": raw.get("name"),
            "last_saved_at": raw.get("lastSavedAt"),
            "points_hash_at_save": raw.get("pointsHashAtSave"),
        }
        if not all(isinstance(v, str) for v in fields.values()):
            logger.warning(f"Ignoring malformed {SESSION_FILENAME}")
            return None
        return CurrentSessionState(**fields)

    def set_current_session(self, state: CurrentSessionState) -> None:
        self._write_json(self._session_path, state.to_dict())

    def clear_session(self) -> None:
        self._session_path.unlink(missing_ok=True)

    def clear(self) -> None:
        """Discard the draft points and forget the current session."""
        self._points_path.unlink(missing_ok=True)
        self.clear_session()
