"""
Schema migration for session blobs and the session index.

Everything read back from the object store passes through here before it
becomes a model. Input is arbitrary decoded JSON: it may predate schema
versioning, come from an older client, or be partially corrupted. The
functions in this module never raise for odd input; they fall back to
defaults field by field, because a session file that fails to load is
lost to the user while a partially defaulted one is not.

Migration is a sequential chain keyed by the declared version. Each step
upgrades the raw dict by exactly one version; after the chain the result is
decoded field by field and stamped with the current version.
"""

import logging
import math
from typing import Any, Callable, Dict, List, Optional, Tuple

from fieldarea.geometry.base import Point
from fieldarea.sessions.models import (
    PointKind,
    SessionData,
    SessionMeta,
    TrackedPoint,
    UserSessionIndex,
)
from fieldarea.sessions.schema import (
    CURRENT_SCHEMA_VERSION,
    DEFAULT_META_NAME,
    DEFAULT_SESSION_NAME,
    INDEX_VERSION,
    now_ms,
    utc_now_iso,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Field coercion helpers
# ============================================================================


def _as_number(value: Any, default: float = 0.0) -> float:
    """Finite int/float as float, anything else (bool, NaN, str) as default."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    try:
        number = float(value)
    except OverflowError:
        return default
    if not math.isfinite(number):
        return default
    return number


def _as_count(value: Any) -> int:
    number = _as_number(value)
    return int(number) if number > 0 else 0


def _as_timestamp_ms(value: Any, default: int) -> int:
    number = _as_number(value)
    return int(number) if number > 0 else default


def _as_text(value: Any, default: str) -> str:
    """Non-empty string, otherwise default."""
    if isinstance(value, str) and value:
        return value
    return default


def _as_id(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return str(value)
        except ValueError:
            # beyond sys.get_int_max_str_digits()
            return ""
    return ""


def _as_kind(value: Any) -> PointKind:
    try:
        return PointKind(value)
    except (TypeError, ValueError):
        return PointKind.MANUAL


def _declared_version(value: Any) -> int:
    """Declared schema version; absent or non-integral means 0."""
    # A string such as "1" counts as 0; re-running the v0 step on current
    # data is harmless since decoding is field by field afterwards.
    number = _as_number(value, default=0.0)
    if number != int(number):
        return 0
    return int(number)


# ============================================================================
# Points
# ============================================================================


def _normalize_point(raw: Any, fallback_ms: int) -> Tuple[Dict[str, Any], bool]:
    """
    Rewrite one point element into the nested wire shape.

    Accepts the flat legacy shape ``{lat, lng, type, timestamp}`` and the
    nested shape ``{point: {lat, lng}, type, timestamp}``.

    Returns:
        (point dict, whether the element was malformed and replaced).
    """
    if not isinstance(raw, dict):
        return (
            {
                "point": {"lat": 0.0, "lng": 0.0},
                "type": PointKind.MANUAL.value,
                "timestamp": fallback_ms,
            },
            True,
        )

    if "lat" in raw and "lng" in raw:
        lat, lng = raw["lat"], raw["lng"]
    else:
        nested = raw.get("point")
        if not isinstance(nested, dict):
            nested = {}
        lat, lng = nested.get("lat"), nested.get("lng")

    return (
        {
            "point": {"lat": _as_number(lat), "lng": _as_number(lng)},
            "type": _as_kind(raw.get("type")).value,
            "timestamp": _as_timestamp_ms(raw.get("timestamp"), fallback_ms),
        },
        False,
    )


def _normalize_points(raw: Any, fallback_ms: int) -> List[Dict[str, Any]]:
    """Normalize a points array, keeping every index position."""
    if not isinstance(raw, list):
        return []

    normalized = []
    replaced = 0
    for element in raw:
        point, was_replaced = _normalize_point(element, fallback_ms)
        normalized.append(point)
        replaced += was_replaced
    if replaced:
        logger.warning(
            "Replaced %d malformed point(s) of %d with zero-point entries",
            replaced,
            len(raw),
        )
    return normalized


def _decode_point(raw: Any, fallback_ms: int) -> TrackedPoint:
    point, _ = _normalize_point(raw, fallback_ms)
    return TrackedPoint(
        point=Point(lat=point["point"]["lat"], lng=point["point"]["lng"]),
        kind=PointKind(point["type"]),
        captured_at_ms=point["timestamp"],
    )


def migrate_points(raw: Any) -> List[TrackedPoint]:
    """
    Decode a bare points array in either the flat or the nested shape.

    Malformed elements become zero-point manual entries; a non-list
    yields an empty list.
    """
    fallback_ms = now_ms()
    return [_decode_point(p, fallback_ms) for p in _normalize_points(raw, fallback_ms)]


# ============================================================================
# Session blob
# ============================================================================


def _upgrade_session_v0_to_v1(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    v0 (no schemaVersion) -> v1.

    Fills identity/name/timestamps and rewrites flat points to the nested
    shape.
    """
    now = utc_now_iso()
    upgraded = {
        "id": _as_id(data.get("id")),
        "name": _as_text(data.get("name"), DEFAULT_SESSION_NAME),
        "createdAt": _as_text(data.get("createdAt"), now),
        "updatedAt": _as_text(data.get("updatedAt"), now),
        "schemaVersion": 1,
        "points": _normalize_points(data.get("points"), now_ms()),
        "area": _as_number(data.get("area")),
    }
    if isinstance(data.get("notes"), str):
        upgraded["notes"] = data["notes"]
    return upgraded


# (target version, step) in ascending order.
_SESSION_MIGRATIONS: List[Tuple[int, Callable[[Dict[str, Any]], Dict[str, Any]]]] = [
    (1, _upgrade_session_v0_to_v1),
]


def _decode_session(data: Dict[str, Any]) -> SessionData:
    """Decode a current-version session dict, defaulting bad fields."""
    now = utc_now_iso()
    fallback_ms = now_ms()
    points = [
        _decode_point(p, fallback_ms)
        for p in _normalize_points(data.get("points"), fallback_ms)
    ]
    notes = data.get("notes")
    return SessionData(
        id=_as_id(data.get("id")),
        name=_as_text(data.get("name"), DEFAULT_SESSION_NAME),
        created_at=_as_text(data.get("createdAt"), now),
        updated_at=_as_text(data.get("updatedAt"), now),
        schema_version=CURRENT_SCHEMA_VERSION,
        points=points,
        area=_as_number(data.get("area")),
        notes=notes if isinstance(notes, str) else None,
    )


def migrate_session_data(raw: Any) -> SessionData:
    """
    Upgrade a decoded session blob to the current schema.

    Args:
        raw: Any JSON value. Non-objects are treated as an empty v0 blob.

    Returns:
        A new SessionData with ``schema_version == CURRENT_SCHEMA_VERSION``.
        The input is never mutated.
    """
    data: Dict[str, Any] = dict(raw) if isinstance(raw, dict) else {}
    version = _declared_version(data.get("schemaVersion"))

    for target, step in _SESSION_MIGRATIONS:
        if version < target:
            logger.debug("Migrating session %r from v%d to v%d", data.get("id"), version, target)
            data = step(data)
            version = target

    return _decode_session(data)


# ============================================================================
# Index
# ============================================================================


def empty_index(last_modified: Optional[str] = None) -> UserSessionIndex:
    return UserSessionIndex(
        version=INDEX_VERSION,
        sessions=[],
        last_modified=last_modified or utc_now_iso(),
    )


def _upgrade_index_v0_to_v1(data: Any) -> Dict[str, Any]:
    """
    v0 -> v1.

    The v0 index was a bare array of session summaries with no envelope;
    an object without a version is treated the same way.
    """
    if isinstance(data, list):
        sessions = data
    else:
        sessions = data.get("sessions")
    return {
        "version": 1,
        "lastModified": utc_now_iso(),
        "sessions": sessions if isinstance(sessions, list) else [],
    }


_INDEX_MIGRATIONS: List[Tuple[int, Callable[[Any], Dict[str, Any]]]] = [
    (1, _upgrade_index_v0_to_v1),
]


def _decode_meta(raw: Any, now: str) -> SessionMeta:
    if not isinstance(raw, dict):
        return SessionMeta(id="", name=DEFAULT_META_NAME, created_at=now, updated_at=now)

    created_at = _as_text(raw.get("createdAt"), now)
    return SessionMeta(
        id=_as_id(raw.get("id")),
        name=_as_text(raw.get("name"), DEFAULT_META_NAME),
        created_at=created_at,
        updated_at=_as_text(raw.get("updatedAt"), created_at),
        area=_as_number(raw.get("area")),
        point_count=_as_count(raw.get("pointCount")),
    )


def migrate_index(raw: Any) -> UserSessionIndex:
    """
    Upgrade a decoded index blob to the current envelope.

    Args:
        raw: Any JSON value. ``None`` or a scalar yields an empty index;
            a bare list is a legacy v0 index.

    Returns:
        A new UserSessionIndex at INDEX_VERSION. Re-running this on the
        JSON form of its own output returns an equal index.
    """
    if isinstance(raw, list):
        data: Any = raw
        version = 0
    elif isinstance(raw, dict):
        data = dict(raw)
        version = _declared_version(raw.get("version"))
    else:
        return empty_index()

    for target, step in _INDEX_MIGRATIONS:
        if version < target:
            logger.debug("Migrating session index from v%d to v%d", version, target)
            data = step(data)
            version = target

    now = utc_now_iso()
    sessions = data.get("sessions")
    if not isinstance(sessions, list):
        sessions = []
    return UserSessionIndex(
        version=INDEX_VERSION,
        sessions=[_decode_meta(m, now) for m in sessions],
        last_modified=_as_text(data.get("lastModified"), now),
    )
