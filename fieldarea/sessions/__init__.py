"""
Session persistence for field measurements.

- SessionStore: CRUD, listing and purge on an object store
- migrate_session_data / migrate_index: normalize untrusted JSON
- hash_points: change-hash for unsaved-edit detection
- StorageError / SessionValidationError: error taxonomy
"""

from fieldarea.sessions.errors import (
    SessionValidationError,
    StorageError,
    StorageErrorCode,
    map_storage_error,
)
from fieldarea.sessions.hashing import hash_points
from fieldarea.sessions.migration import (
    empty_index,
    migrate_index,
    migrate_points,
    migrate_session_data,
)
from fieldarea.sessions.models import (
    CurrentSessionState,
    PointKind,
    SessionData,
    SessionMeta,
    TrackedPoint,
    UserSessionIndex,
)
from fieldarea.sessions.schema import CURRENT_SCHEMA_VERSION, INDEX_VERSION
from fieldarea.sessions.store import SessionStore, StaticIdentity

__all__ = [
    "CURRENT_SCHEMA_VERSION",
    "INDEX_VERSION",
    "CurrentSessionState",
    "PointKind",
    "SessionData",
    "SessionMeta",
    "SessionStore",
    "SessionValidationError",
    "StaticIdentity",
    "StorageError",
    "StorageErrorCode",
    "TrackedPoint",
    "UserSessionIndex",
    "empty_index",
    "hash_points",
    "map_storage_error",
    "migrate_index",
    "migrate_points",
    "migrate_session_data",
]
