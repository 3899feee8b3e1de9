"""
Session store: versioned session persistence on an object store.

Layout per user (see ``fieldarea.storage.paths``):

    users/{uid}/index.json                 UserSessionIndex (for listing)
    users/{uid}/sessions/{sessionId}.json  SessionData (one per session)

Every mutating operation issues its writes strictly in sequence: the
session blob first, then the index. There is no transaction spanning the
pair, so a failure between the two writes can leave a blob without an
index entry (invisible to listing, otherwise harmless) or an index entry
without a blob (surfaces as SESSION_NOT_FOUND when loaded; the caller then
calls ``remove_from_index`` to repair it). The index is eventually
consistent with the blobs, which is acceptable with a single writer per
user.

The store holds no per-session state between calls. It only remembers the
last mapped error, mirroring what a UI binds to.
"""

import json
import logging
import uuid
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Iterator, List, Optional, Sequence

from fieldarea.sessions.errors import (
    SessionValidationError,
    StorageError,
    map_storage_error,
    not_authenticated_error,
    session_not_found_error,
)
from fieldarea.sessions.migration import (
    empty_index,
    migrate_index,
    migrate_session_data,
)
from fieldarea.sessions.models import (
    SessionData,
    SessionMeta,
    TrackedPoint,
    UserSessionIndex,
)
from fieldarea.sessions.schema import (
    CURRENT_SCHEMA_VERSION,
    SESSION_NAME_MAX_LENGTH,
    format_timestamp,
    utc_now,
)
from fieldarea.storage.base import ObjectStore, ObjectStoreError, ObjectStoreErrorCode
from fieldarea.storage.paths import index_path, session_path, sessions_prefix

logger = logging.getLogger(__name__)

Identity = Callable[[], Optional[str]]


class StaticIdentity:
    """
    Identity provider returning a fixed uid.

    ``StaticIdentity(None)`` models a signed-out user.
    """

    def __init__(self, uid: Optional[str]):
        self.uid = uid

    def __call__(self) -> Optional[str]:
        return self.uid


def _is_not_found(error: Exception) -> bool:
    return (
        isinstance(error, ObjectStoreError)
        and error.code == ObjectStoreErrorCode.OBJECT_NOT_FOUND
    )


def _validate_points(points: Sequence[TrackedPoint]) -> None:
    if len(points) == 0:
        logger.error("Attempted to save session with no points")
        raise SessionValidationError("Cannot save session with no points")


def _validate_name(name: str) -> str:
    """Return the trimmed name, or raise if it is empty or too long."""
    trimmed = (name or "").strip()
    if not 1 <= len(trimmed) <= SESSION_NAME_MAX_LENGTH:
        raise SessionValidationError(
            f"Session name must be between 1 and {SESSION_NAME_MAX_LENGTH} characters"
        )
    return trimmed


class SessionStore:
    """
    Create, read, update, rename, delete, list and purge saved sessions.

    Args:
        object_store: Blob storage capability.
        identity: Zero-argument callable returning the signed-in uid, or
            None when signed out. Consulted at the start of every call.
        id_factory: Generates ids for new sessions. Defaults to UUID v4.
        clock: Returns the current time. Defaults to UTC now.
    """

    def __init__(
        self,
        object_store: ObjectStore,
        identity: Identity,
        *,
        id_factory: Optional[Callable[[], str]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._store = object_store
        self._identity = identity
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))
        self._clock = clock or utc_now
        self._last_error: Optional[StorageError] = None

    @property
    def last_error(self) -> Optional[StorageError]:
        """The error raised by the most recent operation, if it failed."""
        return self._last_error

    def clear_error(self) -> None:
        self._last_error = None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _now(self) -> str:
        return format_timestamp(self._clock())

    def _require_uid(self) -> str:
        """Return the signed-in uid or raise NOT_AUTHENTICATED."""
        uid = self._identity()
        if not uid:
            error = not_authenticated_error()
            self._last_error = error
            raise error
        return uid

    @contextmanager
    def _operation(self, name: str) -> Iterator[None]:
        """
        Scope one store operation.

        Clears the previous error, and maps anything raised inside the
        block to a StorageError which is recorded and re-raised.
        """
        self._last_error = None
        try:
            yield
        except Exception as e:
            error = map_storage_error(e)
            self._last_error = error
            if error is e:
                raise
            logger.error(
                "%s failed: %s: %s -> %s",
                name,
                type(e).__name__,
                e,
                error.code.value,
            )
            raise error from e

    def _parse_index(self, body: str) -> UserSessionIndex:
        """Decode an index body, degrading to an empty index on corruption."""
        try:
            data = json.loads(body)
        except ValueError as e:
            logger.error("Index file is corrupted, returning empty index: %s", e)
            return empty_index(self._now())

        if not isinstance(data, (dict, list)):
            logger.error("Index data is not an object, returning empty index")
            return empty_index(self._now())

        if isinstance(data, dict):
            sessions = data.get("sessions")
            if sessions is not None and not isinstance(sessions, list):
                logger.error("Index sessions is not an array, returning empty index")
                return empty_index(self._now())

        return migrate_index(data)

    async def _read_index(self, uid: str) -> Optional[UserSessionIndex]:
        """Fetch the index; None if the user has none yet."""
        try:
            body = await self._store.get_object(index_path(uid))
        except ObjectStoreError as e:
            if _is_not_found(e):
                return None
            raise
        return self._parse_index(body)

    async def _write_index(self, uid: str, index: UserSessionIndex) -> None:
        await self._store.put_object(index_path(uid), json.dumps(index.to_dict()))

    async def _read_session_body(self, uid: str, session_id: str) -> Optional[Any]:
        """
        Fetch and decode a session blob.

        Returns:
            The decoded JSON; ``{}`` if the body is not valid JSON;
            None if the blob does not exist.
        """
        try:
            body = await self._store.get_object(session_path(uid, session_id))
        except ObjectStoreError as e:
            if _is_not_found(e):
                return None
            raise
        try:
            return json.loads(body)
        except ValueError as e:
            logger.error("Session file %s is corrupted, loading defaults: %s", session_id, e)
            return {}

    async def _write_session(self, uid: str, data: SessionData) -> None:
        await self._store.put_object(session_path(uid, data.id), json.dumps(data.to_dict()))

    async def _remove_entry(self, uid: str, session_id: str) -> bool:
        """Remove ``session_id`` from the index; upload only if it was present."""
        index = await self._read_index(uid)
        if index is None or not index.remove(session_id):
            return False
        index.last_modified = self._now()
        await self._write_index(uid, index)
        return True

    # ------------------------------------------------------------------
    # Index operations
    # ------------------------------------------------------------------

    async def fetch_index(self) -> Optional[UserSessionIndex]:
        """
        Load the signed-in user's index.

        Returns:
            The migrated index; None if the user never saved a session.
            A corrupted index yields a fresh empty index and records no
            error, so that it never blocks signing in or saving.

        Raises:
            StorageError: NOT_AUTHENTICATED, or a mapped object store failure.
        """
        uid = self._require_uid()
        with self._operation("fetch_index"):
            return await self._read_index(uid)

    async def list_sessions(self) -> List[SessionMeta]:
        """Index entries, most recently updated first."""
        index = await self.fetch_index()
        if index is None:
            return []
        return index.sorted_sessions()

    async def remove_from_index(self, session_id: str) -> bool:
        """
        Remove an index entry without touching its blob.

        Repair primitive for dangling entries whose blob is gone. Nothing
        is uploaded when the id is not in the index.

        Returns:
            True if an entry was removed.
        """
        uid = self._require_uid()
        with self._operation("remove_from_index"):
            removed = await self._remove_entry(uid, session_id)
            if removed:
                logger.info("Removed missing session from index: %s", session_id)
            return removed

    # ------------------------------------------------------------------
    # Session CRUD
    # ------------------------------------------------------------------

    async def save_new_session(
        self,
        name: str,
        points: Sequence[TrackedPoint],
        area: float,
    ) -> SessionMeta:
        """
        Persist points as a new session.

        Writes the session blob, then appends its summary to the index.

        Args:
            name: Display name; trimmed, 1..100 characters.
            points: At least one tracked point.
            area: Area in m², computed by the caller.

        Returns:
            The index entry of the new session.

        Raises:
            StorageError: NOT_AUTHENTICATED or a mapped storage failure.
            SessionValidationError: No points, or an invalid name.
        """
        uid = self._require_uid()
        _validate_points(points)
        trimmed = _validate_name(name)

        with self._operation("save_new_session"):
            now = self._now()
            data = SessionData(
                id=self._id_factory(),
                name=trimmed,
                created_at=now,
                updated_at=now,
                schema_version=CURRENT_SCHEMA_VERSION,
                points=list(points),
                area=float(area),
            )
            await self._write_session(uid, data)

            index = await self._read_index(uid) or empty_index(now)
            meta = data.to_meta()
            index.sessions.append(meta)
            index.last_modified = now
            await self._write_index(uid, index)

            logger.info(
                "Saved session %s (%d points, %.1f m2)",
                data.id,
                len(data.points),
                data.area,
            )
            return replace(meta)

    async def update_session(
        self,
        session_id: str,
        points: Sequence[TrackedPoint],
        area: float,
    ) -> SessionMeta:
        """
        Overwrite an existing session's points and area.

        ``createdAt`` and notes are preserved, ``updatedAt`` is bumped. The
        display name comes from the index entry (renames only touch the
        index), so the blob's name is brought up to date as a side effect.
        The index entry is patched in place, or re-added if it went missing.

        Raises:
            StorageError: SESSION_NOT_FOUND if neither the blob nor an index
                entry exists, or a mapped storage failure.
            SessionValidationError: No points.
        """
        uid = self._require_uid()
        _validate_points(points)

        with self._operation("update_session"):
            now = self._now()
            index = await self._read_index(uid)
            entry = index.find(session_id) if index is not None else None
            body = await self._read_session_body(uid, session_id)
            if body is None and entry is None:
                raise session_not_found_error()

            existing = migrate_session_data(body) if body is not None else None
            data = SessionData(
                id=session_id,
                name=entry.name if entry is not None else existing.name,
                created_at=entry.created_at if entry is not None else existing.created_at,
                updated_at=now,
                schema_version=CURRENT_SCHEMA_VERSION,
                points=list(points),
                area=float(area),
                notes=existing.notes if existing is not None else None,
            )
            await self._write_session(uid, data)

            if index is None:
                index = empty_index(now)
            if entry is None:
                logger.warning("Session %s was missing from the index, re-adding it", session_id)
                entry = data.to_meta()
                index.sessions.append(entry)
            else:
                entry.area = data.area
                entry.point_count = len(data.points)
                entry.updated_at = now
            index.last_modified = now
            await self._write_index(uid, index)

            return replace(entry)

    async def load_session(self, session_id: str) -> SessionData:
        """
        Download and migrate a session.

        Raises:
            StorageError: SESSION_NOT_FOUND (retry False) if the blob does
                not exist, or a mapped storage failure.
        """
        uid = self._require_uid()
        with self._operation("load_session"):
            body = await self._read_session_body(uid, session_id)
            if body is None:
                logger.error("Session file not found: %s", session_id)
                raise session_not_found_error()

            data = migrate_session_data(body)
            if not data.id:
                data.id = session_id
            return data

    async def rename_session(self, session_id: str, new_name: str) -> None:
        """
        Rename a session in the index.

        Only the index is rewritten; the blob keeps its old name until the
        next update.

        Raises:
            StorageError: SESSION_NOT_FOUND if the index has no such entry,
                or a mapped storage failure.
            SessionValidationError: Empty or too long name.
        """
        uid = self._require_uid()
        trimmed = _validate_name(new_name)

        with self._operation("rename_session"):
            index = await self._read_index(uid)
            entry = index.find(session_id) if index is not None else None
            if entry is None:
                raise session_not_found_error()

            now = self._now()
            entry.name = trimmed
            entry.updated_at = now
            index.last_modified = now
            await self._write_index(uid, index)

    async def delete_session(self, session_id: str) -> None:
        """
        Delete a session blob and its index entry.

        A blob that is already gone is not an error; the index entry is
        still removed. A missing index means there is nothing to remove.
        """
        uid = self._require_uid()
        with self._operation("delete_session"):
            try:
                await self._store.delete_object(session_path(uid, session_id))
            except ObjectStoreError as e:
                if not _is_not_found(e):
                    raise
                logger.warning("Session file %s already missing, cleaning index only", session_id)

            await self._remove_entry(uid, session_id)

    async def delete_all_sessions(self) -> int:
        """
        Delete every session blob of the user, then the index.

        Blobs are deleted one at a time. A missing index is ignored; any
        other failure stops the purge and is raised.

        Returns:
            Number of session blobs deleted.
        """
        uid = self._require_uid()
        with self._operation("delete_all_sessions"):
            keys = await self._store.list_objects(sessions_prefix(uid))
            for key in keys:
                await self._store.delete_object(key)

            try:
                await self._store.delete_object(index_path(uid))
            except ObjectStoreError as e:
                if not _is_not_found(e):
                    raise
                logger.debug("No index to delete")

            logger.info("Deleted %d session file(s)", len(keys))
            return len(keys)
