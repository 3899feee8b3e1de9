"""
Session storage error taxonomy.

Every failure that reaches a session store caller is either a
StorageError (something went wrong talking to the object store, or the
caller is not signed in) or a SessionValidationError (the caller passed
something the store refuses to persist). Object store failures are mapped
by inspecting their code; anything unrecognized becomes UNKNOWN.
"""

from enum import Enum
from typing import Any, Dict

from fieldarea.storage.base import ObjectStoreError, ObjectStoreErrorCode


class StorageErrorCode(str, Enum):
    """Standardized error codes for session storage operations."""

    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    NETWORK_ERROR = "NETWORK_ERROR"
    UNKNOWN = "UNKNOWN"


class StorageError(Exception):
    """
    A storage failure surfaced to session store callers.

    Attributes:
        code: Error code for programmatic handling.
        message: Human-readable message, safe to show to the user.
        retry: Whether repeating the same operation may succeed.
    """

    def __init__(self, code: StorageErrorCode, message: str, retry: bool = False):
        super().__init__(message)
        self.code = code
        self.message = message
        self.retry = retry

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code.value, "message": self.message, "retry": self.retry}

    def __repr__(self) -> str:
        return f"StorageError(code={self.code.value}, message={self.message!r}, retry={self.retry})"


class SessionValidationError(ValueError):
    """Raised for input the store refuses to persist (no points, bad name)."""


def not_authenticated_error() -> StorageError:
    return StorageError(StorageErrorCode.NOT_AUTHENTICATED, "Not authenticated", retry=False)


def session_not_found_error() -> StorageError:
    return StorageError(StorageErrorCode.SESSION_NOT_FOUND, "Session not found", retry=False)


def _network_error() -> StorageError:
    return StorageError(
        StorageErrorCode.NETWORK_ERROR,
        "Network error. Please check your connection.",
        retry=True,
    )


def _unknown_error() -> StorageError:
    return StorageError(
        StorageErrorCode.UNKNOWN,
        "Something went wrong. Please try again.",
        retry=True,
    )


def map_storage_error(error: BaseException) -> StorageError:
    """
    Map any exception raised during a storage operation to a StorageError.

    Args:
        error: The caught exception.

    Returns:
        The matching StorageError. StorageError input is returned as is.
    """
    if isinstance(error, StorageError):
        return error

    if isinstance(error, ObjectStoreError):
        if error.code == ObjectStoreErrorCode.OBJECT_NOT_FOUND:
            return session_not_found_error()
        if error.code == ObjectStoreErrorCode.UNAUTHORIZED:
            return StorageError(
                StorageErrorCode.PERMISSION_DENIED,
                "Access denied. Please sign in again.",
                retry=False,
            )
        if error.code == ObjectStoreErrorCode.QUOTA_EXCEEDED:
            return StorageError(
                StorageErrorCode.QUOTA_EXCEEDED,
                "Storage quota exceeded",
                retry=False,
            )
        if error.code in (
            ObjectStoreErrorCode.NETWORK_ERROR,
            ObjectStoreErrorCode.RETRY_LIMIT_EXCEEDED,
        ):
            return _network_error()
        return _unknown_error()

    if isinstance(error, (ConnectionError, TimeoutError)):
        return _network_error()

    return _unknown_error()
