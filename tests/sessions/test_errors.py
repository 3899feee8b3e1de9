"""Tests for mapping object store failures to session storage errors."""

import pytest

from fieldarea.sessions import StorageError, StorageErrorCode, map_storage_error
from fieldarea.storage import ObjectNotFoundError, ObjectStoreError, ObjectStoreErrorCode


class TestMapStorageError:
    @pytest.mark.parametrize(
        "store_code, expected_code, expected_retry",
        [
            (ObjectStoreErrorCode.OBJECT_NOT_FOUND, StorageErrorCode.SESSION_NOT_FOUND, False),
            (ObjectStoreErrorCode.UNAUTHORIZED, StorageErrorCode.PERMISSION_DENIED, False),
            (ObjectStoreErrorCode.QUOTA_EXCEEDED, StorageErrorCode.QUOTA_EXCEEDED, False),
            (ObjectStoreErrorCode.NETWORK_ERROR, StorageErrorCode.NETWORK_ERROR, True),
            (ObjectStoreErrorCode.RETRY_LIMIT_EXCEEDED, StorageErrorCode.NETWORK_ERROR, True),
            (ObjectStoreErrorCode.UNKNOWN, StorageErrorCode.UNKNOWN, True),
        ],
    )
    def test_object_store_codes(self, store_code, expected_code, expected_retry):
        error = map_storage_error(ObjectStoreError(store_code, "boom", key="k"))
        assert error.code == expected_code
        assert error.retry is expected_retry
        assert error.message

    def test_not_found_subclass(self):
        error = map_storage_error(ObjectNotFoundError("users/u/sessions/x.json"))
        assert error.code == StorageErrorCode.SESSION_NOT_FOUND
        assert error.retry is False

    def test_storage_error_passes_through(self):
        original = StorageError(StorageErrorCode.QUOTA_EXCEEDED, "full")
        assert map_storage_error(original) is original

    @pytest.mark.parametrize("exc", [ConnectionError("reset"), TimeoutError("slow")])
    def test_transport_errors_are_network_errors(self, exc):
        error = map_storage_error(exc)
        assert error.code == StorageErrorCode.NETWORK_ERROR
        assert error.retry is True

    @pytest.mark.parametrize("exc", [RuntimeError("x"), KeyError("y"), ValueError("z")])
    def test_anything_else_is_unknown_and_retryable(self, exc):
        error = map_storage_error(exc)
        assert error.code == StorageErrorCode.UNKNOWN
        assert error.retry is True


class TestStorageError:
    def test_to_dict(self):
        error = StorageError(StorageErrorCode.NETWORK_ERROR, "offline", retry=True)
        assert error.to_dict() == {"code": "NETWORK_ERROR", "message": "offline", "retry": True}

    def test_str_is_message(self):
        assert str(StorageError(StorageErrorCode.UNKNOWN, "oops")) == "oops"
