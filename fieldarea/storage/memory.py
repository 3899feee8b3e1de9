"""
In-memory object store.

Keeps objects in a dict. Used by the test suite and by the ``memory``
storage backend setting, where nothing needs to outlive the process.
"""

import logging
from collections import Counter
from typing import Dict, List, Optional

from fieldarea.storage.base import (
    ObjectNotFoundError,
    ObjectStore,
    ObjectStoreError,
    ObjectStoreErrorCode,
)

logger = logging.getLogger(__name__)


class InMemoryObjectStore(ObjectStore):
    """
    Dict-backed ObjectStore.

    Args:
        objects: Optional initial contents (key -> body). Copied.
        quota_bytes: Optional cap on the total UTF-8 size of all objects.
            A write that would exceed it fails with ``quota-exceeded``.

    Attributes:
        calls: Counter of operations performed, keyed by method name.
    """

    def __init__(
        self,
        objects: Optional[Dict[str, str]] = None,
        quota_bytes: Optional[int] = None,
    ):
        self._objects: Dict[str, str] = dict(objects or {})
        self._quota_bytes = quota_bytes
        self.calls: Counter = Counter()

    @property
    def objects(self) -> Dict[str, str]:
        """A snapshot of the stored objects."""
        return dict(self._objects)

    def _used_bytes(self, excluding: Optional[str] = None) -> int:
        return sum(
            len(body.encode("utf-8"))
            for key, body in self._objects.items()
            if key != excluding
        )

    async def put_object(self, key: str, body: str) -> None:
        self.calls["put_object"] += 1
        if self._quota_bytes is not None:
            needed = self._used_bytes(excluding=key) + len(body.encode("utf-8"))
            if needed > self._quota_bytes:
                raise ObjectStoreError(
                    ObjectStoreErrorCode.QUOTA_EXCEEDED,
                    f"Quota of {self._quota_bytes} bytes exceeded writing {key}",
                    key=key,
                )
        self._objects[key] = body
        logger.debug("Stored %s (%d chars)", key, len(body))

    async def get_object(self, key: str) -> str:
        self.calls["get_object"] += 1
        try:
            return self._objects[key]
        except KeyError:
            raise ObjectNotFoundError(key) from None

    async def delete_object(self, key: str) -> None:
        self.calls["delete_object"] += 1
        if key not in self._objects:
            raise ObjectNotFoundError(key)
        del self._objects[key]

    async def list_objects(self, prefix: str) -> List[str]:
        self.calls["list_objects"] += 1
        return sorted(key for key in self._objects if key.startswith(prefix))
