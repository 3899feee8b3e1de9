"""
ObjectStore ABC and error types for remote session storage.

The session store only needs four capabilities from a blob store: put an
object by key, get an object by key, delete an object by key, and list keys
under a prefix. Vendor SDKs are adapted to this interface; the bundled
implementations are an in-memory store and a local filesystem store.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Optional


class ObjectStoreErrorCode(str, Enum):
    """Failure codes reported by object store implementations."""

    OBJECT_NOT_FOUND = "object-not-found"
    UNAUTHORIZED = "unauthorized"
    QUOTA_EXCEEDED = "quota-exceeded"
    NETWORK_ERROR = "network-error"
    RETRY_LIMIT_EXCEEDED = "retry-limit-exceeded"
    UNKNOWN = "unknown"


class ObjectStoreError(Exception):
    """
    Raised by an ObjectStore when an operation fails.

    Attributes:
        code: Machine-readable failure code.
        key: The object key involved, if any.
    """

    def __init__(
        self,
        code: ObjectStoreErrorCode,
        message: str,
        key: Optional[str] = None,
    ):
        self.code = code
        self.key = key
        super().__init__(message)


class ObjectNotFoundError(ObjectStoreError):
    """Raised when the requested key does not exist."""

    def __init__(self, key: str):
        super().__init__(
            ObjectStoreErrorCode.OBJECT_NOT_FOUND,
            f"Object not found: {key}",
            key=key,
        )


class ObjectStore(ABC):
    """
    Abstract base class for key/value blob storage.

    All methods are async so that remote SDKs and synchronous backends
    (wrapped in asyncio.to_thread) share one interface. Implementations do
    not retry; retry and timeout policy belongs to the concrete backend.
    """

    @abstractmethod
    async def put_object(self, key: str, body: str) -> None:
        """
        Create or overwrite the object at ``key``.

        Args:
            key: Object key, e.g. ``users/abc/index.json``.
            body: UTF-8 text body (JSON for every caller in this package).
        """
        ...

    @abstractmethod
    async def get_object(self, key: str) -> str:
        """
        Read the object at ``key``.

        Returns:
            The object body as text.

        Raises:
            ObjectNotFoundError: If no object exists at ``key``.
        """
        ...

    @abstractmethod
    async def delete_object(self, key: str) -> None:
        """
        Delete the object at ``key``.

        Raises:
            ObjectNotFoundError: If no object exists at ``key``.
        """
        ...

    @abstractmethod
    async def list_objects(self, prefix: str) -> List[str]:
        """
        List every key that starts with ``prefix``.

        Returns:
            Matching keys in lexicographic order.
        """
        ...
