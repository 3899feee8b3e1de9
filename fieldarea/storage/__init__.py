"""
Object storage backends for session persistence.

Provides the blob-store capability the session store is written against:
- ObjectStore: Abstract base class defining the interface
- InMemoryObjectStore: Dict-backed store for tests and ephemeral use
- LocalObjectStore: Directory-backed store with atomic writes
"""

from fieldarea.storage.base import (
    ObjectNotFoundError,
    ObjectStore,
    ObjectStoreError,
    ObjectStoreErrorCode,
)
from fieldarea.storage.local import LocalObjectStore
from fieldarea.storage.memory import InMemoryObjectStore

__all__ = [
    "InMemoryObjectStore",
    "LocalObjectStore",
    "ObjectNotFoundError",
    "ObjectStore",
    "ObjectStoreError",
    "ObjectStoreErrorCode",
]
