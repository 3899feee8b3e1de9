"""
Local Filesystem Object Store.

Maps object keys onto files below a root directory, so that
``users/abc/sessions/123.json`` lives at ``<root>/users/abc/sessions/123.json``.

Writes are atomic: the body goes to a temporary file in the target
directory which is then moved over the destination with ``os.replace``.
All blocking I/O runs through ``asyncio.to_thread``.
"""

import asyncio
import errno
import logging
import os
import tempfile
from pathlib import Path, PurePosixPath
from typing import List, Union

from fieldarea.storage.base import (
    ObjectNotFoundError,
    ObjectStore,
    ObjectStoreError,
    ObjectStoreErrorCode,
)

logger = logging.getLogger(__name__)

_TEMP_PREFIX = ".tmp-"

_QUOTA_ERRNOS = {errno.ENOSPC, getattr(errno, "EDQUOT", errno.ENOSPC)}


def _translate_os_error(exc: OSError, key: str) -> ObjectStoreError:
    """Map an OSError raised while touching ``key`` to an ObjectStoreError."""
    if isinstance(exc, FileNotFoundError):
        return ObjectNotFoundError(key)
    if isinstance(exc, PermissionError):
        return ObjectStoreError(
            ObjectStoreErrorCode.UNAUTHORIZED,
            f"Permission denied for {key}",
            key=key,
        )
    if exc.errno in _QUOTA_ERRNOS:
        return ObjectStoreError(
            ObjectStoreErrorCode.QUOTA_EXCEEDED,
            f"No space left writing {key}",
            key=key,
        )
    return ObjectStoreError(
        ObjectStoreErrorCode.UNKNOWN,
        f"{type(exc).__name__} on {key}: {exc}",
        key=key,
    )


class LocalObjectStore(ObjectStore):
    """
    ObjectStore backed by a directory tree.

    Args:
        root: Root directory. Created on first write if missing.
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def _path_for(self, key: str) -> Path:
        """
        Resolve ``key`` to a path under the root.

        Raises:
            ValueError: If the key is empty, absolute, or escapes the root.
        """
        pure = PurePosixPath(key)
        if not key or pure.is_absolute() or "\\" in key:
            raise ValueError(f"Invalid object key: {key!r}")
        # PurePosixPath collapses "//" and "/./", so check the raw segments
        if any(part in ("", ".", "..") for part in key.split("/")):
            raise ValueError(f"Invalid object key: {key!r}")
        if pure.name.startswith(_TEMP_PREFIX):
            raise ValueError(f"Reserved object key: {key!r}")
        return self.root.joinpath(*pure.parts)

    def _write(self, key: str, body: str) -> None:
        path = self._path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=_TEMP_PREFIX, dir=path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(body)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise _translate_os_error(e, key) from e

    def _read(self, key: str) -> str:
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except IsADirectoryError:
            raise ObjectNotFoundError(key) from None
        except OSError as e:
            raise _translate_os_error(e, key) from e

    def _delete(self, key: str) -> None:
        path = self._path_for(key)
        try:
            if path.is_dir():
                raise ObjectNotFoundError(key)
            path.unlink()
        except OSError as e:
            raise _translate_os_error(e, key) from e

    def _list(self, prefix: str) -> List[str]:
        if not self.root.is_dir():
            return []
        keys = []
        for dirpath, _dirnames, filenames in os.walk(self.root):
            rel_dir = Path(dirpath).relative_to(self.root)
            for filename in filenames:
                if filename.startswith(_TEMP_PREFIX):
                    continue
                key = (rel_dir / filename).as_posix()
                if key.startswith(prefix):
                    keys.append(key)
        return sorted(keys)

    async def put_object(self, key: str, body: str) -> None:
        await asyncio.to_thread(self._write, key, body)
        logger.debug("Wrote %s", key)

    async def get_object(self, key: str) -> str:
        return await asyncio.to_thread(self._read, key)

    async def delete_object(self, key: str) -> None:
        await asyncio.to_thread(self._delete, key)
        logger.debug("Deleted %s", key)

    async def list_objects(self, prefix: str) -> List[str]:
        return await asyncio.to_thread(self._list, prefix)
