"""Blob storage for crate tarballs."""

from __future__ import annotations

import asyncio
import os
import re
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List

from registry_api.errors import BlobConflictError, BlobNotFoundError, InternalError

_SAFE_PATTERN = re.compile(r"[^A-Za-z0-9.+_-]+")


def _safe_component(value: str) -> str:
    cleaned = _SAFE_PATTERN.sub("_", value.strip())
    cleaned = cleaned.strip("._-")
    return cleaned or "artifact"


def crate_blob_key(name: str, version: str, checksum: str) -> str:
    """Key of a tarball, addressed by its checksum as well as its version.

    Two uploads of the same version with different bytes never share a key, so
    the checksum on the committed record always names the blob that was
    written for it.
    """

    safe_name = _safe_component(name)
    safe_version = _safe_component(version)
    return f"crates/{safe_name}/{safe_version}/{_safe_component(checksum)}.crate"


class BlobStore(ABC):
    """Create-only storage: a key, once written, keeps its bytes."""

    @abstractmethod
    async def put(self, key: str, data: bytes) -> None:
        """Store ``data`` under ``key``.

        Writing the same bytes again is a no-op; writing different bytes to an
        existing key raises ``BlobConflictError`` and leaves the stored blob alone.
        """

    @abstractmethod
    async def get(self, key: str) -> bytes:
        """Return the stored bytes or raise ``BlobNotFoundError``."""


class FileSystemBlobStore(BlobStore):
    """Stores blobs as files below ``root``; keys map to relative paths."""

    def __init__(self, root: Path) -> None:
        self._root = Path(root).expanduser().resolve()

    @property
    def root(self) -> Path:
        return self._root

    def _path_for(self, key: str) -> Path:
        path = (self._root / key).resolve()
        if self._root not in path.parents:
            raise InternalError(f"blob key '{key}' escapes the storage root")
        return path

    def _write(self, path: Path, key: str, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".upload-")
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
            # link() fails instead of replacing, so the first complete write wins.
            try:
                os.link(tmp_name, path)
            except FileExistsError:
                if path.read_bytes() != data:
                    raise BlobConflictError(key) from None
        finally:
            Path(tmp_name).unlink(missing_ok=True)

    def _read(self, path: Path, key: str) -> bytes:
        try:
            return path.read_bytes()
        except FileNotFoundError as exc:
            raise BlobNotFoundError(key) from exc

    async def put(self, key: str, data: bytes) -> None:
        path = self._path_for(key)
        try:
            await asyncio.to_thread(self._write, path, key, data)
        except OSError as exc:
            raise InternalError(f"failed to store blob '{key}'") from exc

    async def get(self, key: str) -> bytes:
        path = self._path_for(key)
        try:
            return await asyncio.to_thread(self._read, path, key)
        except OSError as exc:
            raise InternalError(f"failed to read blob '{key}'") from exc


class MemoryBlobStore(BlobStore):
    def __init__(self) -> None:
        self._blobs: Dict[str, bytes] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._blobs

    def keys(self) -> List[str]:
        return sorted(self._blobs)

    async def put(self, key: str, data: bytes) -> None:
        await asyncio.sleep(0)
        stored = self._blobs.setdefault(key, bytes(data))
        if stored != data:
            raise BlobConflictError(key)

    async def get(self, key: str) -> bytes:
        await asyncio.sleep(0)
        try:
            return self._blobs[key]
        except KeyError as exc:
            raise BlobNotFoundError(key) from exc


__all__ = [
    "BlobStore",
    "FileSystemBlobStore",
    "MemoryBlobStore",
    "crate_blob_key",
]
