"""Blob storage for release media."""
import asyncio
import logging
from pathlib import Path
from typing import Optional, Protocol

from app.config import settings

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Blob store operation failed."""
    pass


class BlobStore(Protocol):
    """Blob store port.

    Paths are relative, slash separated (see app.utils.paths). Deleting a
    path that does not exist is not an error.
    """

    async def upload(self, path: str, data: bytes) -> str:
        """Store bytes at path and return a download URL."""
        ...

    async def delete(self, path: str) -> None:
        """Remove the blob at path."""
        ...


class LocalBlobStore:
    """Blob store backed by a local directory, served under a URL prefix."""

    def __init__(self, root: Optional[str] = None, url_prefix: Optional[str] = None):
        self.root = Path(root or settings.storage_root).expanduser().resolve()
        self.url_prefix = (url_prefix if url_prefix is not None else settings.media_url_prefix).rstrip("/")

    def _resolve(self, path: str) -> Path:
        target = (self.root / path).resolve()
        if target != self.root and self.root not in target.parents:
            raise StorageError(f"Path escapes storage root: {path}")
        return target

    def url_for(self, path: str) -> str:
        return f"{self.url_prefix}/{path}"

    async def upload(self, path: str, data: bytes) -> str:
        target = self._resolve(path)

        def _write():
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)

        try:
            await asyncio.to_thread(_write)
        except OSError as e:
            raise StorageError(f"Failed to store {path}: {e}") from e

        logger.debug(f"Stored blob {path} ({len(data)} bytes)")
        return self.url_for(path)

    async def delete(self, path: str) -> None:
        target = self._resolve(path)

        try:
            await asyncio.to_thread(target.unlink, missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to delete {path}: {e}") from e

        logger.debug(f"Deleted blob {path}")
