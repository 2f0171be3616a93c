"""External service integrations."""
from app.integrations.storage import BlobStore, LocalBlobStore, StorageError

__all__ = [
    "BlobStore",
    "LocalBlobStore",
    "StorageError",
]
