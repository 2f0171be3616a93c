"""FastAPI dependencies."""
from app.integrations.storage import BlobStore, LocalBlobStore


def get_blob_store() -> BlobStore:
    """Blob store used for release media."""
    return LocalBlobStore()
