"""Release lifecycle errors."""
from typing import Optional


class ReleaseError(Exception):
    """Base class for release lifecycle failures."""


class ValidationError(ReleaseError):
    """A submission draft failed a validation rule. Nothing was written."""

    def __init__(self, reason: str, field: Optional[str] = None):
        self.reason = reason
        self.field = field
        super().__init__(reason)


class AssetDeleteError(ReleaseError):
    """A single blob could not be deleted during purge."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"Could not delete {path}: {message}")


class PersistenceError(ReleaseError):
    """Repository read or write failed."""


class NotFoundError(ReleaseError):
    """No release exists with the requested id."""

    def __init__(self, release_id: str):
        self.release_id = release_id
        super().__init__(f"Release {release_id} not found")


class MediaUnavailableError(ReleaseError):
    """The requested file was purged or never uploaded."""
