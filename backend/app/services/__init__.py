"""Business logic services."""
from app.services.artists import ArtistDirectory
from app.services.media import MediaLifecycleManager, PurgeReport
from app.services.releases import ReleaseService
from app.services.repository import ReleaseRepository
from app.services.status import derive_status
from app.services.validation import ValidationResult, ensure_valid, validate_draft

__all__ = [
    "ArtistDirectory",
    "MediaLifecycleManager",
    "PurgeReport",
    "ReleaseService",
    "ReleaseRepository",
    "derive_status",
    "ValidationResult",
    "ensure_valid",
    "validate_draft",
]
