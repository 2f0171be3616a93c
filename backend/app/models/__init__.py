"""SQLAlchemy models for Blackstar."""
from app.models.release import ReleaseRecord
from app.models.artist import Artist

__all__ = [
    "ReleaseRecord",
    "Artist",
]
