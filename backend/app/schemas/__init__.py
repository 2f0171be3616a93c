"""Pydantic schemas for API request/response validation."""
from app.schemas.artist import ArtistCreate, ArtistListResponse, ArtistResponse, NormalizeResponse
from app.schemas.common import MessageResponse
from app.schemas.release import (
    ChecklistSchema,
    ChecklistUpdate,
    DashboardResponse,
    DownloadRequest,
    DownloadResponse,
    GenreCountResponse,
    PurgeResponse,
    ReleasePayload,
    ReleaseResponse,
    StatusResponse,
    TrackPayload,
)

__all__ = [
    "ArtistCreate",
    "ArtistListResponse",
    "ArtistResponse",
    "NormalizeResponse",
    "MessageResponse",
    "ChecklistSchema",
    "ChecklistUpdate",
    "DashboardResponse",
    "DownloadRequest",
    "DownloadResponse",
    "GenreCountResponse",
    "PurgeResponse",
    "ReleasePayload",
    "ReleaseResponse",
    "StatusResponse",
    "TrackPayload",
]
