"""Artist schemas."""
from typing import List

from pydantic import BaseModel, Field


class ArtistCreate(BaseModel):
    """Register artist request."""
    name: str = Field(..., min_length=1, max_length=255)


class ArtistResponse(BaseModel):
    """Registered artist, as stored."""
    name: str


class ArtistListResponse(BaseModel):
    """Known artist names, sorted."""
    items: List[str]
    total: int


class NormalizeResponse(BaseModel):
    """Result of re-normalizing stored names."""
    updated: int
