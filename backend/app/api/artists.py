"""Artist directory endpoints."""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_blob_store
from app.exceptions import PersistenceError
from app.integrations.storage import BlobStore
from app.schemas.artist import (
    ArtistCreate,
    ArtistListResponse,
    ArtistResponse,
    NormalizeResponse,
)
from app.services.releases import ReleaseService

router = APIRouter(prefix="/artists", tags=["artists"])


@router.get("", response_model=ArtistListResponse)
def list_artists(
    db: Session = Depends(get_db),
    blobs: BlobStore = Depends(get_blob_store),
):
    """Registered artists plus every artist credited on a release."""
    service = ReleaseService(db, blobs)
    try:
        names = service.known_artists()
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return ArtistListResponse(items=names, total=len(names))


@router.post("", response_model=ArtistResponse, status_code=status.HTTP_201_CREATED)
def add_artist(
    data: ArtistCreate,
    db: Session = Depends(get_db),
    blobs: BlobStore = Depends(get_blob_store),
):
    """Register an artist so it is suggested on new submissions."""
    service = ReleaseService(db, blobs)
    try:
        name = service.add_artist(data.name)
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))

    if not name:
        raise HTTPException(status_code=400, detail="Artist name is required")
    return ArtistResponse(name=name)


@router.post("/normalize", response_model=NormalizeResponse)
def normalize_artist_names(
    db: Session = Depends(get_db),
    blobs: BlobStore = Depends(get_blob_store),
):
    """Re-normalize artist and composer names on every release."""
    service = ReleaseService(db, blobs)
    try:
        updated = service.normalize_names()
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return NormalizeResponse(updated=updated)
