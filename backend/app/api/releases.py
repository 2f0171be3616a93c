"""Release submission, review and archival endpoints."""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status
from pydantic import ValidationError as PayloadError
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_blob_store
from app.domain import FileAttachment
from app.exceptions import (
    MediaUnavailableError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from app.integrations.storage import BlobStore, StorageError
from app.schemas.common import MessageResponse
from app.schemas.release import (
    ChecklistUpdate,
    DashboardResponse,
    DownloadLogResponse,
    DownloadRequest,
    DownloadResponse,
    GenreCountResponse,
    NotesRequest,
    PurgeResponse,
    RejectRequest,
    ReleasePayload,
    ReleaseResponse,
    StatusResponse,
)
from app.services.media import PurgeReport
from app.services.releases import ReleaseService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/releases", tags=["releases"])


def _purge_response(report: PurgeReport) -> PurgeResponse:
    return PurgeResponse(
        release_id=report.release_id,
        deleted=report.deleted,
        failed=[error.path for error in report.failed],
    )


# ============================================================================
# Queries
# ============================================================================

@router.get("", response_model=List[ReleaseResponse])
def list_releases(
    view: str = Query("all", pattern="^(all|active|history)$"),
    artist: Optional[str] = Query(None, description="Main or track artist name"),
    db: Session = Depends(get_db),
    blobs: BlobStore = Depends(get_blob_store),
):
    """List releases, newest first."""
    service = ReleaseService(db, blobs)
    try:
        releases = service.list_releases(view, artist)
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return [ReleaseResponse.model_validate(r) for r in releases]


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    db: Session = Depends(get_db),
    blobs: BlobStore = Depends(get_blob_store),
):
    """Pending, approved and finalized-this-month counts."""
    service = ReleaseService(db, blobs)
    return DashboardResponse.model_validate(service.dashboard())


@router.get("/genres", response_model=List[GenreCountResponse])
def get_genre_counts(
    db: Session = Depends(get_db),
    blobs: BlobStore = Depends(get_blob_store),
):
    """Releases per genre, most used first."""
    service = ReleaseService(db, blobs)
    return [GenreCountResponse.model_validate(g) for g in service.genre_counts()]


@router.get("/{release_id}", response_model=ReleaseResponse)
def get_release(
    release_id: str,
    db: Session = Depends(get_db),
    blobs: BlobStore = Depends(get_blob_store),
):
    """Get a single release."""
    service = ReleaseService(db, blobs)
    try:
        return ReleaseResponse.model_validate(service.get(release_id))
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Release not found")


# ============================================================================
# Submission
# ============================================================================

@router.post("", response_model=ReleaseResponse, status_code=status.HTTP_201_CREATED)
async def submit_release(
    payload: str = Form(..., description="ReleasePayload as JSON"),
    cover: Optional[UploadFile] = File(None),
    audio: Optional[List[UploadFile]] = File(None, description="One file per track, in track order"),
    db: Session = Depends(get_db),
    blobs: BlobStore = Depends(get_blob_store),
):
    """Submit a new release.

    Fails with 422 and the first unmet rule when the submission is invalid.
    """
    try:
        data = ReleasePayload.model_validate_json(payload)
    except PayloadError as e:
        raise HTTPException(status_code=422, detail=str(e))

    cover_file = None
    if cover is not None and cover.filename:
        cover_file = FileAttachment(name=cover.filename, data=await cover.read())

    audio_files = []
    for upload in audio or []:
        audio_files.append(FileAttachment(name=upload.filename, data=await upload.read()))

    service = ReleaseService(db, blobs)
    try:
        release = await service.submit(data.to_draft(cover_file, audio_files))
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.reason)
    except (StorageError, PersistenceError) as e:
        logger.error(f"Submission failed: {e}")
        raise HTTPException(status_code=500, detail="Could not save release")

    return ReleaseResponse.model_validate(release)


# ============================================================================
# Review
# ============================================================================

@router.put("/{release_id}/checklist", response_model=StatusResponse)
async def update_checklist(
    release_id: str,
    data: ChecklistUpdate,
    db: Session = Depends(get_db),
    blobs: BlobStore = Depends(get_blob_store),
):
    """Store the approval checklist and return the derived status."""
    service = ReleaseService(db, blobs)
    try:
        new_status = await service.update_checklist(release_id, data.to_checklist(), reopen=data.reopen)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Release not found")
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return StatusResponse(id=release_id, status=new_status)


@router.post("/{release_id}/reject", response_model=StatusResponse)
async def reject_release(
    release_id: str,
    data: RejectRequest,
    db: Session = Depends(get_db),
    blobs: BlobStore = Depends(get_blob_store),
):
    """Mark a release as rejected."""
    service = ReleaseService(db, blobs)
    try:
        release = await service.reject(release_id, data.reason)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Release not found")
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return StatusResponse(id=release.id, status=release.status)


@router.patch("/{release_id}/notes", response_model=MessageResponse)
def update_notes(
    release_id: str,
    data: NotesRequest,
    db: Session = Depends(get_db),
    blobs: BlobStore = Depends(get_blob_store),
):
    """Replace the admin notes."""
    service = ReleaseService(db, blobs)
    try:
        service.set_admin_notes(release_id, data.notes)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Release not found")
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return MessageResponse(message="Notes saved")


@router.post("/{release_id}/downloads", response_model=DownloadResponse)
def download_file(
    release_id: str,
    data: DownloadRequest,
    db: Session = Depends(get_db),
    blobs: BlobStore = Depends(get_blob_store),
):
    """Log a file retrieval and return the file's download URL."""
    service = ReleaseService(db, blobs)
    try:
        url, entry = service.download(release_id, data.file_type, data.track_id, data.user)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Release not found")
    except MediaUnavailableError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return DownloadResponse(url=url, entry=DownloadLogResponse.model_validate(entry))


# ============================================================================
# Archival
# ============================================================================

@router.post("/{release_id}/purge", response_model=PurgeResponse)
async def purge_release(
    release_id: str,
    db: Session = Depends(get_db),
    blobs: BlobStore = Depends(get_blob_store),
):
    """Delete the release's audio and cover, keeping its metadata."""
    service = ReleaseService(db, blobs)
    try:
        report = await service.purge(release_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Release not found")
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return _purge_response(report)


@router.delete("/{release_id}", response_model=PurgeResponse)
async def delete_release(
    release_id: str,
    db: Session = Depends(get_db),
    blobs: BlobStore = Depends(get_blob_store),
):
    """Delete a release permanently, media first."""
    service = ReleaseService(db, blobs)
    try:
        report = await service.delete(release_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Release not found")
    except PersistenceError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return _purge_response(report)
