"""Release schemas."""
from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from app.domain import (
    Checklist,
    FileAttachment,
    FileType,
    ImageAttachment,
    ReleaseDraft,
    ReleaseStatus,
    ReleaseType,
    TrackDraft,
)


# ============================================================================
# Submission
# ============================================================================

class TrackPayload(BaseModel):
    """Track fields of a submission form."""
    title: str = ""
    artist: List[str] = []
    feat: List[str] = []  # Singles only
    composer: List[str] = []
    has_isrc: bool = False
    isrc: Optional[str] = None
    lyrics: Optional[str] = None


class ReleasePayload(BaseModel):
    """Metadata part of a multipart submission.

    Audio files are sent separately, one per track, in track order.
    """
    type: ReleaseType
    title: str = ""
    main_artist: List[str] = []
    genre: str = ""
    sub_genre: str = ""
    release_date: Optional[date] = None
    has_cover: bool = False
    cover_width: Optional[int] = None
    cover_height: Optional[int] = None
    tracks: List[TrackPayload] = []

    def to_draft(
        self,
        cover: Optional[FileAttachment] = None,
        audio: Optional[List[Optional[FileAttachment]]] = None,
    ) -> ReleaseDraft:
        """Build a draft, pairing the n-th audio file with the n-th track."""
        audio = audio or []
        tracks = []
        for index, payload in enumerate(self.tracks):
            artist = list(payload.artist)
            # Album tracks start out credited to the main artists
            if self.type == ReleaseType.ALBUM and not artist:
                artist = list(self.main_artist)
            tracks.append(TrackDraft(
                title=payload.title,
                artist=artist,
                feat=list(payload.feat),
                composer=list(payload.composer),
                has_isrc=payload.has_isrc,
                isrc=payload.isrc,
                audio=audio[index] if index < len(audio) else None,
                lyrics=payload.lyrics,
            ))

        image = None
        if cover is not None:
            image = ImageAttachment(
                name=cover.name,
                data=cover.data,
                width=self.cover_width,
                height=self.cover_height,
            )

        return ReleaseDraft(
            type=self.type,
            title=self.title,
            main_artist=list(self.main_artist),
            genre=self.genre,
            sub_genre=self.sub_genre,
            release_date=self.release_date,
            has_cover=self.has_cover,
            cover=image,
            tracks=tracks,
        )


# ============================================================================
# Review
# ============================================================================

class ChecklistSchema(BaseModel):
    """Approval checklist."""
    model_config = ConfigDict(from_attributes=True)

    files_verified: bool = False
    metadata_verified: bool = False
    sent_to_distributor: bool = False
    share_in_sent: bool = False

    def to_checklist(self) -> Checklist:
        return Checklist(**self.model_dump())


class ChecklistUpdate(ChecklistSchema):
    """Checklist update. ``reopen`` lets a rejected release re-enter review."""
    reopen: bool = False

    def to_checklist(self) -> Checklist:
        return Checklist(**self.model_dump(exclude={"reopen"}))


class StatusResponse(BaseModel):
    """Status after a checklist update."""
    id: str
    status: ReleaseStatus


class RejectRequest(BaseModel):
    """Reject release request."""
    reason: Optional[str] = None


class NotesRequest(BaseModel):
    """Admin notes update."""
    notes: str = ""


class DownloadRequest(BaseModel):
    """File retrieval request. ``track_id`` is required for audio."""
    file_type: FileType
    track_id: Optional[str] = None
    user: Optional[str] = None


class DownloadLogResponse(BaseModel):
    """Download log entry."""
    model_config = ConfigDict(from_attributes=True)

    date: str
    user: str
    file_type: FileType
    file_name: str


class DownloadResponse(BaseModel):
    """Where to fetch the file, plus the logged entry."""
    url: str
    entry: DownloadLogResponse


class PurgeResponse(BaseModel):
    """Result of a purge or permanent delete."""
    release_id: str
    deleted: List[str]
    failed: List[str]


# ============================================================================
# Responses
# ============================================================================

class TrackResponse(BaseModel):
    """Track response."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    artist: List[str]
    composer: List[str]
    has_isrc: bool = False
    isrc: Optional[str] = None
    audio_file_name: Optional[str] = None
    audio_url: str = ""
    audio_hash: Optional[str] = None
    lyrics: Optional[str] = None


class ReleaseResponse(BaseModel):
    """Release response."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    type: ReleaseType
    title: str
    main_artist: List[str]
    genre: str
    release_date: date
    created_at: datetime
    has_cover: bool
    cover_file_name: Optional[str] = None
    cover_url: str = ""
    status: ReleaseStatus
    checklist: ChecklistSchema
    tracks: List[TrackResponse]
    purged: bool = False
    admin_notes: str = ""
    downloads: List[DownloadLogResponse] = []


class DashboardResponse(BaseModel):
    """Staff overview counts."""
    model_config = ConfigDict(from_attributes=True)

    pending: int
    approved: int
    finalized_this_month: int


class GenreCountResponse(BaseModel):
    """Number of releases per genre."""
    model_config = ConfigDict(from_attributes=True)

    name: str
    count: int
