"""Release domain types.

Media references are held as a tagged state (``StoredMedia`` or
``PURGED``). The legacy sentinel strings only appear when a release is
converted to or from its persisted document form.
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Union

# Persisted sentinels kept for compatibility with existing stored records
DELETED_MEDIA = "[DELETED_MEDIA]"
PURGED_HASH = "[PURGED]"


class ReleaseType(str, Enum):
    """Kind of release. Fixed at creation."""
    SINGLE = "Single"
    ALBUM = "Album/EP"


class ReleaseStatus(str, Enum):
    """Workflow status shown to staff."""
    NOT_UPLOADED = "NotUploaded"
    UNDER_REVIEW = "UnderReview"
    APPROVED = "Approved"
    DISTRIBUTED = "Distributed"
    FINALIZED = "Finalized"
    REJECTED = "Rejected"


class Genre(str, Enum):
    """Genres offered on the submission form."""
    FUNK = "Funk"
    TRAP = "Trap"
    RAP = "Rap"
    POP = "Pop"
    PAGODE = "Pagode"
    SERTANEJO = "Sertanejo"
    ELETRONICA = "Eletrônica"
    OTHER = "Other"


class FileType(str, Enum):
    """Kind of file retrieved by staff."""
    AUDIO = "audio"
    COVER = "cover"


@dataclass(frozen=True)
class StoredMedia:
    """A file that currently exists in the blob store."""
    file_name: str
    url: str = ""


class _Purged:
    """Marker for media removed by a purge."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "PURGED"


PURGED = _Purged()

MediaRef = Union[StoredMedia, _Purged, None]


def media_from_document(file_name: Optional[str], url: Optional[str]) -> MediaRef:
    if not file_name:
        return None
    # Older records used "[DELETED]"
    if file_name.startswith("[DELETED"):
        return PURGED
    return StoredMedia(file_name=file_name, url=url or "")


def _file_name(media: MediaRef) -> Optional[str]:
    if media is PURGED:
        return DELETED_MEDIA
    if isinstance(media, StoredMedia):
        return media.file_name
    return None


def _url(media: MediaRef) -> str:
    if isinstance(media, StoredMedia):
        return media.url
    return ""


@dataclass
class Checklist:
    """Editorial approval checklist."""
    files_verified: bool = False
    metadata_verified: bool = False
    sent_to_distributor: bool = False
    share_in_sent: bool = False

    def to_document(self) -> Dict[str, bool]:
        return {
            "filesVerified": self.files_verified,
            "metadataVerified": self.metadata_verified,
            "sentToDistributor": self.sent_to_distributor,
            "shareInSent": self.share_in_sent,
        }

    @classmethod
    def from_document(cls, data: Optional[Dict[str, Any]]) -> "Checklist":
        data = data or {}
        return cls(
            files_verified=bool(data.get("filesVerified", False)),
            metadata_verified=bool(data.get("metadataVerified", False)),
            sent_to_distributor=bool(data.get("sentToDistributor", False)),
            share_in_sent=bool(data.get("shareInSent", False)),
        )


@dataclass(frozen=True)
class DownloadLog:
    """One file retrieval by staff. Entries are only ever appended."""
    date: str  # ISO-8601
    user: str
    file_type: FileType
    file_name: str

    def to_document(self) -> Dict[str, str]:
        return {
            "date": self.date,
            "user": self.user,
            "fileType": self.file_type.value,
            "fileName": self.file_name,
        }

    @classmethod
    def from_document(cls, data: Dict[str, Any]) -> "DownloadLog":
        return cls(
            date=data["date"],
            user=data["user"],
            file_type=FileType(data["fileType"]),
            file_name=data["fileName"],
        )


@dataclass
class Track:
    """A track of a release."""
    id: str
    title: str = ""
    artist: List[str] = field(default_factory=list)
    composer: List[str] = field(default_factory=list)
    has_isrc: bool = False
    isrc: Optional[str] = None
    audio: MediaRef = None
    fingerprint: Optional[str] = None
    lyrics: Optional[str] = None

    @property
    def audio_file_name(self) -> Optional[str]:
        return _file_name(self.audio)

    @property
    def audio_url(self) -> str:
        return _url(self.audio)

    @property
    def audio_hash(self) -> Optional[str]:
        if self.audio is PURGED:
            return PURGED_HASH
        return self.fingerprint

    def to_document(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "artist": list(self.artist),
            "composer": list(self.composer),
            "hasIsrc": self.has_isrc,
            "isrc": self.isrc,
            "audioFileName": self.audio_file_name,
            "audioUrl": self.audio_url,
            "audioHash": self.audio_hash,
            "lyrics": self.lyrics,
        }

    @classmethod
    def from_document(cls, data: Dict[str, Any]) -> "Track":
        audio = media_from_document(data.get("audioFileName"), data.get("audioUrl"))
        fingerprint = data.get("audioHash")
        if audio is PURGED or fingerprint == PURGED_HASH:
            fingerprint = None
        return cls(
            id=data["id"],
            title=data.get("title") or "",
            artist=list(data.get("artist") or []),
            composer=list(data.get("composer") or []),
            has_isrc=bool(data.get("hasIsrc", False)),
            isrc=data.get("isrc"),
            audio=audio,
            fingerprint=fingerprint,
            lyrics=data.get("lyrics"),
        )


@dataclass
class Release:
    """A submitted single or album/EP."""
    id: str
    type: ReleaseType
    title: str
    main_artist: List[str]
    genre: str
    release_date: date
    created_at: datetime
    has_cover: bool = False
    cover: MediaRef = None
    status: ReleaseStatus = ReleaseStatus.UNDER_REVIEW
    checklist: Checklist = field(default_factory=Checklist)
    tracks: List[Track] = field(default_factory=list)
    purged: bool = False
    admin_notes: str = ""
    downloads: List[DownloadLog] = field(default_factory=list)

    @property
    def cover_file_name(self) -> Optional[str]:
        return _file_name(self.cover)

    @property
    def cover_url(self) -> str:
        return _url(self.cover)

    def get_track(self, track_id: str) -> Optional[Track]:
        for track in self.tracks:
            if track.id == track_id:
                return track
        return None


# ============================================================================
# Submission drafts
# ============================================================================

@dataclass(frozen=True)
class FileAttachment:
    """Opaque upload handle supplied by the caller."""
    name: str
    data: bytes


@dataclass(frozen=True)
class ImageAttachment(FileAttachment):
    """Image upload. Width/height are the declared pixel dimensions, if known."""
    width: Optional[int] = None
    height: Optional[int] = None


@dataclass
class TrackDraft:
    """Unvalidated track form data."""
    title: str = ""
    artist: List[str] = field(default_factory=list)
    feat: List[str] = field(default_factory=list)
    composer: List[str] = field(default_factory=list)
    has_isrc: bool = False
    isrc: Optional[str] = None
    audio: Optional[FileAttachment] = None
    lyrics: Optional[str] = None


@dataclass
class ReleaseDraft:
    """Unvalidated submission form data."""
    type: ReleaseType
    title: str = ""
    main_artist: List[str] = field(default_factory=list)
    genre: str = ""
    sub_genre: str = ""
    release_date: Optional[date] = None
    has_cover: bool = False
    cover: Optional[ImageAttachment] = None
    tracks: List[TrackDraft] = field(default_factory=list)
