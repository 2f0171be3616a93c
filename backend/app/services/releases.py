"""Release submission and editorial review."""
import asyncio
import hashlib
import logging
import uuid
from collections import Counter
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from app.config import settings
from app.domain import (
    Checklist,
    DownloadLog,
    FileType,
    Genre,
    Release,
    ReleaseDraft,
    ReleaseStatus,
    ReleaseType,
    StoredMedia,
    Track,
)
from app.exceptions import MediaUnavailableError
from app.integrations.storage import BlobStore, LocalBlobStore
from app.services.artists import ArtistDirectory
from app.services.media import MediaLifecycleManager, PurgeReport
from app.services.repository import ReleaseRepository
from app.services.status import derive_status
from app.services.validation import ensure_valid
from app.utils.normalize import clean_names, normalize_name
from app.utils.paths import audio_blob_path, cover_blob_path, safe_file_name

logger = logging.getLogger(__name__)

CLOSED_STATUSES = frozenset({ReleaseStatus.FINALIZED, ReleaseStatus.REJECTED})
PENDING_STATUSES = frozenset({ReleaseStatus.UNDER_REVIEW, ReleaseStatus.NOT_UPLOADED})

# Serializes checklist, purge and delete calls on the same release within
# this process. Separate processes still race (last write wins).
class ReleaseLocks:
    """Per-release locks, dropped once nobody holds or waits on them."""

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = {}
        self._users: Dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    @asynccontextmanager
    async def hold(self, release_id: str):
        lock = self._locks.setdefault(release_id, asyncio.Lock())
        self._users[release_id] = self._users.get(release_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[release_id] -= 1
            if not self._users[release_id]:
                del self._users[release_id]
                del self._locks[release_id]


_release_locks = ReleaseLocks()


def release_lock(release_id: str):
    return _release_locks.hold(release_id)


def audio_fingerprint(data: bytes) -> str:
    """Content fingerprint stored with each uploaded audio file."""
    return f"sha256-{hashlib.sha256(data).hexdigest()}"


@dataclass(frozen=True)
class DashboardStats:
    """Counts shown on the staff overview."""
    pending: int
    approved: int
    finalized_this_month: int


@dataclass(frozen=True)
class GenreCount:
    name: str
    count: int


class ReleaseService:
    """Submission, review and archival of releases."""

    def __init__(self, db: Session, blobs: Optional[BlobStore] = None):
        self.repository = ReleaseRepository(db)
        self.blobs = blobs or LocalBlobStore()
        self.media = MediaLifecycleManager(self.repository, self.blobs)
        self.artists = ArtistDirectory(self.repository)

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    async def submit(self, draft: ReleaseDraft, today: Optional[date] = None) -> Release:
        """Validate, normalize, upload and store a new release.

        Raises ValidationError before anything is written. If an upload
        fails, files already uploaded for this release are removed again.
        """
        ensure_valid(draft, today)

        release_id = str(uuid.uuid4())
        title = normalize_name(draft.title.strip())
        main_artist = clean_names(draft.main_artist)
        if draft.genre == Genre.OTHER.value:
            genre = normalize_name(draft.sub_genre.strip())
        else:
            genre = draft.genre

        uploaded: List[str] = []
        try:
            cover = None
            if draft.has_cover and draft.cover is not None:
                name = safe_file_name(draft.cover.name)
                path = cover_blob_path(release_id, name)
                url = await self.blobs.upload(path, draft.cover.data)
                uploaded.append(path)
                cover = StoredMedia(file_name=name, url=url)

            tracks = []
            for track_draft in draft.tracks:
                track = Track(
                    id=str(uuid.uuid4()),
                    composer=clean_names(track_draft.composer),
                    has_isrc=track_draft.has_isrc,
                    isrc=track_draft.isrc.strip().upper() if track_draft.has_isrc else None,
                    lyrics=track_draft.lyrics or None,
                )
                if draft.type == ReleaseType.SINGLE:
                    # A single's track is the release itself, plus any features
                    track.title = title
                    track.artist = main_artist + clean_names(track_draft.feat)
                else:
                    track.title = normalize_name(track_draft.title.strip())
                    track.artist = clean_names(track_draft.artist)

                if track_draft.audio is not None:
                    audio = track_draft.audio
                    name = safe_file_name(audio.name)
                    path = audio_blob_path(release_id, track.id, name)
                    url = await self.blobs.upload(path, audio.data)
                    uploaded.append(path)
                    track.audio = StoredMedia(file_name=name, url=url)
                    track.fingerprint = audio_fingerprint(audio.data)

                tracks.append(track)

            release = Release(
                id=release_id,
                type=draft.type,
                title=title,
                main_artist=main_artist,
                genre=genre,
                release_date=draft.release_date,
                created_at=datetime.now(timezone.utc),
                has_cover=draft.has_cover,
                cover=cover,
                status=ReleaseStatus.UNDER_REVIEW,
                checklist=Checklist(),
                tracks=tracks,
            )
            self.repository.add(release)
        except Exception:
            for path in uploaded:
                try:
                    await self.blobs.delete(path)
                except Exception as cleanup_error:
                    logger.warning(f"Could not remove {path} after failed submission: {cleanup_error}")
            raise

        logger.info(f"Release submitted: {release.id} {release.title} ({release.type.value})")
        return release

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, release_id: str) -> Release:
        return self.repository.get_or_raise(release_id)

    def list_releases(self, view: str = "all", artist: Optional[str] = None) -> List[Release]:
        """Releases newest first.

        view: "all", "active" (still in progress) or "history"
        (finalized or rejected).
        artist: keep releases where the normalized name is a main artist
        or is credited on one of the tracks.
        """
        releases = self.repository.list_all()
        if view == "active":
            releases = [r for r in releases if r.status not in CLOSED_STATUSES]
        elif view == "history":
            releases = [r for r in releases if r.status in CLOSED_STATUSES]

        name = normalize_name(artist.strip()) if artist else ""
        if name:
            releases = [
                r for r in releases
                if name in r.main_artist or any(name in t.artist for t in r.tracks)
            ]
        return releases

    def dashboard(self, today: Optional[date] = None) -> DashboardStats:
        today = today or date.today()
        releases = self.repository.list_all()
        return DashboardStats(
            pending=sum(1 for r in releases if r.status in PENDING_STATUSES),
            approved=sum(1 for r in releases if r.status == ReleaseStatus.APPROVED),
            finalized_this_month=sum(
                1 for r in releases
                if r.status == ReleaseStatus.FINALIZED
                and r.created_at.year == today.year
                and r.created_at.month == today.month
            ),
        )

    def genre_counts(self) -> List[GenreCount]:
        """Every offered genre (zero counts included) plus custom ones, most used first."""
        counts = Counter(r.genre for r in self.repository.list_all())
        names = [g.value for g in Genre] + sorted(set(counts) - {g.value for g in Genre})
        entries = [GenreCount(name=name, count=counts.get(name, 0)) for name in names]
        return sorted(entries, key=lambda entry: entry.count, reverse=True)

    # ------------------------------------------------------------------
    # Review
    # ------------------------------------------------------------------

    async def update_checklist(
        self, release_id: str, checklist: Checklist, reopen: bool = False
    ) -> ReleaseStatus:
        """Store a checklist and re-derive the status from it.

        A rejected release stays rejected unless ``reopen`` is set.
        """
        async with release_lock(release_id):
            release = self.repository.get_or_raise(release_id)

            if release.status == ReleaseStatus.REJECTED and not reopen:
                status = ReleaseStatus.REJECTED
            else:
                status = derive_status(checklist)

            self.repository.update(
                release_id,
                checklist=checklist.to_document(),
                status=status.value,
            )

        logger.info(f"Release {release_id} checklist updated, status {status.value}")
        return status

    async def reject(self, release_id: str, reason: Optional[str] = None) -> Release:
        async with release_lock(release_id):
            release = self.repository.get_or_raise(release_id)
            release.status = ReleaseStatus.REJECTED
            if reason:
                note = f"Rejected: {reason.strip()}"
                release.admin_notes = f"{release.admin_notes}\n{note}" if release.admin_notes else note

            self.repository.update(
                release_id,
                status=release.status.value,
                admin_notes=release.admin_notes,
            )

        logger.info(f"Release {release_id} rejected")
        return release

    def set_admin_notes(self, release_id: str, notes: str) -> None:
        self.repository.update(release_id, admin_notes=notes)

    def register_download(
        self,
        release_id: str,
        file_type: FileType,
        file_name: str,
        user: Optional[str] = None,
    ) -> DownloadLog:
        """Append a download entry to the release's log."""
        entry = DownloadLog(
            date=datetime.now(timezone.utc).isoformat(),
            user=user or settings.download_user,
            file_type=file_type,
            file_name=file_name,
        )
        self.repository.append_download(release_id, entry)
        logger.info(f"Download of {file_type.value} {file_name} from release {release_id} by {entry.user}")
        return entry

    def download(
        self,
        release_id: str,
        file_type: FileType,
        track_id: Optional[str] = None,
        user: Optional[str] = None,
    ) -> Tuple[str, DownloadLog]:
        """Resolve the download URL of a cover or track audio and log the retrieval."""
        release = self.repository.get_or_raise(release_id)

        if file_type == FileType.COVER:
            media = release.cover
        else:
            track = release.get_track(track_id) if track_id else None
            if track is None:
                raise MediaUnavailableError(f"Release {release_id} has no track {track_id}")
            media = track.audio

        if not isinstance(media, StoredMedia) or not media.url:
            raise MediaUnavailableError(f"No {file_type.value} file available for release {release_id}")

        entry = self.register_download(release_id, file_type, media.file_name, user)
        return media.url, entry

    # ------------------------------------------------------------------
    # Archival
    # ------------------------------------------------------------------

    async def purge(self, release_id: str) -> PurgeReport:
        async with release_lock(release_id):
            release = self.repository.get_or_raise(release_id)
            return await self.media.purge(release)

    async def delete(self, release_id: str) -> PurgeReport:
        async with release_lock(release_id):
            release = self.repository.get_or_raise(release_id)
            report = await self.media.delete_permanently(release)
        return report

    # ------------------------------------------------------------------
    # Artists
    # ------------------------------------------------------------------

    def known_artists(self) -> List[str]:
        return self.artists.list_known_artists(self.repository.list_all())

    def add_artist(self, name: str) -> Optional[str]:
        return self.artists.add_artist(name)

    def normalize_names(self) -> int:
        return self.artists.normalize_all(self.repository.list_all())
