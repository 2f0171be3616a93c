"""Release repository backed by SQLAlchemy."""
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain import (
    Checklist,
    DownloadLog,
    Release,
    ReleaseStatus,
    ReleaseType,
    Track,
    media_from_document,
)
from app.exceptions import NotFoundError, PersistenceError
from app.models.artist import Artist
from app.models.release import ReleaseRecord

logger = logging.getLogger(__name__)


def release_to_columns(release: Release) -> Dict[str, Any]:
    """Persisted column values of a release."""
    return {
        "id": release.id,
        "type": release.type.value,
        "title": release.title,
        "main_artist": list(release.main_artist),
        "genre": release.genre,
        "release_date": release.release_date,
        "created_at": release.created_at,
        "has_cover": release.has_cover,
        "cover_file_name": release.cover_file_name,
        "cover_url": release.cover_url,
        "status": release.status.value,
        "checklist": release.checklist.to_document(),
        "tracks": [track.to_document() for track in release.tracks],
        "purged": release.purged,
        "admin_notes": release.admin_notes,
        "downloads": [entry.to_document() for entry in release.downloads],
    }


def release_from_record(record: ReleaseRecord) -> Release:
    """Rebuild a release from its persisted row."""
    return Release(
        id=record.id,
        type=ReleaseType(record.type),
        title=record.title,
        main_artist=list(record.main_artist or []),
        genre=record.genre,
        release_date=record.release_date,
        created_at=record.created_at,
        has_cover=bool(record.has_cover),
        cover=media_from_document(record.cover_file_name, record.cover_url),
        status=ReleaseStatus(record.status),
        checklist=Checklist.from_document(record.checklist),
        tracks=[Track.from_document(t) for t in record.tracks or []],
        purged=bool(record.purged),
        admin_notes=record.admin_notes or "",
        downloads=[DownloadLog.from_document(d) for d in record.downloads or []],
    )


class ReleaseRepository:
    """Stores release documents and the artist registry."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _write(self, action: str):
        try:
            yield
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error while trying to {action}: {e}")
            raise PersistenceError(f"Could not {action}: {e}") from e

    def _get_record(self, release_id: str) -> Optional[ReleaseRecord]:
        try:
            return self.db.get(ReleaseRecord, release_id)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Could not load release {release_id}: {e}") from e

    # ------------------------------------------------------------------
    # Releases
    # ------------------------------------------------------------------

    def list_all(self) -> List[Release]:
        """All releases, newest first."""
        try:
            records = (
                self.db.query(ReleaseRecord)
                .order_by(ReleaseRecord.created_at.desc())
                .all()
            )
        except SQLAlchemyError as e:
            raise PersistenceError(f"Could not list releases: {e}") from e
        return [release_from_record(r) for r in records]

    def get(self, release_id: str) -> Optional[Release]:
        record = self._get_record(release_id)
        return release_from_record(record) if record else None

    def get_or_raise(self, release_id: str) -> Release:
        release = self.get(release_id)
        if release is None:
            raise NotFoundError(release_id)
        return release

    def add(self, release: Release) -> None:
        with self._write(f"store release {release.id}"):
            self.db.add(ReleaseRecord(**release_to_columns(release)))

    def update(self, release_id: str, **values: Any) -> None:
        """Overwrite the given columns of one release."""
        record = self._get_record(release_id)
        if record is None:
            raise NotFoundError(release_id)

        with self._write(f"update release {release_id}"):
            for column, value in values.items():
                setattr(record, column, value)

    def append_download(self, release_id: str, entry: DownloadLog) -> None:
        record = self._get_record(release_id)
        if record is None:
            raise NotFoundError(release_id)

        with self._write(f"log download for release {release_id}"):
            # Assign a new list so the JSON column is flagged dirty
            record.downloads = list(record.downloads or []) + [entry.to_document()]

    def delete(self, release_id: str) -> bool:
        """Remove a release record. Returns False if it did not exist."""
        record = self._get_record(release_id)
        if record is None:
            return False

        with self._write(f"delete release {release_id}"):
            self.db.delete(record)
        return True

    def force_delete(self, release_id: str) -> None:
        """Delete by primary key without loading the row first."""
        self.db.rollback()
        with self._write(f"force delete release {release_id}"):
            self.db.execute(delete(ReleaseRecord).where(ReleaseRecord.id == release_id))

    # ------------------------------------------------------------------
    # Artist registry
    # ------------------------------------------------------------------

    def list_artist_names(self) -> List[str]:
        try:
            return [name for (name,) in self.db.query(Artist.name).all()]
        except SQLAlchemyError as e:
            raise PersistenceError(f"Could not list artists: {e}") from e

    def put_artist(self, name: str) -> None:
        """Insert or overwrite the registry entry for a normalized name."""
        with self._write(f"store artist {name}"):
            self.db.merge(Artist(name=name, created_at=datetime.now(timezone.utc)))
