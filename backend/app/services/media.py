"""Media purge and permanent deletion of releases."""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from app.config import settings
from app.domain import PURGED, Release, StoredMedia
from app.exceptions import AssetDeleteError, NotFoundError, PersistenceError
from app.integrations.storage import BlobStore
from app.services.repository import ReleaseRepository
from app.utils.paths import audio_blob_path, cover_blob_path

logger = logging.getLogger(__name__)


@dataclass
class PurgeReport:
    """What a purge attempted. Failures were logged and skipped."""
    release_id: str
    deleted: List[str] = field(default_factory=list)
    failed: List[AssetDeleteError] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.deleted) + len(self.failed)


def media_paths(release: Release) -> List[str]:
    """Blob paths of every file the release still holds."""
    candidates = []
    if isinstance(release.cover, StoredMedia):
        candidates.append((cover_blob_path, (release.id, release.cover.file_name)))
    for track in release.tracks:
        if isinstance(track.audio, StoredMedia):
            candidates.append((audio_blob_path, (release.id, track.id, track.audio.file_name)))

    paths = []
    for build, args in candidates:
        try:
            paths.append(build(*args))
        except ValueError as e:
            logger.warning(f"Skipping media of release {release.id}: {e}")
    return paths


class MediaLifecycleManager:
    """Deletes release media while keeping metadata, or removes releases entirely.

    Blob deletion is best effort: one failing asset never stops the rest,
    and the release is marked purged regardless.
    """

    def __init__(
        self,
        repository: ReleaseRepository,
        blobs: BlobStore,
        delete_retries: Optional[int] = None,
    ):
        self.repository = repository
        self.blobs = blobs
        if delete_retries is None:
            delete_retries = settings.delete_retries
        self.delete_retries = max(1, delete_retries)

    async def _delete_asset(self, path: str) -> Optional[AssetDeleteError]:
        try:
            await self.blobs.delete(path)
        except Exception as e:
            error = AssetDeleteError(path, str(e))
            logger.warning(str(error))
            return error
        return None

    async def purge(self, release: Release) -> PurgeReport:
        """Delete the release's cover and audio, keeping the record.

        Idempotent: media already purged is not deleted again. Checklist
        and status are left alone.
        """
        report = PurgeReport(release_id=release.id)
        paths = media_paths(release)

        if paths:
            logger.info(f"Purging {len(paths)} file(s) of release {release.id}")
            errors = await asyncio.gather(*(self._delete_asset(p) for p in paths))
            for path, error in zip(paths, errors):
                if error is None:
                    report.deleted.append(path)
                else:
                    report.failed.append(error)

        release.purged = True
        release.cover = PURGED
        for track in release.tracks:
            track.audio = PURGED

        self.repository.update(
            release.id,
            purged=True,
            cover_file_name=release.cover_file_name,
            cover_url=release.cover_url,
            tracks=[track.to_document() for track in release.tracks],
        )

        if report.failed:
            logger.warning(
                f"Release {release.id} purged with {len(report.failed)} "
                f"undeleted file(s) of {report.attempted}"
            )
        else:
            logger.info(f"Release {release.id} purged")
        return report

    async def delete_permanently(self, release: Release) -> PurgeReport:
        """Purge media, then remove the record.

        The record must not survive: a failed delete is retried as a
        forced delete, and only if every attempt fails is the error raised.
        """
        report = PurgeReport(release_id=release.id)
        try:
            report = await self.purge(release)
        except (PersistenceError, NotFoundError) as e:
            logger.warning(f"Could not save purge of release {release.id}, deleting anyway: {e}")

        try:
            if self.repository.delete(release.id):
                logger.info(f"Deleted release {release.id}")
            return report
        except PersistenceError as e:
            logger.error(f"Delete of release {release.id} failed, forcing: {e}")

        last_error: Optional[PersistenceError] = None
        for attempt in range(1, self.delete_retries + 1):
            try:
                self.repository.force_delete(release.id)
                logger.info(f"Force deleted release {release.id} (attempt {attempt})")
                return report
            except PersistenceError as e:
                last_error = e
                logger.warning(f"Forced delete attempt {attempt} for release {release.id} failed: {e}")

        logger.critical(f"ORPHAN ALERT: release {release.id} could not be removed")
        raise last_error
