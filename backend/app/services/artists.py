"""Artist directory: registered names plus names seen on releases."""
import logging
from typing import Iterable, List, Optional

from app.domain import Release
from app.services.repository import ReleaseRepository
from app.utils.normalize import normalize_name, normalize_names

logger = logging.getLogger(__name__)


class ArtistDirectory:
    """Keeps the set of known artist names."""

    def __init__(self, repository: ReleaseRepository):
        self.repository = repository

    def add_artist(self, name: str) -> Optional[str]:
        """Register an artist under its normalized name.

        Registering the same name twice overwrites the entry. Returns the
        stored name, or None for a blank name.
        """
        normalized = normalize_name(name.strip())
        if not normalized:
            return None

        self.repository.put_artist(normalized)
        logger.info(f"Registered artist {normalized}")
        return normalized

    def list_known_artists(self, releases: Iterable[Release]) -> List[str]:
        """Registered names plus every main and track artist, sorted."""
        names = set(self.repository.list_artist_names())
        for release in releases:
            names.update(release.main_artist)
            for track in release.tracks:
                names.update(track.artist)
        return sorted(names)

    def normalize_all(self, releases: Iterable[Release]) -> int:
        """Rewrite artist and composer names of releases not yet normalized.

        Only releases with at least one changed name are written. Returns
        the number of releases written. Not atomic: if a write fails,
        releases already written stay normalized.
        """
        count = 0
        for release in releases:
            main_artist = normalize_names(release.main_artist)
            changed = main_artist != release.main_artist

            for track in release.tracks:
                artist = normalize_names(track.artist)
                composer = normalize_names(track.composer)
                if artist != track.artist or composer != track.composer:
                    track.artist = artist
                    track.composer = composer
                    changed = True

            if not changed:
                continue

            release.main_artist = main_artist
            self.repository.update(
                release.id,
                main_artist=main_artist,
                tracks=[track.to_document() for track in release.tracks],
            )
            count += 1

        logger.info(f"Normalized names on {count} release(s)")
        return count
