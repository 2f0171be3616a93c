"""Submission validation.

Rules run in a fixed order and stop at the first failure. Messages are
meant for the submitting artist; callers should rely on ``field`` rather
than on the exact wording.
"""
import io
import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional

from PIL import Image, UnidentifiedImageError

from app.config import settings
from app.domain import Genre, ImageAttachment, ReleaseDraft, ReleaseType
from app.exceptions import ValidationError
from app.utils.paths import safe_file_name

logger = logging.getLogger(__name__)

GENRES = frozenset(g.value for g in Genre)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a draft."""
    ok: bool
    reason: Optional[str] = None
    field: Optional[str] = None

    @classmethod
    def valid(cls) -> "ValidationResult":
        return cls(ok=True)

    @classmethod
    def invalid(cls, reason: str, field: str) -> "ValidationResult":
        return cls(ok=False, reason=reason, field=field)


def min_release_date(today: date, lead_days: Optional[int] = None) -> date:
    """Earliest release date accepted on ``today``."""
    if lead_days is None:
        lead_days = settings.min_lead_days
    return today + timedelta(days=lead_days)


def read_image_size(image: ImageAttachment) -> Optional[tuple[int, int]]:
    """Pixel size of an image attachment.

    Declared dimensions win. Otherwise the size is read from the image
    header only; pixel data is never decoded.
    """
    if image.width is not None and image.height is not None:
        return image.width, image.height

    try:
        with Image.open(io.BytesIO(image.data)) as img:
            return img.size
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        logger.debug(f"Could not read image header for {image.name}: {e}")
        return None


def _blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


def _no_names(names: List[str]) -> bool:
    return all(_blank(name) for name in names)


def validate_draft(
    draft: ReleaseDraft,
    today: Optional[date] = None,
    lead_days: Optional[int] = None,
    cover_dimension: Optional[int] = None,
) -> ValidationResult:
    """Check a submission draft. The draft is never modified."""
    today = today or date.today()
    if cover_dimension is None:
        cover_dimension = settings.cover_dimension

    # Header fields
    if (
        _blank(draft.title)
        or _no_names(draft.main_artist)
        or _blank(draft.genre)
        or draft.release_date is None
    ):
        return ValidationResult.invalid(
            "Fill in title, main artist, genre and release date.", "header"
        )

    earliest = min_release_date(today, lead_days)
    if draft.release_date < earliest:
        return ValidationResult.invalid(
            f"Release date must be on or after {earliest.isoformat()}.",
            "release_date",
        )

    if draft.genre not in GENRES:
        return ValidationResult.invalid("Choose a genre from the list.", "genre")

    if draft.genre == Genre.OTHER.value and _blank(draft.sub_genre):
        return ValidationResult.invalid("Specify the genre.", "sub_genre")

    # Cover art
    if draft.has_cover and draft.cover is None:
        return ValidationResult.invalid(
            "A cover was declared but no file was attached.", "cover"
        )

    if draft.cover is not None:
        if not safe_file_name(draft.cover.name):
            return ValidationResult.invalid("The cover file has no usable name.", "cover")
        size = read_image_size(draft.cover)
        if size != (cover_dimension, cover_dimension):
            return ValidationResult.invalid(
                f"The cover must be exactly {cover_dimension}x{cover_dimension}px.",
                "cover",
            )

    # Tracks
    if draft.type == ReleaseType.SINGLE and len(draft.tracks) != 1:
        return ValidationResult.invalid("A single has exactly one track.", "tracks")
    if not draft.tracks:
        return ValidationResult.invalid("Add at least one track.", "tracks")

    for number, track in enumerate(draft.tracks, start=1):
        if draft.type == ReleaseType.SINGLE:
            if _no_names(track.composer) or track.audio is None:
                return ValidationResult.invalid(
                    f"Track {number}: add composer(s) and upload the audio.",
                    f"tracks[{number - 1}]",
                )
        else:
            if _blank(track.title):
                return ValidationResult.invalid(
                    f"Track {number}: enter the song title.", f"tracks[{number - 1}].title"
                )
            if _no_names(track.artist):
                return ValidationResult.invalid(
                    f"Track {number}: enter the artist(s).", f"tracks[{number - 1}].artist"
                )
            if _no_names(track.composer):
                return ValidationResult.invalid(
                    f"Track {number}: enter the composer(s).", f"tracks[{number - 1}].composer"
                )
            if track.audio is None:
                return ValidationResult.invalid(
                    f"Track {number}: upload the audio file.", f"tracks[{number - 1}].audio"
                )

        if track.audio is not None and not safe_file_name(track.audio.name):
            return ValidationResult.invalid(
                f"Track {number}: the audio file has no usable name.", f"tracks[{number - 1}].audio"
            )

        if track.has_isrc and _blank(track.isrc):
            return ValidationResult.invalid(
                f"Track {number}: enter the ISRC.", f"tracks[{number - 1}].isrc"
            )

    return ValidationResult.valid()


def ensure_valid(draft: ReleaseDraft, today: Optional[date] = None) -> None:
    """Validate a draft, raising ValidationError on the first failed rule."""
    result = validate_draft(draft, today)
    if not result.ok:
        raise ValidationError(result.reason, result.field)
