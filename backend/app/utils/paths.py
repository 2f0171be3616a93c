"""Blob path conventions.

These layouts match assets already in storage and must not change.
"""
from pathlib import Path, PurePosixPath


def safe_file_name(name: str) -> str:
    """Bare file name of an upload, with any directory part removed.

    Returns "" when nothing usable is left ("", ".", "..").
    """
    base = PurePosixPath((name or "").replace("\\", "/")).name.strip()
    if base in ("", ".", ".."):
        return ""
    return base


def _checked_name(file_name: str) -> str:
    name = safe_file_name(file_name)
    if not name:
        raise ValueError(f"Invalid file name: {file_name!r}")
    return name


def cover_blob_path(release_id: str, file_name: str) -> str:
    """Blob path of a release cover: capas/{release_id}/{file_name}."""
    return f"capas/{release_id}/{_checked_name(file_name)}"


def audio_blob_path(release_id: str, track_id: str, file_name: str) -> str:
    """Blob path of a track's audio: audios/{release_id}/{track_id}/{file_name}."""
    return f"audios/{release_id}/{track_id}/{_checked_name(file_name)}"


def ensure_directory(path: Path) -> Path:
    """Ensure a directory exists, creating if necessary."""
    path.mkdir(parents=True, exist_ok=True)
    return path
