"""Utility functions."""
from app.utils.normalize import clean_names, normalize_name, normalize_names
from app.utils.paths import audio_blob_path, cover_blob_path, ensure_directory, safe_file_name

__all__ = [
    "clean_names",
    "normalize_name",
    "normalize_names",
    "audio_blob_path",
    "cover_blob_path",
    "ensure_directory",
    "safe_file_name",
]
