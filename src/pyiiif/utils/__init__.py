"""Utility functions for pyiiif."""

from pyiiif.utils.file import (
    ensure_dir,
    format_from_path,
    image_filename,
    sanitize_filename,
)

__all__ = [
    "ensure_dir",
    "format_from_path",
    "image_filename",
    "sanitize_filename",
]
