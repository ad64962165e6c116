"""File operation utilities."""

import re
from pathlib import Path
from typing import Iterable, List, Optional

from pyiiif.models.parameters import Format

# Common spellings of the IIIF format extensions
EXTENSION_ALIASES = {
    'jpeg': 'jpg',
    'tiff': 'tif',
}


def ensure_dir(path: Path) -> Path:
    """Ensure directory exists, creating it if necessary.

    Args:
        path: Directory path to ensure exists

    Returns:
        The path object
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def sanitize_filename(filename: str, replacement: str = "_") -> str:
    """Sanitize filename by removing/replacing invalid characters.

    Args:
        filename: Original filename
        replacement: Character to use for replacing invalid chars

    Returns:
        Sanitized filename safe for filesystem use
    """
    # Conservative set covering Windows and POSIX restrictions
    invalid_chars = r'[<>:"/\\|?*\x00-\x1f]'
    sanitized = re.sub(invalid_chars, replacement, filename)

    # Remove leading/trailing spaces and dots
    sanitized = sanitized.strip('. ')

    # Limit length to 255 characters (common filesystem limit)
    if len(sanitized) > 255:
        name, ext = Path(sanitized).stem, Path(sanitized).suffix
        max_name_len = 255 - len(ext)
        sanitized = name[:max_name_len] + ext

    return sanitized or "unnamed"


def image_filename(identifier: str, fmt: Format) -> str:
    """Build a filesystem-safe file name for a downloaded image.

    Args:
        identifier: Image identifier (may contain '/' or other unsafe chars)
        fmt: Requested image format, used as the extension

    Returns:
        File name such as 'abc_123.jpg'
    """
    return sanitize_filename(f"{identifier}.{fmt}")


def unique_filenames(names: Iterable[str]) -> List[str]:
    """Make file names distinct by numbering repeats before the extension.

    The first occurrence keeps its name; later ones become 'name_2.ext',
    'name_3.ext' and so on, skipping names already taken. Names are
    compared case-insensitively since some filesystems fold case.

    Args:
        names: File names, possibly with duplicates

    Returns:
        File names in the same order, all distinct
    """
    taken = set()
    result = []
    for name in names:
        candidate = name
        counter = 2
        while candidate.lower() in taken:
            path = Path(name)
            candidate = f"{path.stem}_{counter}{path.suffix}"
            counter += 1
        taken.add(candidate.lower())
        result.append(candidate)
    return result


def format_from_path(path: str) -> Optional[Format]:
    """Guess the image format from a file extension.

    Args:
        path: File path such as 'out/page.png'

    Returns:
        Matching Format, or None if the extension is missing or unknown
    """
    suffix = Path(path).suffix.lower().lstrip('.')
    suffix = EXTENSION_ALIASES.get(suffix, suffix)

    try:
        return Format(suffix)
    except ValueError:
        return None
