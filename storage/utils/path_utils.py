"""
Path Utilities

Helper functions for path validation and directory operations.
"""

import logging
import shutil
from pathlib import Path
from typing import Optional

from config.settings import DEFAULT_SEGMENT_EXTENSION
from storage.constants import MIME_EXTENSIONS


logger = logging.getLogger(__name__)


def ensure_directory(path: Path, create: bool = True) -> bool:
    """
    Ensure directory exists.

    Args:
        path: Directory path
        create: If True, create if doesn't exist

    Returns:
        True if directory exists or was created

    Example:
        ensure_directory(Path("/home/me/Videos/Magic Window/2025-01"))
    """
    try:
        if path.exists():
            if not path.is_dir():
                logger.error(f"Path exists but is not a directory: {path}")
                return False
            return True

        if create:
            path.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Created directory: {path}")
            return True

        return False

    except OSError as e:
        logger.error(f"Failed to create directory {path}: {e}")
        return False


def remove_directory(path: Path) -> bool:
    """
    Recursively remove a directory, best effort.

    Failure is logged, never raised.

    Args:
        path: Directory to remove

    Returns:
        True if the directory is gone afterwards
    """
    if not path.exists():
        return True

    try:
        shutil.rmtree(path)
        logger.debug(f"Removed directory: {path}")
        return True
    except OSError as e:
        logger.warning(f"Failed to remove directory {path}: {e}")
        return False


def nearest_existing_parent(path: Path) -> Path:
    """
    Walk up from path until an existing directory is found.

    Used to measure free space for a save root that hasn't been created yet.

    Example:
        nearest_existing_parent(Path("/home/me/Videos/not/yet"))
        # Returns: Path("/home/me/Videos")
    """
    candidate = Path(path).absolute()
    while not candidate.exists() and candidate != candidate.parent:
        candidate = candidate.parent
    return candidate


def extension_for_mime(mime_type: Optional[str]) -> str:
    """
    Pick a file extension for a segment MIME type.

    Args:
        mime_type: e.g. "video/webm;codecs=vp9" (may be None)

    Returns:
        Extension without dot, DEFAULT_SEGMENT_EXTENSION when unknown

    Example:
        extension_for_mime("video/webm;codecs=vp9")  # "webm"
        extension_for_mime(None)                     # "mp4"
    """
    if not mime_type:
        return DEFAULT_SEGMENT_EXTENSION

    normalized = mime_type.strip().lower()
    for prefix, extension in MIME_EXTENSIONS:
        if normalized.startswith(prefix):
            return extension

    return DEFAULT_SEGMENT_EXTENSION


def unique_path(path: Path) -> Path:
    """
    Return path, or the first "<stem> (n)<suffix>" sibling that is free.

    Never returns an existing file, so callers can't overwrite one.

    Example:
        unique_path(Path("Magic Window - 2025-01-15 at 14.30.22.webm"))
        # Returns "... 14.30.22 (2).webm" if the plain name is taken
    """
    if not path.exists():
        return path

    counter = 2
    while True:
        candidate = path.with_name(f"{path.stem} ({counter}){path.suffix}")
        if not candidate.exists():
            return candidate
        counter += 1


def format_size(bytes: int) -> str:
    """
    Format byte size as human-readable string.

    Args:
        bytes: Size in bytes

    Returns:
        Formatted string (e.g., "1.5 GB")

    Example:
        print(format_size(1_500_000_000))  # "1.40 GB"
    """
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if bytes < 1024.0:
            return f"{bytes:.2f} {unit}"
        bytes /= 1024.0
    return f"{bytes:.2f} PB"


def calculate_directory_size(directory: Path) -> int:
    """
    Calculate total size of all files in directory.

    Args:
        directory: Directory path

    Returns:
        Total size in bytes
    """
    total = 0
    try:
        for file_path in directory.rglob("*"):
            if file_path.is_file():
                total += file_path.stat().st_size
    except OSError as e:
        logger.warning(f"Error calculating directory size: {e}")

    return total
