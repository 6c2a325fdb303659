"""
Recording Utilities

Shared utility functions for recording operations.
Extracted here to follow DRY (Don't Repeat Yourself) principle.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional

from config.settings import (
    DEFAULT_SEGMENT_EXTENSION,
    OUTPUT_LABEL,
    OUTPUT_MONTH_FORMAT,
    OUTPUT_TIMESTAMP_FORMAT,
)
from core.errors import ResourceError
from storage.utils.path_utils import ensure_directory, unique_path

logger = logging.getLogger(__name__)


def generate_output_path(
    save_root: Path,
    label: str = OUTPUT_LABEL,
    extension: str = DEFAULT_SEGMENT_EXTENSION,
    when: Optional[datetime] = None,
    create_dirs: bool = True,
) -> Path:
    """
    Generate the path a finished recording is saved to.

    Layout: <save_root>/<label>/<YYYY-MM>/<label> - <YYYY-MM-DD at HH.MM.SS>.<ext>

    If a file with that name already exists (two recordings finishing in the
    same second), " (2)", " (3)", ... is appended to the name. Existing files
    are never overwritten.

    Args:
        save_root: Configured save folder
        label: Folder name and filename prefix
        extension: File extension without dot
        when: Completion time (default: now)
        create_dirs: Create the month folder if missing

    Returns:
        Output file path that doesn't exist yet

    Raises:
        ResourceError: If the month folder can't be created

    Example:
        path = generate_output_path(Path("/home/me/Videos"), extension="webm")
        # /home/me/Videos/Magic Window/2025-01/Magic Window - 2025-01-15 at 14.30.22.webm
    """
    when = when or datetime.now()
    month_dir = Path(save_root) / label / when.strftime(OUTPUT_MONTH_FORMAT)

    if create_dirs and not ensure_directory(month_dir):
        raise ResourceError(f"Cannot create output directory: {month_dir}")

    filename = f"{label} - {when.strftime(OUTPUT_TIMESTAMP_FORMAT)}.{extension}"
    return unique_path(month_dir / filename)


def escape_manifest_path(path: Path) -> str:
    """
    Quote a path for an FFmpeg concat manifest line.

    Single quotes can't appear inside a quoted string, so each one closes
    the string, adds an escaped quote, and reopens it.

    Example:
        escape_manifest_path(Path("/tmp/it's.webm"))
        # "'/tmp/it'\\''s.webm'"
    """
    return "'" + str(path).replace("'", "'\\''") + "'"


def write_concat_manifest(paths: Iterable[Path], manifest_file: Path) -> Path:
    """
    Write an FFmpeg concat demuxer manifest, one "file" line per input.

    Args:
        paths: Segment paths in join order
        manifest_file: Where to write the list

    Returns:
        manifest_file
    """
    lines = [f"file {escape_manifest_path(Path(p).absolute())}\n" for p in paths]

    with open(manifest_file, "w", encoding="utf-8") as f:
        f.writelines(lines)

    logger.debug(f"Concat manifest written: {manifest_file} ({len(lines)} entries)")
    return manifest_file


def read_concat_manifest(manifest_file: Path) -> List[Path]:
    """
    Parse a manifest written by write_concat_manifest().

    Returns:
        Paths in manifest order
    """
    paths = []
    with open(manifest_file, encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line.startswith("file "):
                continue

            quoted = line[len("file "):]
            if quoted.startswith("'") and quoted.endswith("'"):
                quoted = quoted[1:-1]
            paths.append(Path(quoted.replace("'\\''", "'")))

    return paths
