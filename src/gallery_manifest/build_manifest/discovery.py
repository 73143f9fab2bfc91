"""Recursive discovery of media files below the gallery root."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Set, Tuple

from gallery_manifest.models.manifest import MEDIA_EXTENSIONS
from gallery_manifest.utils.errors import DiscoveryError

logger = logging.getLogger(__name__)


@dataclass
class Discovery:
    """Media files found by a walk, plus any subtrees it had to skip."""
    files: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)


def is_media_file(name: str) -> bool:
    """Check whether a file name has one of the gallery extensions."""
    return os.path.splitext(name)[1].lower() in MEDIA_EXTENSIONS


def _dir_key(path: Path) -> Tuple[int, int]:
    st = os.stat(path)
    return st.st_dev, st.st_ino


def walk_media_files(
    root: Path,
    follow_symlinks: bool = False,
    skip_unreadable: bool = False,
) -> Discovery:
    """Walk ``root`` and collect every media file, sorted by path.

    Raises:
        DiscoveryError: If ``root`` is not a listable directory, if a
            subdirectory cannot be listed (unless ``skip_unreadable``), or if
            following symlinks leads back into a directory being walked.
    """
    if not root.is_dir():
        raise DiscoveryError(f"Media root is not a directory: {root}")

    result = Discovery()

    def walk(directory: Path, ancestors: Set[Tuple[int, int]]) -> None:
        try:
            key = _dir_key(directory)
            with os.scandir(directory) as it:
                entries = list(it)
        except OSError as e:
            if directory == root or not skip_unreadable:
                raise DiscoveryError(f"Cannot list directory {directory}: {e}") from e
            logger.warning(f"Skipping unreadable directory {directory}: {e}")
            result.skipped.append(directory)
            return

        if key in ancestors:
            raise DiscoveryError(f"Symlink loop detected at {directory}")
        ancestors = ancestors | {key}

        for entry in entries:
            path = Path(entry.path)
            if entry.is_dir(follow_symlinks=follow_symlinks):
                walk(path, ancestors)
            elif is_media_file(entry.name) and entry.is_file():
                result.files.append(path)

    walk(root, set())
    result.files.sort(key=str)
    logger.info(f"Discovered {len(result.files)} media files under {root}")
    return result


def discover_media_files(
    root: Path,
    follow_symlinks: bool = False,
    skip_unreadable: bool = False,
) -> List[Path]:
    """Return the sorted list of media files below ``root``."""
    return walk_media_files(root, follow_symlinks, skip_unreadable).files
