"""Embedded capture time, read from EXIF with Pillow.

Best effort only: a file without EXIF, with garbage in its date fields, or
that Pillow cannot identify at all simply has no embedded timestamp.
"""

import io
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Mapping, Optional

from PIL import Image, UnidentifiedImageError

from gallery_manifest.models.manifest import to_utc

logger = logging.getLogger(__name__)

EXIF_IFD = 0x8769

DATE_TIME_ORIGINAL = 36867
DATE_TIME_DIGITIZED = 36868
DATE_TIME = 306

# Capture time first, then creation, then last modification by software.
CAPTURE_TAGS = (DATE_TIME_ORIGINAL, DATE_TIME_DIGITIZED, DATE_TIME)

EXIF_DATE_FORMAT = "%Y:%m:%d %H:%M:%S"


def parse_exif_datetime(value: Any) -> Optional[datetime]:
    """Parse an EXIF date string (``YYYY:MM:DD HH:MM:SS``), or return None."""
    if isinstance(value, bytes):
        value = value.decode("ascii", errors="ignore")
    if not isinstance(value, str):
        return None
    text = value.strip().strip("\x00").strip()
    if not text:
        return None
    try:
        return datetime.strptime(text[:19], EXIF_DATE_FORMAT)
    except ValueError:
        pass
    # Some writers use ISO separators instead of the EXIF colons.
    try:
        return datetime.fromisoformat(text.replace("/", "-"))
    except ValueError:
        return None


def pick_capture_datetime(tags: Mapping[int, Any]) -> Optional[datetime]:
    """Return the first valid date among CAPTURE_TAGS, in priority order."""
    for tag in CAPTURE_TAGS:
        parsed = parse_exif_datetime(tags.get(tag))
        if parsed is not None:
            return parsed
    return None


def read_exif_tags(data: bytes) -> dict:
    """Flatten IFD0 and the Exif sub-IFD of an image into one tag mapping."""
    with Image.open(io.BytesIO(data)) as im:
        exif = im.getexif()
        tags = dict(exif)
        tags.update(exif.get_ifd(EXIF_IFD))
    return tags


def read_embedded_datetime(data: bytes) -> Optional[datetime]:
    """Return the embedded capture time of an image, converted to UTC."""
    try:
        tags = read_exif_tags(data)
    except (UnidentifiedImageError, OSError, ValueError, SyntaxError) as e:
        logger.debug(f"No readable EXIF: {e}")
        return None

    taken = pick_capture_datetime(tags)
    if taken is None:
        return None
    try:
        return to_utc(taken)
    except (OverflowError, OSError, ValueError) as e:
        logger.debug(f"EXIF date {taken} out of range: {e}")
        return None


def probe_embedded(path: Path) -> Optional[datetime]:
    """Read ``path`` fully and return its embedded capture time, if any."""
    try:
        data = path.read_bytes()
    except OSError as e:
        logger.debug(f"Could not read {path}: {e}")
        return None
    return read_embedded_datetime(data)
