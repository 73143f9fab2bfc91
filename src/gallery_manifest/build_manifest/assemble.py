"""Order gallery entries and write the manifest to disk."""

import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Tuple

from gallery_manifest.models.manifest import GalleryEntry, Manifest, UrlManifest
from gallery_manifest.utils.errors import SerializationError

logger = logging.getLogger(__name__)

_NO_TIME = datetime.min.replace(tzinfo=timezone.utc)


def _newest_first_key(entry: GalleryEntry) -> Tuple[bool, datetime, str]:
    # With reverse=True: timestamped before untimestamped, newest first,
    # untimestamped by src descending. Timestamped ties compare equal so the
    # stable sort keeps their input order.
    if entry.taken_at is not None:
        return True, entry.taken_at, ""
    return False, _NO_TIME, entry.src


def sort_entries(entries: Iterable[GalleryEntry]) -> List[GalleryEntry]:
    """Return the entries in manifest order (newest first)."""
    return sorted(entries, key=_newest_first_key, reverse=True)


def render_records(entries: Iterable[GalleryEntry]) -> str:
    """Serialize entries, already in manifest order, as indented JSON."""
    return Manifest(list(entries)).model_dump_json(indent=2, by_alias=True) + "\n"


def render_urls(urls: Iterable[str]) -> str:
    """Serialize the legacy URL-only manifest, ascending."""
    return UrlManifest(sorted(urls)).model_dump_json(indent=2) + "\n"


def write_atomic(text: str, output: Path) -> None:
    """Write ``text`` to ``output`` through a temporary file and a rename.

    A failure leaves any previous file at ``output`` untouched.

    Raises:
        SerializationError: If the file cannot be written.
    """
    tmp_name = None
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=output.parent, prefix=f".{output.name}.", suffix=".tmp", delete=False,
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(text)
            tmp.flush()
            os.fsync(tmp.fileno())
        # NamedTemporaryFile is owner-only; the manifest is served publicly.
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, output)
    except OSError as e:
        if tmp_name is not None:
            Path(tmp_name).unlink(missing_ok=True)
        raise SerializationError(f"Cannot write manifest {output}: {e}") from e
    logger.info(f"Wrote {len(text):,} bytes to {output}")
