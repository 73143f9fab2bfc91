"""Pick one timestamp per file from an ordered chain of sources.

Each source is a zero-argument probe returning a datetime or None. The chain
is walked in priority order and the first probe with a value wins; its
source tag is kept alongside the value. Nothing is blended or averaged.
"""

import logging
from datetime import datetime
from functools import partial
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from gallery_manifest.models.manifest import (
    SOURCE_PRIORITY,
    ResolvedTimestamp,
    TimestampSource,
    to_utc,
)
from gallery_manifest.timestamps.exif import probe_embedded
from gallery_manifest.timestamps.filename import parse_filename_datetime
from gallery_manifest.timestamps.filesystem import read_mtime

logger = logging.getLogger(__name__)

Probe = Callable[[], Optional[datetime]]


def first_available(probes: Iterable[Tuple[TimestampSource, Probe]]) -> ResolvedTimestamp:
    """Return the first probe result that is not None, tagged with its source.

    A probe that raises is treated as having no value.
    """
    for source, probe in probes:
        try:
            value = probe()
            if value is not None:
                return ResolvedTimestamp(taken_at=to_utc(value), source=source)
        except Exception as e:
            logger.debug(f"{source.value} probe failed: {e!r}")
    return ResolvedTimestamp.unresolved()


def _probe_filename(path: Path) -> Optional[datetime]:
    return parse_filename_datetime(path.name)


def build_probes(path: Path, sources: Sequence[TimestampSource] = SOURCE_PRIORITY) -> List[Tuple[TimestampSource, Probe]]:
    """Build the probe chain for ``path``, keeping the fixed priority order."""
    readers = {
        TimestampSource.EXIF: probe_embedded,
        TimestampSource.MTIME: read_mtime,
        TimestampSource.FILENAME: _probe_filename,
    }
    return [(source, partial(readers[source], path)) for source in SOURCE_PRIORITY if source in sources]


def resolve_timestamp(path: Path, sources: Sequence[TimestampSource] = SOURCE_PRIORITY) -> ResolvedTimestamp:
    """Resolve the capture time of one media file."""
    resolved = first_available(build_probes(path, sources))
    logger.debug(f"{path.name}: {resolved.source.value} {resolved.taken_at}")
    return resolved
