"""Filesystem modification time fallback."""

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


def read_mtime(path: Path) -> Optional[datetime]:
    """Return the last-modified time of ``path`` in UTC, or None if stat fails."""
    try:
        st = os.stat(path)
    except OSError as e:
        logger.debug(f"stat failed for {path}: {e}")
        return None
    return datetime.fromtimestamp(st.st_mtime, tz=timezone.utc).replace(microsecond=0)
