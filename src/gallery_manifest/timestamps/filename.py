"""Infer a capture date from a bare file name.

Camera apps, phones and messengers encode the capture time in the file name
(``IMG_20240905_142231.jpg``, ``PXL_20230601_090000123.jpg``,
``2024-09-05.jpg``). Patterns are tried in a fixed order and the first one
that yields a real calendar date wins:

1. full date and time, ``YYYY[-_]MM[-_]DD[ T_:-]HH[-_:]MM[-_:]SS``
2. compact date, ``YYYYMMDD``
3. separated date, ``YYYY-MM-DD`` or ``YYYY_MM_DD``

Date-only matches are placed at local noon so that the UTC conversion done
later cannot push them onto the previous or next calendar day.
"""

import logging
import re
from datetime import datetime
from typing import Iterator, List, Optional, Pattern, Tuple

logger = logging.getLogger(__name__)

NOON = 12

_YEAR = r"(?P<year>20\d{2})"

FULL_DATETIME: Pattern[str] = re.compile(
    r"(?<!\d)" + _YEAR +
    r"[-_]?(?P<month>\d{2})[-_]?(?P<day>\d{2})"
    r"[-_: T]?(?P<hour>\d{2})[-_:]?(?P<minute>\d{2})[-_:]?(?P<second>\d{2})"
)
COMPACT_DATE: Pattern[str] = re.compile(
    r"(?<!\d)" + _YEAR + r"(?P<month>\d{2})(?P<day>\d{2})(?!\d)"
)
SEPARATED_DATE: Pattern[str] = re.compile(
    r"(?<!\d)" + _YEAR + r"[-_](?P<month>\d{2})[-_](?P<day>\d{2})(?!\d)"
)

# (pattern, has time of day)
FILENAME_PATTERNS: List[Tuple[Pattern[str], bool]] = [
    (FULL_DATETIME, True),
    (COMPACT_DATE, False),
    (SEPARATED_DATE, False),
]


def _candidates(name: str) -> Iterator[datetime]:
    for pattern, has_time in FILENAME_PATTERNS:
        for match in pattern.finditer(name):
            parts = {key: int(value) for key, value in match.groupdict().items()}
            if not has_time:
                parts.update(hour=NOON, minute=0, second=0)
            try:
                yield datetime(**parts)
            except ValueError:
                logger.debug(f"Ignoring impossible date {match.group(0)!r} in {name!r}")


def parse_filename_datetime(name: str) -> Optional[datetime]:
    """Return the naive local datetime encoded in ``name``, or None.

    Only the bare file name is inspected; pass ``path.name``, not a path.
    """
    return next(_candidates(name), None)
