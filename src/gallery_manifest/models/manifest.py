"""Shared models for the gallery manifest and its build configuration."""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_serializer, field_validator

MEDIA_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".webp", ".avif"})

UTC_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


class TimestampSource(str, Enum):
    """Where a gallery entry's timestamp came from."""
    EXIF = "exif"
    MTIME = "mtime"
    FILENAME = "filename"
    NONE = "none"


# Resolution order; the fallback chain never reorders these.
SOURCE_PRIORITY: Tuple[TimestampSource, ...] = (
    TimestampSource.EXIF,
    TimestampSource.MTIME,
    TimestampSource.FILENAME,
)


class OutputFormat(str, Enum):
    """Shape of the written manifest."""
    RECORDS = "records"
    URLS = "urls"


def to_utc(value: datetime) -> datetime:
    """Convert ``value`` to UTC with whole-second precision.

    Naive values are local wall-clock time and are shifted by the local
    offset in effect at that instant.
    """
    return value.astimezone(timezone.utc).replace(microsecond=0)


def format_utc(value: datetime) -> str:
    """Render ``value`` as ISO-8601 UTC, e.g. ``2024-09-05T14:22:31Z``."""
    return to_utc(value).strftime(UTC_FORMAT)


@dataclass(frozen=True)
class ResolvedTimestamp:
    """A file's capture time (UTC) and the source that produced it."""
    taken_at: Optional[datetime]
    source: TimestampSource

    @classmethod
    def unresolved(cls) -> "ResolvedTimestamp":
        return cls(taken_at=None, source=TimestampSource.NONE)


class GalleryEntry(BaseModel):
    """One image in the manifest."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    src: str
    taken_at: Optional[datetime] = Field(None, alias="takenAt")
    taken_at_source: TimestampSource = Field(TimestampSource.NONE, alias="takenAtSource")

    @field_serializer("taken_at")
    def _serialize_taken_at(self, value: Optional[datetime]) -> Optional[str]:
        return format_utc(value) if value is not None else None


class Manifest(RootModel[List[GalleryEntry]]):
    """Ordered gallery entries, newest first."""


class UrlManifest(RootModel[List[str]]):
    """Legacy manifest: public URLs only, ascending."""


class GalleryConfig(BaseModel):
    """Everything a single manifest build needs."""

    root: Path = Field(..., description="Directory scanned for media files")
    output: Path = Field(..., description="Path of the JSON manifest to write")
    base_url: str = Field(..., min_length=1, description="Public URL prefix of the media root")
    concurrency: int = Field(8, gt=0, description="Maximum timestamp resolutions in flight")
    output_format: OutputFormat = OutputFormat.RECORDS
    sources: Tuple[TimestampSource, ...] = SOURCE_PRIORITY
    follow_symlinks: bool = False
    skip_unreadable: bool = False

    @field_validator("root", "output")
    @classmethod
    def _absolute(cls, value: Path) -> Path:
        return value.expanduser().resolve()

    @field_validator("sources")
    @classmethod
    def _priority_order(cls, value: Tuple[TimestampSource, ...]) -> Tuple[TimestampSource, ...]:
        if TimestampSource.NONE in value:
            raise ValueError("'none' is not a timestamp source")
        return tuple(source for source in SOURCE_PRIORITY if source in value)
