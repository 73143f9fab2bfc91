"""Tests for the timestamp fallback chain."""

import io
import os
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import patch

from PIL import Image

from gallery_manifest.models.manifest import ResolvedTimestamp, TimestampSource, format_utc
from gallery_manifest.timestamps.exif import DATE_TIME
from gallery_manifest.timestamps.resolver import build_probes, first_available, resolve_timestamp

MTIME = datetime(2020, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def _write_image(path: Path, exif_date: str | None = None) -> Path:
    exif = Image.Exif()
    if exif_date is not None:
        exif[DATE_TIME] = exif_date
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), "teal").save(buffer, "JPEG", exif=exif)
    path.write_bytes(buffer.getvalue())
    os.utime(path, (MTIME.timestamp(), MTIME.timestamp()))
    return path


def test_first_available_takes_first_value():
    probes = [
        (TimestampSource.EXIF, lambda: None),
        (TimestampSource.MTIME, lambda: datetime(2021, 1, 1, tzinfo=timezone.utc)),
        (TimestampSource.FILENAME, lambda: datetime(1999, 1, 1, tzinfo=timezone.utc)),
    ]
    assert first_available(probes) == ResolvedTimestamp(datetime(2021, 1, 1, tzinfo=timezone.utc), TimestampSource.MTIME)


def test_first_available_skips_failing_probe():
    def broken():
        raise OSError("disk went away")

    probes = [(TimestampSource.EXIF, broken), (TimestampSource.FILENAME, lambda: datetime(2024, 9, 5, 12))]
    resolved = first_available(probes)
    assert resolved.source == TimestampSource.FILENAME
    assert resolved.taken_at == datetime(2024, 9, 5, 12).astimezone(timezone.utc)


def test_first_available_truncates_to_seconds():
    resolved = first_available([(TimestampSource.MTIME, lambda: datetime(2021, 1, 1, 0, 0, 0, 999999, tzinfo=timezone.utc))])
    assert resolved.taken_at == datetime(2021, 1, 1, tzinfo=timezone.utc)


def test_nothing_available():
    assert first_available([]) == ResolvedTimestamp.unresolved()
    assert first_available([(TimestampSource.EXIF, lambda: None)]).taken_at is None


def test_embedded_metadata_wins(tmp_path: Path):
    path = _write_image(tmp_path / "IMG_20240905_142231.jpg", "2021:05:04 03:02:01")
    resolved = resolve_timestamp(path)
    assert resolved.source == TimestampSource.EXIF
    assert format_utc(resolved.taken_at) == format_utc(datetime(2021, 5, 4, 3, 2, 1))


def test_mtime_wins_over_filename(tmp_path: Path):
    path = _write_image(tmp_path / "photo_20230601_090000.jpg")
    resolved = resolve_timestamp(path)
    assert resolved == ResolvedTimestamp(MTIME, TimestampSource.MTIME)


def test_filename_when_mtime_disabled(tmp_path: Path):
    path = _write_image(tmp_path / "photo_20230601_090000.jpg")
    resolved = resolve_timestamp(path, [TimestampSource.EXIF, TimestampSource.FILENAME])
    assert resolved.source == TimestampSource.FILENAME
    assert resolved.taken_at == datetime(2023, 6, 1, 9, 0, 0).astimezone(timezone.utc)


def test_filename_when_stat_fails(tmp_path: Path):
    path = _write_image(tmp_path / "2024-09-05.jpg")
    with patch("gallery_manifest.timestamps.resolver.read_mtime", return_value=None):
        resolved = resolve_timestamp(path)
    assert resolved.source == TimestampSource.FILENAME
    assert resolved.taken_at == datetime(2024, 9, 5, 12, 0, 0).astimezone(timezone.utc)


def test_unparseable_name_resolves_to_none(tmp_path: Path):
    path = _write_image(tmp_path / "holiday.jpg")
    with patch("gallery_manifest.timestamps.resolver.read_mtime", return_value=None):
        assert resolve_timestamp(path) == ResolvedTimestamp.unresolved()


def test_invalid_filename_date_never_resolves(tmp_path: Path):
    path = _write_image(tmp_path / "2024-13-40.jpg")
    assert resolve_timestamp(path, [TimestampSource.FILENAME]) == ResolvedTimestamp.unresolved()


def test_probe_order_is_fixed(tmp_path: Path):
    sources = [TimestampSource.FILENAME, TimestampSource.EXIF]
    assert [source for source, _ in build_probes(tmp_path / "x.jpg", sources)] == [
        TimestampSource.EXIF,
        TimestampSource.FILENAME,
    ]
