"""Tests for file-name date inference."""

from datetime import datetime

import pytest

from gallery_manifest.timestamps.filename import parse_filename_datetime


@pytest.mark.parametrize("name, expected", [
    ("IMG_20240905_142231.jpg", datetime(2024, 9, 5, 14, 22, 31)),
    ("2024-09-05 14:22:31.jpg", datetime(2024, 9, 5, 14, 22, 31)),
    ("2024-09-05T14-22-31.png", datetime(2024, 9, 5, 14, 22, 31)),
    ("20240905142231.webp", datetime(2024, 9, 5, 14, 22, 31)),
    ("PXL_20230601_090000123.jpg", datetime(2023, 6, 1, 9, 0, 0)),
])
def test_full_datetime(name, expected):
    assert parse_filename_datetime(name) == expected


def test_full_datetime_wins_over_embedded_compact_date():
    """The bare YYYYMMDD inside a full timestamp must not default to noon."""
    assert parse_filename_datetime("IMG_20240905_142231.jpg").hour == 14


@pytest.mark.parametrize("name", [
    "2024-09-05.jpg",
    "2024_09_05.jpg",
    "scan-20240905.jpg",
    "IMG-20240905-WA0001.jpg",
    "2024-09-05 14.22.31.jpg",
])
def test_date_only_defaults_to_noon(name):
    assert parse_filename_datetime(name) == datetime(2024, 9, 5, 12, 0, 0)


@pytest.mark.parametrize("name", [
    "2024-13-40.jpg",
    "20241332.jpg",
    "2023-02-29.jpg",
    "IMG_20241305_142231.jpg",
])
def test_invalid_calendar_dates_are_rejected(name):
    assert parse_filename_datetime(name) is None


def test_invalid_time_falls_back_to_date():
    assert parse_filename_datetime("IMG_20240905_256199.jpg") == datetime(2024, 9, 5, 12, 0, 0)


@pytest.mark.parametrize("name", [
    "holiday.jpg",
    "1999-12-31.jpg",
    "2100-01-01.jpg",
    "120240905.jpg",
    "DSC01234.jpg",
])
def test_no_match(name):
    assert parse_filename_datetime(name) is None
