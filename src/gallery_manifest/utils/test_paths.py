"""Tests for public URL mapping."""

import os
from pathlib import Path

import pytest

from gallery_manifest.utils.paths import public_url


@pytest.mark.parametrize("base_url, expected", [
    ("./images", "./images/2024/trip/a.jpg"),
    ("/media/", "/media/2024/trip/a.jpg"),
    ("https://cdn.example.com/g//", "https://cdn.example.com/g/2024/trip/a.jpg"),
    ("/", "/2024/trip/a.jpg"),
])
def test_public_url(base_url, expected):
    root = Path("/srv/site/images")
    assert public_url(root / "2024" / "trip" / "a.jpg", root, base_url) == expected


def test_names_are_not_encoded():
    root = Path("/srv/images")
    assert public_url(root / "my photo #1.jpg", root, "/img") == "/img/my photo #1.jpg"


def test_outside_root():
    with pytest.raises(ValueError):
        public_url(Path("/etc/passwd.jpg"), Path("/srv/images"), "/img")


def test_undecodable_name_is_replaced():
    root = Path("/srv/images")
    name = os.fsdecode(b"bad\xff.jpg")
    assert public_url(root / name, root, "/img") == "/img/bad\ufffd.jpg"
