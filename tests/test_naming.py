"""Tests for storage key derivation."""

import pytest

from image_upload.core.naming import KeyNamer, parse_variant_dimensions


class TestKeyNamer:
    """Tests for KeyNamer."""

    def test_original_key(self):
        namer = KeyNamer.from_filename("photo.jpg", 1234567890)
        assert namer.original_key() == "photo_1234567890.jpg"

    def test_variant_key(self):
        namer = KeyNamer.from_filename("photo.jpg", 1234567890)
        assert namer.variant_key(800, 600) == "photo_800x600_1234567890.jpg"

    def test_extension_is_lower_cased(self):
        namer = KeyNamer.from_filename("Holiday.JPG", 42)
        assert namer.original_key() == "Holiday_42.jpg"
        assert namer.variant_key(10, 20) == "Holiday_10x20_42.jpg"

    def test_only_last_extension_is_stripped(self):
        namer = KeyNamer.from_filename("archive.v2.png", 7)
        assert namer.original_key() == "archive.v2_7.png"

    def test_filename_without_extension(self):
        namer = KeyNamer.from_filename("scan", 7)
        assert namer.original_key() == "scan_7"
        assert namer.variant_key(1, 2) == "scan_1x2_7"

    def test_dot_file_is_all_extension(self):
        namer = KeyNamer.from_filename(".png", 7)
        assert namer.original_key() == "_7.png"
        assert namer.variant_key(1, 2) == "_1x2_7.png"

    def test_trailing_dot(self):
        assert KeyNamer.from_filename("photo.", 7).original_key() == "photo_7."

    def test_keys_share_timestamp(self):
        namer = KeyNamer.from_filename("photo.png", 99)
        keys = [namer.original_key(), namer.variant_key(1, 1), namer.variant_key(2, 2)]
        assert all(key.endswith("_99.png") for key in keys)

    def test_default_timestamp_is_nanoseconds(self):
        namer = KeyNamer.from_filename("photo.jpg")
        # nanosecond epoch timestamps have 19 digits for the foreseeable future
        assert len(str(namer.timestamp_ns)) >= 19

    def test_duplicate_dimensions_collide(self):
        namer = KeyNamer.from_filename("photo.jpg", 5)
        assert namer.variant_key(100, 100) == namer.variant_key(100, 100)


class TestParseVariantDimensions:
    """Tests for parse_variant_dimensions."""

    @pytest.mark.parametrize(
        "key,expected",
        [
            ("photo_800x600_1234567890.jpg", (800, 600)),
            ("my_holiday_photo_40x30_1.png", (40, 30)),
            ("scan_1x2_7", (1, 2)),
        ],
    )
    def test_variant_keys(self, key, expected):
        assert parse_variant_dimensions(key) == expected

    @pytest.mark.parametrize(
        "key",
        [
            "photo_1234567890.jpg",
            "photo.jpg",
            "photo_0x600_123.jpg",
            "800x600.jpg",
            "",
        ],
    )
    def test_non_variant_keys(self, key):
        assert parse_variant_dimensions(key) is None
