"""Tests for Pillow metadata extraction."""
import os
from datetime import datetime
from fractions import Fraction
from pathlib import Path

import pytest

from photo_organizer.engines.hash_engine import ContentHashEngine
from photo_organizer.engines.metadata import (
    EXIF_IFD,
    GPS_IFD,
    PillowMetadataExtractor,
    dms_to_decimal,
    parse_exif_datetime,
)
from .fixtures import make_jpeg


class FakeExif(dict):
    """Minimal stand-in for PIL.Image.Exif with nested IFDs."""

    def __init__(self, base=None, ifds=None):
        super().__init__(base or {})
        self._ifds = ifds or {}

    def get_ifd(self, tag):
        return self._ifds.get(tag, {})


class TestParseExifDatetime:
    """Tests for EXIF datetime parsing."""

    def test_exif_format(self):
        assert parse_exif_datetime("2023:07:14 09:30:00") == datetime(2023, 7, 14, 9, 30, 0)

    def test_dash_format(self):
        assert parse_exif_datetime("2023-07-14 09:30:00") == datetime(2023, 7, 14, 9, 30, 0)

    def test_bytes_with_nul(self):
        assert parse_exif_datetime(b"2023:07:14 09:30:00\x00") == datetime(2023, 7, 14, 9, 30, 0)

    def test_invalid(self):
        assert parse_exif_datetime("0000:00:00 00:00:00") is None
        assert parse_exif_datetime("yesterday") is None
        assert parse_exif_datetime(None) is None


class TestDmsToDecimal:
    """Tests for GPS coordinate conversion."""

    def test_north(self):
        value = dms_to_decimal((38, 42, 36), "N")
        assert value == pytest.approx(38.71)

    def test_south_and_west_negative(self):
        assert dms_to_decimal((38, 42, 36), "S") == pytest.approx(-38.71)
        assert dms_to_decimal((9, 8, 24), b"W") == pytest.approx(-9.14)

    def test_rationals(self):
        value = dms_to_decimal((Fraction(38, 1), Fraction(42, 1), Fraction(3600, 100)), "N")
        assert value == pytest.approx(38.71)

    def test_malformed(self):
        assert dms_to_decimal((38, 42), "N") is None
        assert dms_to_decimal("garbage", "N") is None

    def test_nan(self):
        assert dms_to_decimal((float("nan"), 0, 0), "N") is None


class TestExifReading:
    """Tests for reading tags from an EXIF mapping."""

    def test_date_time_original_wins(self):
        exif = FakeExif(
            base={306: "2020:01:01 00:00:00"},
            ifds={EXIF_IFD: {36867: "2023:07:14 09:30:00", 36868: "2022:01:01 00:00:00"}},
        )
        assert PillowMetadataExtractor._extract_datetime(exif) == datetime(2023, 7, 14, 9, 30, 0)

    def test_falls_back_to_digitized(self):
        exif = FakeExif(ifds={EXIF_IFD: {36868: "2022:03:04 05:06:07"}})
        assert PillowMetadataExtractor._extract_datetime(exif) == datetime(2022, 3, 4, 5, 6, 7)

    def test_falls_back_to_ifd0(self):
        exif = FakeExif(base={306: "2020:01:01 00:00:00"})
        assert PillowMetadataExtractor._extract_datetime(exif) == datetime(2020, 1, 1)

    def test_no_date(self):
        assert PillowMetadataExtractor._extract_datetime(FakeExif()) is None

    def test_gps(self):
        exif = FakeExif(ifds={GPS_IFD: {1: "N", 2: (38, 42, 36), 3: "W", 4: (9, 8, 24)}})

        lat, lon = PillowMetadataExtractor._extract_gps(exif)

        assert lat == pytest.approx(38.71)
        assert lon == pytest.approx(-9.14)

    def test_gps_missing(self):
        assert PillowMetadataExtractor._extract_gps(FakeExif()) is None
        exif = FakeExif(ifds={GPS_IFD: {1: "N", 2: (38, 42, 36)}})
        assert PillowMetadataExtractor._extract_gps(exif) is None

    def test_gps_zero_is_absent(self):
        """Test a (0, 0) fix is treated as no location."""
        exif = FakeExif(ifds={GPS_IFD: {1: "N", 2: (0, 0, 0), 3: "E", 4: (0, 0, 0)}})
        assert PillowMetadataExtractor._extract_gps(exif) is None


class TestPillowMetadataExtractor:
    """Tests for extraction from real files."""

    @pytest.fixture
    def extractor(self):
        return PillowMetadataExtractor(ContentHashEngine())

    def test_exif_date(self, extractor, tmp_path: Path):
        path = make_jpeg(tmp_path / "photo.jpg", date_taken=datetime(2023, 7, 14, 9, 30, 0))

        result = extractor.extract(path)

        assert result.is_valid
        assert result.record.date_taken == datetime(2023, 7, 14, 9, 30, 0)
        assert result.record.coordinates is None
        assert result.record.extension == ".jpg"
        assert result.record.fingerprint == ContentHashEngine().compute_hash(path)

    def test_mtime_fallback(self, extractor, tmp_path: Path):
        """Test files without EXIF use the modification time."""
        path = make_jpeg(tmp_path / "plain.jpg")
        stamp = datetime(2019, 5, 17, 8, 0, 0).timestamp()
        os.utime(path, (stamp, stamp))

        result = extractor.extract(path)

        assert result.is_valid
        assert result.record.date_taken == datetime(2019, 5, 17, 8, 0, 0)

    def test_png_without_exif(self, extractor, tmp_path: Path):
        from PIL import Image

        path = tmp_path / "image.png"
        Image.new("RGB", (8, 8), color="blue").save(path)

        result = extractor.extract(path)

        assert result.is_valid
        assert result.record.extension == ".png"

    def test_corrupt_image(self, extractor, tmp_path: Path):
        """Test bytes Pillow cannot identify give an error result."""
        path = tmp_path / "broken.jpg"
        path.write_bytes(b"this is not an image")

        result = extractor.extract(path)

        assert result.is_valid is False
        assert result.record is None
        assert result.error

    def test_missing_file(self, extractor, tmp_path: Path):
        result = extractor.extract(tmp_path / "missing.jpg")

        assert result.is_valid is False
        assert "Cannot read file" in result.error
