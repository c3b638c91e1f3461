"""Metadata extraction with Pillow."""
from __future__ import annotations

import logging
import math
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from PIL import Image, ImageFile
from pillow_heif import register_heif_opener

from ..core.models import ExtractionResult, PhotoRecord
from ..core.protocols import HashEngine
from .hash_engine import ContentHashEngine


logger = logging.getLogger(__name__)

register_heif_opener()

# Allow loading truncated images
ImageFile.LOAD_TRUNCATED_IMAGES = True

EXIF_IFD = 0x8769
GPS_IFD = 0x8825

# DateTimeOriginal, DateTimeDigitized (Exif IFD), then DateTime (IFD0)
EXIF_DATE_TAGS = (36867, 36868)
IFD0_DATE_TAG = 306

GPS_LATITUDE_REF = 1
GPS_LATITUDE = 2
GPS_LONGITUDE_REF = 3
GPS_LONGITUDE = 4


def parse_exif_datetime(value: Any) -> Optional[datetime]:
    """Parse an EXIF datetime string."""
    if isinstance(value, bytes):
        value = value.decode(errors="ignore")
    if not isinstance(value, str):
        return None
    value = value.replace("\x00", "").strip()
    formats = [
        "%Y:%m:%d %H:%M:%S",
        "%Y-%m-%d %H:%M:%S",
        "%Y/%m/%d %H:%M:%S",
    ]
    for fmt in formats:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def dms_to_decimal(dms: Any, ref: Any) -> Optional[float]:
    """Convert EXIF degrees/minutes/seconds plus a hemisphere ref to degrees."""
    try:
        degrees, minutes, seconds = (float(part) for part in dms)
    except (TypeError, ValueError, ZeroDivisionError):
        return None
    value = degrees + minutes / 60.0 + seconds / 3600.0
    if math.isnan(value):
        return None
    if isinstance(ref, bytes):
        ref = ref.decode(errors="ignore")
    if isinstance(ref, str) and ref.strip().upper() in ("S", "W"):
        value = -value
    return value


class PillowMetadataExtractor:
    """Reads capture date, GPS position and content fingerprint.

    Date priority:
    1. EXIF DateTimeOriginal
    2. EXIF DateTimeDigitized
    3. EXIF DateTime
    4. File modification time

    A file that cannot be read or is not an image Pillow can identify
    yields an invalid result. A damaged EXIF block alone does not.
    """

    def __init__(self, hash_engine: Optional[HashEngine] = None):
        self._hash_engine = hash_engine or ContentHashEngine()

    def extract(self, path: Path) -> ExtractionResult:
        try:
            fingerprint = self._hash_engine.compute_hash(path)
        except OSError as e:
            return ExtractionResult(path=path, error=f"Cannot read file: {e}")

        try:
            with Image.open(path) as img:
                date_taken, coordinates = self._read_exif(img)
        except Exception as e:
            return ExtractionResult(path=path, error=f"Unreadable image metadata: {e}")

        if date_taken is None:
            try:
                date_taken = datetime.fromtimestamp(path.stat().st_mtime)
            except OSError as e:
                return ExtractionResult(path=path, error=f"Cannot stat file: {e}")

        latitude, longitude = coordinates if coordinates else (None, None)
        return ExtractionResult(
            path=path,
            record=PhotoRecord(
                source_path=path,
                date_taken=date_taken,
                fingerprint=fingerprint,
                latitude=latitude,
                longitude=longitude,
            ),
        )

    def _read_exif(self, img: Image.Image) -> tuple[Optional[datetime], Optional[tuple[float, float]]]:
        try:
            exif = img.getexif()
        except Exception as e:
            logger.debug("Ignoring broken EXIF block: %s", e)
            return None, None
        if not exif:
            return None, None
        return self._extract_datetime(exif), self._extract_gps(exif)

    @staticmethod
    def _extract_datetime(exif: Image.Exif) -> Optional[datetime]:
        try:
            exif_ifd = exif.get_ifd(EXIF_IFD)
        except Exception:
            exif_ifd = {}

        for tag_id in EXIF_DATE_TAGS:
            if tag_id in exif_ifd:
                dt = parse_exif_datetime(exif_ifd[tag_id])
                if dt:
                    return dt

        if IFD0_DATE_TAG in exif:
            return parse_exif_datetime(exif[IFD0_DATE_TAG])
        return None

    @staticmethod
    def _extract_gps(exif: Image.Exif) -> Optional[tuple[float, float]]:
        try:
            gps = exif.get_ifd(GPS_IFD)
        except Exception:
            return None
        if not gps or GPS_LATITUDE not in gps or GPS_LONGITUDE not in gps:
            return None

        latitude = dms_to_decimal(gps[GPS_LATITUDE], gps.get(GPS_LATITUDE_REF))
        longitude = dms_to_decimal(gps[GPS_LONGITUDE], gps.get(GPS_LONGITUDE_REF))
        if latitude is None or longitude is None:
            return None

        # (0, 0) is what many cameras write when they have no fix
        if latitude == 0 and longitude == 0:
            return None
        return latitude, longitude
