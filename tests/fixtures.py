"""Test fixtures for organizer tests.

Helpers that write real image files to disk, plus in-memory stand-ins
for the metadata extractor and the remote place resolver.
"""
from __future__ import annotations

import shutil
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from PIL import Image

from photo_organizer.core.models import (
    UNKNOWN_LOCATION,
    ExtractionResult,
    PhotoRecord,
)
from photo_organizer.engines.hash_engine import ContentHashEngine


EXIF_DATETIME_TAG = 306


def make_jpeg(
    path: Path,
    color: tuple[int, int, int] = (200, 30, 30),
    date_taken: Optional[datetime] = None,
    size: tuple[int, int] = (32, 32),
) -> Path:
    """Write a small JPEG, optionally with an EXIF DateTime tag."""
    path.parent.mkdir(parents=True, exist_ok=True)
    img = Image.new("RGB", size, color=color)
    if date_taken is not None:
        exif = Image.Exif()
        exif[EXIF_DATETIME_TAG] = date_taken.strftime("%Y:%m:%d %H:%M:%S")
        img.save(path, "JPEG", exif=exif.tobytes())
    else:
        img.save(path, "JPEG")
    return path


def duplicate_file(source: Path, target: Path) -> Path:
    """Byte-identical copy of ``source`` under a different name."""
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source, target)
    return target


@dataclass
class FakePhoto:
    """What the fake extractor reports for one file name."""
    date_taken: datetime = field(default_factory=lambda: datetime(2023, 6, 1, 12, 0, 0))
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class FakeExtractor:
    """Extractor driven by a table of file names.

    Fingerprints are real content hashes, so duplicates are decided by
    file bytes exactly as in production. Names in ``broken`` fail.
    """

    def __init__(
        self,
        photos: Optional[dict[str, FakePhoto]] = None,
        broken: frozenset[str] = frozenset(),
    ):
        self._photos = photos or {}
        self._broken = broken
        self._hash_engine = ContentHashEngine()

    def extract(self, path: Path) -> ExtractionResult:
        if path.name in self._broken:
            return ExtractionResult(path=path, error="corrupt metadata")
        photo = self._photos.get(path.name, FakePhoto())
        return ExtractionResult(
            path=path,
            record=PhotoRecord(
                source_path=path,
                date_taken=photo.date_taken,
                fingerprint=self._hash_engine.compute_hash(path),
                latitude=photo.latitude,
                longitude=photo.longitude,
            ),
        )


class CountingResolver:
    """Place resolver that records every call.

    Args:
        name_for: Maps (lat, lon) to a place name.
        delay: Seconds to block per call, to widen race windows.
    """

    def __init__(
        self,
        name_for: Optional[Callable[[float, float], str]] = None,
        delay: float = 0.0,
    ):
        self._name_for = name_for or (lambda lat, lon: "Lisbon")
        self._delay = delay
        self._lock = threading.Lock()
        self.calls: list[tuple[float, float]] = []

    def fetch_place_name(self, latitude: float, longitude: float) -> str:
        with self._lock:
            self.calls.append((latitude, longitude))
        if self._delay:
            time.sleep(self._delay)
        return self._name_for(latitude, longitude)


class UnknownResolver(CountingResolver):
    """Resolver for which every lookup fails."""

    def __init__(self):
        super().__init__(name_for=lambda lat, lon: UNKNOWN_LOCATION)
