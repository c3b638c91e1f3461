"""Domain models - immutable data classes."""
from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional


UNKNOWN_LOCATION = "Unknown Location"


class ProcessingAction(Enum):
    """What happened to a file."""
    COPIED = "copied"
    DUPLICATE = "duplicate"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class PhotoRecord:
    """Metadata for one source photo."""
    source_path: Path
    date_taken: datetime
    fingerprint: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def original_name(self) -> str:
        return self.source_path.stem

    @property
    def extension(self) -> str:
        return self.source_path.suffix

    @property
    def coordinates(self) -> Optional[tuple[float, float]]:
        if self.latitude is None or self.longitude is None:
            return None
        return self.latitude, self.longitude

    @property
    def has_location(self) -> bool:
        return self.coordinates is not None

    @property
    def year(self) -> int:
        return self.date_taken.year

    @property
    def date_prefix(self) -> str:
        """Date part of the target filename, e.g. ``2023-07-14``."""
        return self.date_taken.strftime("%Y-%m-%d")


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Result of reading metadata from a file."""
    path: Path
    record: Optional[PhotoRecord] = None
    error: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return self.record is not None and self.error is None


@dataclass(frozen=True, slots=True)
class GeoCacheEntry:
    """A resolved place, keyed by the coordinates that were queried."""
    latitude: float
    longitude: float
    place_name: str


@dataclass(frozen=True, slots=True)
class PlaceLookup:
    """Result of a remote reverse-geocoding lookup."""
    place_name: str = UNKNOWN_LOCATION
    attempts: int = 0
    error: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ProcessingResult:
    """Result of processing a single file."""
    path: Path
    action: ProcessingAction
    target_path: Optional[Path] = None
    error: Optional[str] = None


@dataclass(slots=True)
class ProcessingStats:
    """Mutable statistics for a run, shared by all workers.

    ``processed`` counts files copied successfully.
    """
    total_files: int = 0
    processed: int = 0
    duplicates: int = 0
    errors: int = 0
    elapsed_seconds: float = 0.0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record(self, result: ProcessingResult) -> None:
        """Record a processing result."""
        with self._lock:
            match result.action:
                case ProcessingAction.COPIED:
                    self.processed += 1
                case ProcessingAction.DUPLICATE:
                    self.duplicates += 1
                case ProcessingAction.ERROR:
                    self.errors += 1

    def summary(self) -> dict[str, int]:
        with self._lock:
            return {
                "total": self.total_files,
                "processed": self.processed,
                "duplicates": self.duplicates,
                "errors": self.errors,
            }
