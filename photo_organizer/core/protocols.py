"""Protocol definitions (interfaces) for dependency injection."""
from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import Iterator, Optional, Protocol

from .models import ExtractionResult, PhotoRecord, ProcessingResult, ProcessingStats


class HashEngine(Protocol):
    """Interface for computing content fingerprints."""

    @abstractmethod
    def compute_hash(self, path: Path) -> str:
        """Fingerprint the bytes of a single file."""
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Engine name for logging."""
        ...


class MetadataExtractor(Protocol):
    """Interface for reading capture date, location and fingerprint."""

    @abstractmethod
    def extract(self, path: Path) -> ExtractionResult:
        """Extract metadata. Failures are reported in the result, not raised."""
        ...


class PlaceResolver(Protocol):
    """Interface for turning coordinates into a place name."""

    @abstractmethod
    def fetch_place_name(self, latitude: float, longitude: float) -> str:
        """Return a place name, or the unknown-location sentinel. Never raises."""
        ...


class GeocodeCache(Protocol):
    """Interface for the shared, distance-tolerant place cache."""

    @abstractmethod
    def resolve(self, latitude: float, longitude: float) -> str:
        """Return a cached or freshly resolved place name."""
        ...


class ProgressReporter(Protocol):
    """Interface for reporting a run to the user."""

    @abstractmethod
    def start_run(self, total: int) -> None:
        """Begin reporting on ``total`` scheduled files."""
        ...

    @abstractmethod
    def file_done(self, result: ProcessingResult, stats: ProcessingStats) -> None:
        """Report one finished file. ``stats`` holds the live tallies."""
        ...

    @abstractmethod
    def end_run(self) -> None:
        """Stop live output. Called even when the run is interrupted."""
        ...

    @abstractmethod
    def info(self, message: str) -> None:
        ...

    @abstractmethod
    def error(self, message: str) -> None:
        ...


class FileOperations(Protocol):
    """Interface for file operations."""

    @abstractmethod
    def folder_for(self, record: PhotoRecord, place_name: Optional[str]) -> Path:
        """Output folder for a record and its resolved place."""
        ...

    @abstractmethod
    def copy_file(self, source: Path, target: Path) -> None:
        """Copy a file. Must never overwrite ``target``."""
        ...

    @abstractmethod
    def ensure_directory(self, path: Path) -> None:
        """Ensure directory exists."""
        ...


class MediaScanner(Protocol):
    """Interface for enumerating candidate files."""

    @abstractmethod
    def scan(self, root: Path) -> Iterator[Path]:
        """Yield supported files under ``root``."""
        ...
