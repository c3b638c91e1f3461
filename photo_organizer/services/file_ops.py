"""File operations service: folder naming, name allocation and copying."""
from __future__ import annotations

import re
import shutil
import threading
from pathlib import Path
from typing import Optional

from ..core.models import UNKNOWN_LOCATION, PhotoRecord


INVALID_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


def sanitize_folder_part(name: str) -> str:
    """Make a place name safe to use inside a folder name."""
    name = INVALID_CHARS.sub("_", name)
    name = re.sub(r"\s+", " ", name).strip().rstrip(".")
    return name


def build_folder_name(year: int, place_name: Optional[str]) -> str:
    """Folder name for a photo: ``2023`` or ``2023 - Lisbon``."""
    if not place_name or place_name == UNKNOWN_LOCATION:
        return str(year)
    place = sanitize_folder_part(place_name)
    if not place:
        return str(year)
    return f"{year} - {place}"


def format_target_name(date_prefix: str, counter: int, extension: str) -> str:
    """Target filename, e.g. ``2023-07-14_IMG0001.jpg``."""
    return f"{date_prefix}_IMG{counter:04d}{extension}"


class DestinationAllocator:
    """Hands out collision-free filenames, one counter per folder.

    A single lock guards every folder's counter together with the
    existence check, so no two workers can ever receive the same path.
    Counters only move forward; names already on disk are skipped.
    """

    def __init__(self) -> None:
        self._counters: dict[Path, int] = {}
        self._lock = threading.Lock()

    def allocate(self, folder: Path, date_prefix: str, extension: str) -> Path:
        """Reserve the next free path in ``folder``.

        Args:
            folder: Destination folder, created if absent.
            date_prefix: Date part of the filename.
            extension: Extension including the leading dot.

        Returns:
            A path that did not exist when it was allocated.
        """
        folder = Path(folder)
        with self._lock:
            folder.mkdir(parents=True, exist_ok=True)
            counter = self._counters.get(folder, 0)
            while True:
                counter += 1
                candidate = folder / format_target_name(date_prefix, counter, extension)
                if not candidate.exists():
                    break
            self._counters[folder] = counter
            return candidate


class FileManager:
    """Handles the copy into the organized tree."""

    def __init__(self, output_root: Path):
        """Initialize file manager.

        Args:
            output_root: Root directory for output.
        """
        self._output_root = Path(output_root)

    @property
    def output_root(self) -> Path:
        return self._output_root

    def folder_for(self, record: PhotoRecord, place_name: Optional[str]) -> Path:
        """Output folder for a record and its resolved place."""
        return self._output_root / build_folder_name(record.year, place_name)

    def ensure_directory(self, path: Path) -> None:
        """Ensure directory exists.

        Args:
            path: Directory to create.
        """
        path.mkdir(parents=True, exist_ok=True)

    def copy_file(self, source: Path, target: Path) -> None:
        """Copy a file with metadata preservation, never overwriting.

        Args:
            source: Source file path.
            target: Target file path.

        Raises:
            FileExistsError: If ``target`` already exists.
            OSError: If the copy fails.
        """
        target.parent.mkdir(parents=True, exist_ok=True)
        with source.open("rb") as src:
            # Exclusive create: an existing target raises before anything is written
            dst = target.open("xb")
            try:
                with dst:
                    shutil.copyfileobj(src, dst)
                shutil.copystat(source, target)
            except OSError:
                target.unlink(missing_ok=True)
                raise
