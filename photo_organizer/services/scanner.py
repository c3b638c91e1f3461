"""Directory scanning service."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

from ..engines.hash_engine import SUPPORTED_EXTENSIONS, is_supported_image


logger = logging.getLogger(__name__)


class DirectoryScanner:
    """Recursively finds supported image files.

    Extension matching is case-insensitive. Entries are visited in
    sorted order so runs over the same tree schedule files identically.
    """

    def __init__(
        self,
        extensions: frozenset[str] = SUPPORTED_EXTENSIONS,
        follow_symlinks: bool = False,
    ):
        """Initialize the scanner.

        Args:
            extensions: Lower-case extensions (with dot) to include.
            follow_symlinks: Whether to follow symbolic links.
        """
        self._extensions = frozenset(ext.lower() for ext in extensions)
        self._follow_symlinks = follow_symlinks

    def scan(self, root: Path) -> Iterator[Path]:
        """Yield supported files under ``root``, recursively."""
        yield from self._scan_directory(Path(root))

    def _scan_directory(self, directory: Path) -> Iterator[Path]:
        try:
            entries = sorted(directory.iterdir())
        except OSError as e:
            logger.warning("Skipping unreadable directory %s: %s", directory, e)
            return

        for entry in entries:
            if entry.is_symlink() and not self._follow_symlinks:
                continue

            if entry.is_file():
                if is_supported_image(entry, self._extensions):
                    yield entry
            elif entry.is_dir():
                yield from self._scan_directory(entry)
