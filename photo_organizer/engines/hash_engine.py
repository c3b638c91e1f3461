"""Content fingerprinting.

Fingerprints are SHA-256 digests of the raw file bytes, so two files are
duplicates only when they are byte-identical.
"""
from __future__ import annotations

import hashlib
from pathlib import Path


SUPPORTED_EXTENSIONS = frozenset({
    ".jpg", ".jpeg", ".png", ".heic", ".heif",
    ".tiff", ".tif", ".bmp", ".gif",
})


def is_supported_image(path: Path, extensions: frozenset[str] = SUPPORTED_EXTENSIONS) -> bool:
    return path.suffix.lower() in extensions


class ContentHashEngine:
    """SHA-256 content hash engine.

    Reads files in chunks so large images never sit in memory whole.
    """

    def __init__(self, chunk_size: int = 1024 * 1024):
        """Initialize the hash engine.

        Args:
            chunk_size: Bytes read per iteration.
        """
        self._chunk_size = chunk_size

    @property
    def name(self) -> str:
        return "sha256"

    def compute_hash(self, path: Path) -> str:
        """Compute the hex digest of a file.

        Raises:
            OSError: If the file cannot be read.
        """
        digest = hashlib.sha256()
        with path.open("rb") as f:
            for chunk in iter(lambda: f.read(self._chunk_size), b""):
                digest.update(chunk)
        return digest.hexdigest()
