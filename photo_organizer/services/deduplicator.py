"""Duplicate detection service."""
from __future__ import annotations

import threading


class FingerprintRegistry:
    """Thread-safe set of content fingerprints seen during a run.

    The first caller to claim a fingerprint owns it; every later claim
    for the same fingerprint is a duplicate, whichever worker makes it.
    """

    def __init__(self) -> None:
        self._seen: set[str] = set()
        self._lock = threading.Lock()

    def try_claim(self, fingerprint: str) -> bool:
        """Claim a fingerprint.

        Args:
            fingerprint: Content fingerprint of a file.

        Returns:
            True if it was unclaimed (and is now recorded),
            False if the content was already seen.
        """
        with self._lock:
            if fingerprint in self._seen:
                return False
            self._seen.add(fingerprint)
            return True

    def __contains__(self, fingerprint: object) -> bool:
        with self._lock:
            return fingerprint in self._seen

    def __len__(self) -> int:
        with self._lock:
            return len(self._seen)
