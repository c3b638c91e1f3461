"""Configuration dataclasses with validation."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from ..engines.hash_engine import SUPPORTED_EXTENSIONS


DEFAULT_ENDPOINT = "https://nominatim.openstreetmap.org/reverse"
DEFAULT_USER_AGENT = "PhotoOrganizer/1.0"
DEFAULT_REFERER = "https://github.com/cassiocmps/Photo-Organizer"


class SourceNotFoundError(FileNotFoundError):
    """The source directory does not exist. Aborts the whole run."""


def default_workers() -> int:
    """Number of workers matching host parallelism."""
    return os.cpu_count() or 1


def default_destination(source: Path) -> Path:
    """Default output root: ``{source_name}_Organized`` next to the source."""
    source = Path(source).expanduser().resolve()
    return source.parent / f"{source.name}_Organized"


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Delay schedule and attempt ceiling for remote lookups.

    The delay applies before every attempt: the first attempt waits
    ``base_delay`` (courtesy delay), each retry doubles it (backoff).
    """
    max_attempts: int = 3
    base_delay: float = 1.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0:
            raise ValueError("base_delay cannot be negative")

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait before the given 0-based attempt."""
        return self.base_delay * (2 ** attempt)

    def delays(self) -> tuple[float, ...]:
        return tuple(self.delay_for(n) for n in range(self.max_attempts))


@dataclass(frozen=True, slots=True)
class GeocodingConfig:
    """Reverse geocoding settings."""
    endpoint: str = DEFAULT_ENDPOINT
    user_agent: str = DEFAULT_USER_AGENT
    referer: str = DEFAULT_REFERER
    timeout: float = 10.0
    cache_radius_km: float = 10.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)

    def __post_init__(self) -> None:
        if not self.user_agent:
            raise ValueError("A descriptive user agent is required")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.cache_radius_km <= 0:
            raise ValueError("cache_radius_km must be positive")


@dataclass(slots=True)
class OrganizerConfig:
    """Main configuration for an organizing run.

    This is the only configuration object passed through the system.
    The source directory is deliberately not checked here; a missing
    source is reported by the organizer as a fatal run error.
    """
    source_root: Path
    dest_root: Path

    # Performance
    workers: int = field(default_factory=default_workers)

    # Input filtering
    extensions: frozenset[str] = SUPPORTED_EXTENSIONS

    # Remote lookups
    geocoding: GeocodingConfig = field(default_factory=GeocodingConfig)

    def __post_init__(self) -> None:
        """Validate configuration."""
        self.source_root = Path(self.source_root)
        self.dest_root = Path(self.dest_root)

        if self.workers < 1:
            raise ValueError("Workers must be at least 1")

        if not self.extensions:
            raise ValueError("At least one file extension is required")

        self.extensions = frozenset(
            ext.lower() if ext.startswith(".") else f".{ext.lower()}"
            for ext in self.extensions
        )

    @classmethod
    def for_source(cls, source: Path, dest: Path | None = None, **kwargs) -> "OrganizerConfig":
        """Build a config, defaulting the destination beside the source."""
        source = Path(source).expanduser()
        dest = Path(dest).expanduser() if dest else default_destination(source)
        return cls(source_root=source, dest_root=dest, **kwargs)
