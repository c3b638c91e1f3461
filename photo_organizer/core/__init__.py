"""Core domain models and protocols."""
from .protocols import (
    HashEngine,
    MetadataExtractor,
    PlaceResolver,
    GeocodeCache,
    ProgressReporter,
    FileOperations,
    MediaScanner,
)
from .models import (
    UNKNOWN_LOCATION,
    ProcessingAction,
    PhotoRecord,
    ExtractionResult,
    GeoCacheEntry,
    PlaceLookup,
    ProcessingResult,
    ProcessingStats,
)
from .config import (
    OrganizerConfig,
    GeocodingConfig,
    RetryPolicy,
    SourceNotFoundError,
    default_destination,
)

__all__ = [
    # Protocols
    "HashEngine",
    "MetadataExtractor",
    "PlaceResolver",
    "GeocodeCache",
    "ProgressReporter",
    "FileOperations",
    "MediaScanner",
    # Models
    "UNKNOWN_LOCATION",
    "ProcessingAction",
    "PhotoRecord",
    "ExtractionResult",
    "GeoCacheEntry",
    "PlaceLookup",
    "ProcessingResult",
    "ProcessingStats",
    # Config
    "OrganizerConfig",
    "GeocodingConfig",
    "RetryPolicy",
    "SourceNotFoundError",
    "default_destination",
]
