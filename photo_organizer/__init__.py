"""Photo ingestion and organization package.

Copies a photo tree into a deduplicated ``YEAR - Place`` layout.
"""

__version__ = "1.0.0"

# Core exports
from .core.config import OrganizerConfig, GeocodingConfig, RetryPolicy, SourceNotFoundError
from .core.models import (
    UNKNOWN_LOCATION,
    PhotoRecord,
    ExtractionResult,
    GeoCacheEntry,
    PlaceLookup,
    ProcessingAction,
    ProcessingResult,
    ProcessingStats,
)
from .core.protocols import MetadataExtractor, PlaceResolver, GeocodeCache, ProgressReporter

# Engine exports
from .engines.hash_engine import ContentHashEngine
from .engines.metadata import PillowMetadataExtractor

# Service exports
from .services.deduplicator import FingerprintRegistry
from .services.geocoding import NominatimPlaceResolver, SpatialGeocodeCache
from .services.file_ops import DestinationAllocator, FileManager
from .services.scanner import DirectoryScanner
from .services.processor import PhotoOrganizer, ProcessorDependencies

# Logging exports
from .logging.rich_logger import RichRunReporter, QuietRunReporter

__all__ = [
    # Core
    "OrganizerConfig",
    "GeocodingConfig",
    "RetryPolicy",
    "SourceNotFoundError",
    "UNKNOWN_LOCATION",
    "PhotoRecord",
    "ExtractionResult",
    "GeoCacheEntry",
    "PlaceLookup",
    "ProcessingAction",
    "ProcessingResult",
    "ProcessingStats",
    "MetadataExtractor",
    "PlaceResolver",
    "GeocodeCache",
    "ProgressReporter",
    # Engines
    "ContentHashEngine",
    "PillowMetadataExtractor",
    # Services
    "FingerprintRegistry",
    "NominatimPlaceResolver",
    "SpatialGeocodeCache",
    "DestinationAllocator",
    "FileManager",
    "DirectoryScanner",
    "PhotoOrganizer",
    "ProcessorDependencies",
    # Logging
    "RichRunReporter",
    "QuietRunReporter",
]
