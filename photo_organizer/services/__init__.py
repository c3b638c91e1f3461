"""Service layer - business logic and shared run state."""
from .scanner import DirectoryScanner
from .deduplicator import FingerprintRegistry
from .geocoding import (
    NominatimPlaceResolver,
    SpatialGeocodeCache,
    haversine_km,
    parse_place_name,
)
from .file_ops import (
    DestinationAllocator,
    FileManager,
    build_folder_name,
    format_target_name,
)
from .processor import PhotoOrganizer, ProcessorDependencies

__all__ = [
    "DirectoryScanner",
    "FingerprintRegistry",
    "NominatimPlaceResolver",
    "SpatialGeocodeCache",
    "haversine_km",
    "parse_place_name",
    "DestinationAllocator",
    "FileManager",
    "build_folder_name",
    "format_target_name",
    "PhotoOrganizer",
    "ProcessorDependencies",
]
