"""Engine implementations for fingerprinting and metadata extraction."""
from .hash_engine import ContentHashEngine, SUPPORTED_EXTENSIONS, is_supported_image
from .metadata import PillowMetadataExtractor

__all__ = [
    "ContentHashEngine",
    "SUPPORTED_EXTENSIONS",
    "is_supported_image",
    "PillowMetadataExtractor",
]
