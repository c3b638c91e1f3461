"""Main organizer - orchestrates all services."""
from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

import requests

from ..core.config import OrganizerConfig, SourceNotFoundError
from ..core.models import ProcessingAction, ProcessingResult, ProcessingStats
from ..core.protocols import (
    FileOperations,
    GeocodeCache,
    MediaScanner,
    MetadataExtractor,
    ProgressReporter,
)
from ..engines.hash_engine import ContentHashEngine
from ..engines.metadata import PillowMetadataExtractor
from .deduplicator import FingerprintRegistry
from .file_ops import DestinationAllocator, FileManager
from .geocoding import NominatimPlaceResolver, SpatialGeocodeCache
from .scanner import DirectoryScanner


logger = logging.getLogger(__name__)


@dataclass
class ProcessorDependencies:
    """All dependencies needed by the organizer.

    This is explicitly passed in - no globals or singletons. Every
    shared structure (registry, cache, allocator) belongs to one run.
    """
    extractor: MetadataExtractor
    registry: FingerprintRegistry
    geocoder: GeocodeCache
    allocator: DestinationAllocator
    file_manager: FileOperations
    scanner: MediaScanner
    progress: ProgressReporter

    @classmethod
    def create(
        cls,
        config: OrganizerConfig,
        progress: ProgressReporter,
        session_factory: Callable[[], requests.Session] = requests.Session,
        sleep: Callable[[float], None] = time.sleep,
    ) -> "ProcessorDependencies":
        """Build the production dependency graph for a config."""
        resolver = NominatimPlaceResolver(
            config.geocoding,
            session_factory=session_factory,
            sleep=sleep,
        )
        return cls(
            extractor=PillowMetadataExtractor(ContentHashEngine()),
            registry=FingerprintRegistry(),
            geocoder=SpatialGeocodeCache(resolver, radius_km=config.geocoding.cache_radius_km),
            allocator=DestinationAllocator(),
            file_manager=FileManager(config.dest_root),
            scanner=DirectoryScanner(extensions=config.extensions),
            progress=progress,
        )


class PhotoOrganizer:
    """Copies a photo tree into a deduplicated year/place layout.

    Files are processed on a bounded thread pool. Each file is
    extracted, deduplicated, placed and copied independently; a failure
    on one file is counted and never stops the others.
    """

    def __init__(self, config: OrganizerConfig, deps: ProcessorDependencies):
        """Initialize organizer with config and dependencies.

        Args:
            config: Run configuration.
            deps: All required dependencies.
        """
        self._config = config
        self._deps = deps
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def run(self) -> ProcessingStats:
        """Organize every supported file under the source root.

        Returns:
            Statistics about what was processed.

        Raises:
            SourceNotFoundError: If the source directory does not exist.
        """
        started = time.monotonic()
        source = self._config.source_root

        if not source.is_dir():
            raise SourceNotFoundError(f"Source folder not found: {source}")

        self._deps.file_manager.ensure_directory(self._config.dest_root)

        files = list(self._deps.scanner.scan(source))
        self._stats.total_files = len(files)
        self._deps.progress.info(f"Found {len(files)} images to process")

        if files:
            self._process_all(files)

        self._stats.elapsed_seconds = time.monotonic() - started
        return self._stats

    def _process_all(self, files: list[Path]) -> None:
        progress = self._deps.progress
        progress.start_run(len(files))

        executor = ThreadPoolExecutor(
            max_workers=self._config.workers,
            thread_name_prefix="organizer",
        )
        interrupted = False
        try:
            futures = [executor.submit(self._worker, path) for path in files]
            for future in as_completed(futures):
                progress.file_done(future.result(), self._stats)
        except KeyboardInterrupt:
            interrupted = True
            raise
        finally:
            # On Ctrl+C queued files are dropped; files already in flight finish
            executor.shutdown(wait=not interrupted, cancel_futures=interrupted)
            progress.end_run()

    def _worker(self, path: Path) -> ProcessingResult:
        result = self.process_file(path)
        self._stats.record(result)
        return result

    def process_file(self, path: Path) -> ProcessingResult:
        """Run the per-file pipeline. Never raises."""
        try:
            extraction = self._deps.extractor.extract(path)
            if not extraction.is_valid:
                return ProcessingResult(
                    path=path,
                    action=ProcessingAction.ERROR,
                    error=extraction.error or "Metadata extraction failed",
                )
            record = extraction.record

            if not self._deps.registry.try_claim(record.fingerprint):
                return ProcessingResult(path=path, action=ProcessingAction.DUPLICATE)

            place_name = None
            if record.has_location:
                place_name = self._deps.geocoder.resolve(*record.coordinates)

            folder = self._deps.file_manager.folder_for(record, place_name)
            target = self._deps.allocator.allocate(folder, record.date_prefix, record.extension)
            self._deps.file_manager.copy_file(path, target)

            return ProcessingResult(path=path, action=ProcessingAction.COPIED, target_path=target)

        except Exception as e:
            logger.debug("Error processing %s", path, exc_info=True)
            return ProcessingResult(path=path, action=ProcessingAction.ERROR, error=str(e))
