"""Command line entry point: photo-organizer SOURCE [DEST]."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from .core.config import (
    GeocodingConfig,
    OrganizerConfig,
    RetryPolicy,
    SourceNotFoundError,
    default_workers,
)
from .logging.rich_logger import QuietRunReporter, RichRunReporter, configure_logging


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="photo-organizer",
        description=(
            "Copy a folder of photos into a deduplicated tree organized by "
            "year and place."
        ),
    )
    parser.add_argument(
        "source",
        type=Path,
        help="Folder with the photos to organize",
    )
    parser.add_argument(
        "dest",
        type=Path,
        nargs="?",
        default=None,
        help="Root of the organized tree (default: SOURCE_Organized next to SOURCE)",
    )
    parser.add_argument(
        "-w", "-j", "--workers",
        dest="workers",
        type=int,
        default=None,
        help="Number of parallel workers (default: CPU count)",
    )
    parser.add_argument(
        "--courtesy-delay",
        type=float,
        default=1.0,
        help="Seconds to wait before each geocoding request; doubled on retry (default: 1.0)",
    )
    parser.add_argument(
        "--max-attempts",
        type=int,
        default=3,
        help="Geocoding attempts when rate limited (default: 3)",
    )
    parser.add_argument(
        "--cache-radius-km",
        type=float,
        default=10.0,
        help="Reuse a place name for photos closer than this (default: 10)",
    )
    parser.add_argument(
        "--user-agent",
        type=str,
        default=None,
        help="User-Agent sent to the geocoding service",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress non-essential output",
    )
    return parser


def build_config(args: argparse.Namespace) -> OrganizerConfig:
    """Translate parsed arguments into a validated config."""
    geocoding_kwargs = {
        "cache_radius_km": args.cache_radius_km,
        "retry": RetryPolicy(max_attempts=args.max_attempts, base_delay=args.courtesy_delay),
    }
    if args.user_agent:
        geocoding_kwargs["user_agent"] = args.user_agent

    return OrganizerConfig.for_source(
        args.source,
        args.dest,
        workers=args.workers if args.workers is not None else default_workers(),
        geocoding=GeocodingConfig(**geocoding_kwargs),
    )


def cmd_organize(args: argparse.Namespace, reporter) -> int:
    """Run the organizer. Per-file errors do not change the exit code."""
    from .services.processor import PhotoOrganizer, ProcessorDependencies

    config = build_config(args)

    reporter.show_run(config)

    deps = ProcessorDependencies.create(config, reporter)
    stats = PhotoOrganizer(config, deps).run()

    reporter.show_summary(stats)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=args.verbose)

    if args.quiet:
        reporter = QuietRunReporter()
    else:
        reporter = RichRunReporter(verbose=args.verbose)

    try:
        return cmd_organize(args, reporter)
    except KeyboardInterrupt:
        # Clean exit on Ctrl+C - no stack trace
        return 130
    except SourceNotFoundError as e:
        reporter.error(f"Fatal error: {e}")
        return 1
    except Exception as e:
        reporter.error(f"Fatal error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
