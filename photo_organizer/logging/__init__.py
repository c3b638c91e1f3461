"""Logging package with Rich-based progress reporting."""

from .rich_logger import RichRunReporter, QuietRunReporter, configure_logging

__all__ = ["RichRunReporter", "QuietRunReporter", "configure_logging"]
