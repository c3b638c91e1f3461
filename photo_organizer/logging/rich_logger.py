"""Terminal reporting for organizing runs, built on Rich."""
from __future__ import annotations

import logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)
from rich.table import Table

from ..core.config import OrganizerConfig
from ..core.models import ProcessingAction, ProcessingResult, ProcessingStats


def configure_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """Route library log records through Rich.

    WARNING and above by default, everything when verbose.
    """
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=verbose,
    )
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
    # urllib3 is chatty at DEBUG
    logging.getLogger("urllib3").setLevel(logging.INFO if verbose else logging.WARNING)


def _summary_rows(stats: ProcessingStats) -> list[tuple[str, str, str]]:
    summary = stats.summary()
    return [
        ("Total files", str(summary["total"]), "white"),
        ("Successfully processed", str(summary["processed"]), "green"),
        ("Duplicates ignored", str(summary["duplicates"]), "yellow"),
        ("Errors", str(summary["errors"]), "red" if summary["errors"] else "white"),
    ]


class RichRunReporter:
    """Live progress and a final summary on a Rich console.

    The progress line carries running copied/duplicate/error tallies.
    Duplicates and errors are listed as they happen; copies only in
    verbose mode. Output goes to standard output unless another console
    is supplied.
    """

    def __init__(self, verbose: bool = False, console: Optional[Console] = None):
        self._console = console or Console()
        self._verbose = verbose
        self._progress: Optional[Progress] = None
        self._task_id: Optional[TaskID] = None

    @property
    def console(self) -> Console:
        return self._console

    def show_run(self, config: OrganizerConfig) -> None:
        """Print where the run reads from and writes to."""
        grid = Table.grid(padding=(0, 2))
        grid.add_column(style="cyan")
        grid.add_column()
        grid.add_row("Source", str(config.source_root))
        grid.add_row("Destination", str(config.dest_root))
        grid.add_row("Workers", str(config.workers))
        grid.add_row("Same place within", f"{config.geocoding.cache_radius_km:g} km")
        grid.add_row(
            "Geocoding",
            f"{config.geocoding.retry.max_attempts} attempts, "
            f"{config.geocoding.retry.base_delay:g}s courtesy delay",
        )
        self._console.print(Panel(grid, title="[bold cyan]Photo Organizer", border_style="cyan"))

    def start_run(self, total: int) -> None:
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]Organizing"),
            BarColumn(bar_width=30),
            MofNCompleteColumn(),
            TextColumn("[green]{task.fields[copied]} copied"),
            TextColumn("[yellow]{task.fields[duplicates]} duplicates"),
            TextColumn("[red]{task.fields[errors]} errors"),
            TimeElapsedColumn(),
            TimeRemainingColumn(),
            console=self._console,
        )
        self._progress.start()
        self._task_id = self._progress.add_task(
            "organize", total=total, copied=0, duplicates=0, errors=0,
        )

    def file_done(self, result: ProcessingResult, stats: ProcessingStats) -> None:
        name = result.path.name
        match result.action:
            case ProcessingAction.DUPLICATE:
                self._console.print(f"[yellow]=[/yellow] Duplicate found: {name}")
            case ProcessingAction.ERROR:
                self._console.print(f"[red]✗ Error processing {name}: {result.error}[/red]")
            case ProcessingAction.COPIED if self._verbose:
                self._console.print(f"[dim]  {name} -> {result.target_path}[/dim]")

        if self._progress is not None and self._task_id is not None:
            self._progress.update(
                self._task_id,
                advance=1,
                copied=stats.processed,
                duplicates=stats.duplicates,
                errors=stats.errors,
            )

    def end_run(self) -> None:
        if self._progress is not None:
            self._progress.stop()
            self._progress = None
            self._task_id = None

    def info(self, message: str) -> None:
        self._console.print(f"[blue]ℹ[/blue] {message}")

    def error(self, message: str) -> None:
        self._console.print(f"[red]✗ {message}[/red]")

    def show_summary(self, stats: ProcessingStats) -> None:
        """Print the single consolidated report of a finished run."""
        table = Table(title="Processing Summary", show_header=False)
        table.add_column("Metric", style="cyan")
        table.add_column("Count", justify="right")
        for label, value, style in _summary_rows(stats):
            table.add_row(label, f"[{style}]{value}[/{style}]")

        if stats.elapsed_seconds > 0:
            table.add_section()
            table.add_row("Time elapsed", f"{stats.elapsed_seconds:.1f}s")
            table.add_row("Rate", f"{stats.total_files / stats.elapsed_seconds:.1f} files/sec")

        self._console.print(table)


class QuietRunReporter:
    """Errors to stderr, a one-line summary to stdout, nothing else."""

    def show_run(self, config: OrganizerConfig) -> None:
        pass

    def start_run(self, total: int) -> None:
        pass

    def file_done(self, result: ProcessingResult, stats: ProcessingStats) -> None:
        if result.action == ProcessingAction.ERROR:
            self.error(f"{result.path}: {result.error}")

    def end_run(self) -> None:
        pass

    def info(self, message: str) -> None:
        pass

    def error(self, message: str) -> None:
        print(f"ERROR: {message}", file=sys.stderr)

    def show_summary(self, stats: ProcessingStats) -> None:
        print("  ".join(f"{label}: {value}" for label, value, _ in _summary_rows(stats)))
