"""
CLI Reporter Module
===================

Provides rich terminal output for cleanup runs using the Rich library.

- Mode banner (dry run / sweet clean)
- Table of the candidates found by the listing
- One line per deletion intent and outcome
- Progress bar while a snapshot is being taken
- Final summary listing every failure cause

Classes
-------
CLIReporter
    Main reporter class for terminal output.

Example
-------
>>> reporter = CLIReporter()
>>> pipeline = CleanupPipeline(
...     context,
...     on_listed=reporter.print_candidates,
...     on_intent=reporter.print_intent,
...     on_result=reporter.print_result,
...     on_sweetened=reporter.finish_snapshot,
... )
>>> reporter.print_summary(pipeline.run(kind), dry_run=False)

See Also
--------
rich : Python library for rich text and formatting.
JSONReporter : For programmatic access.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.text import Text

from awsugar.cleaners.pipeline import (
    CleanupSummary,
    DeleteResult,
    DeleteStatus,
    SweetenResult,
)
from awsugar.core.base_resource import Deletable
from awsugar.resources import KINDS, ResourceKind

# Module logger
logger = logging.getLogger(__name__)

STATUS_ICONS = {
    DeleteStatus.SUCCESS: "[green]✓[/green]",
    DeleteStatus.FAILED: "[red]✗[/red]",
    DeleteStatus.SKIPPED: "[yellow]○[/yellow]",
    DeleteStatus.DRY_RUN: "[blue]~[/blue]",
}


class CLIReporter:
    """
    Reporter for displaying a cleanup run in the terminal.

    Parameters
    ----------
    console : Console, optional
        Rich Console instance. If not provided, creates a new one.

    Attributes
    ----------
    console : Console
        The Rich Console used for output.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        """Initialize the CLI reporter with a Rich Console."""
        self.console = console or Console()
        self._progress: Optional[Progress] = None
        self._tasks: Dict[str, TaskID] = {}
        logger.debug("Initialized CLIReporter")

    # =========================================================================
    # Run Header
    # =========================================================================

    def print_mode_banner(self, region: str, dry_run: bool, sweet_clean: bool) -> None:
        """Print which region is cleaned and in which mode."""
        header = Text()
        header.append("\nawsugar cleanup\n", style="bold blue")
        header.append(f"Region: {region}", style="dim")
        self.console.print(Panel(header, border_style="blue"))

        if dry_run:
            self.console.print(
                Panel(
                    "[yellow bold]DRY-RUN MODE[/yellow bold]\n"
                    "Nothing will be snapshotted or deleted.",
                    border_style="yellow",
                )
            )
        elif not sweet_clean:
            self.console.print(
                Panel(
                    "[red bold]SWEET CLEAN DISABLED[/red bold]\n"
                    "Volumes will be deleted WITHOUT a snapshot!",
                    border_style="red",
                )
            )

    def print_candidates(
        self,
        kind: ResourceKind,
        resources: Sequence[Deletable],
        sweet_clean: bool = True,
    ) -> None:
        """
        Print the table of resources returned by the listing.

        The Sweeteners column shows "-" when ``sweet_clean`` is off.
        """
        if not resources:
            self.console.print(
                f"\n[green]No unused {kind.label} resources found. Nothing to delete.[/green]"
            )
            return

        table = Table(
            title=f"\nFound {len(resources)} unused {kind.label} resource(s)",
            title_style="bold",
            show_lines=False,
        )
        table.add_column("#", style="dim", width=4)
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Name", style="white")
        table.add_column("Sweeteners", style="dim")

        for i, resource in enumerate(resources, 1):
            sweeteners = resource.sweeteners() if sweet_clean else []
            table.add_row(
                str(i),
                resource.id,
                escape(resource.name),
                ", ".join(getattr(s, "id", "?") for s in sweeteners) or "-",
            )

        self.console.print(table)
        self.console.print()

    # =========================================================================
    # Per-item Output
    # =========================================================================

    def print_intent(self, resource: Deletable) -> None:
        """Announce a deletion before it is attempted."""
        self.console.print(
            f"{resource.resource_type} [cyan]{escape(f'[{resource.name}]')}[/cyan] to be deleted..."
        )

    def print_result(self, result: DeleteResult) -> None:
        """Print the outcome of one deletion."""
        icon = STATUS_ICONS.get(result.status, "?")
        text = {
            DeleteStatus.SUCCESS: "deleted successfully!",
            DeleteStatus.FAILED: f"[red]failed: {escape(result.error_message or '')}[/red]",
            DeleteStatus.SKIPPED: f"[yellow]skipped: {escape(result.error_message or '')}[/yellow]",
            DeleteStatus.DRY_RUN: "[blue]would be deleted[/blue]",
        }.get(result.status, "unknown")
        self.console.print(
            f"  {icon} {result.resource_type} "
            f"{escape(f'[{result.resource_name}]')} {text}"
        )

    # =========================================================================
    # Snapshot Progress
    # =========================================================================

    def create_progress(self) -> Progress:
        """Create a progress bar for snapshot waits."""
        return Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
            TimeElapsedColumn(),
            console=self.console,
        )

    def update_snapshot_progress(self, snapshot_id: str, percent: int) -> None:
        """Move the progress bar of ``snapshot_id`` to ``percent``."""
        if self._progress is None:
            self._progress = self.create_progress()
            self._progress.start()
        task = self._tasks.get(snapshot_id)
        if task is None:
            task = self._progress.add_task(f"Snapshot {snapshot_id}", total=100)
            self._tasks[snapshot_id] = task
        self._progress.update(task, completed=percent)

    def finish_snapshot(self, result: SweetenResult) -> None:
        """Close the progress bar and report a finished sweetening."""
        # Sweetenings run one at a time
        task = self._tasks.pop(result.snapshot_id or "", None)
        if self._progress is not None:
            if task is not None and result.success:
                self._progress.update(task, completed=100)
            self._progress.stop()
            self._progress = None
        self._tasks.clear()

        if result.success:
            self.console.print(
                f"  [green]✓[/green] Snapshot {result.snapshot_id} of "
                f"{result.resource_id} completed"
            )
        else:
            self.console.print(f"  [red]✗[/red] {escape(str(result.error))}")

    # =========================================================================
    # Summary and Messages
    # =========================================================================

    def print_summary(self, summary: CleanupSummary, dry_run: bool) -> None:
        """Print the final counts and every failure cause."""
        self.console.print("\n" + "=" * 50)
        self.console.print(f"[bold]Summary ({summary.resource_type}, {summary.region})[/bold]")
        self.console.print("=" * 50)

        if dry_run:
            self.console.print(f"  Would delete: [blue]{summary.dry_run}[/blue]")
        else:
            self.console.print(f"  Snapshots: [green]{len(summary.snapshots)}[/green]")
            self.console.print(f"  Deleted:   [green]{summary.deleted}[/green]")
            self.console.print(f"  Failed:    [red]{summary.failed}[/red]")
            self.console.print(f"  Skipped:   [yellow]{summary.skipped}[/yellow]")

        self.console.print(f"  Total:     {summary.total}")

        if summary.errors:
            self.console.print(
                f"\n[red bold]{len(summary.errors)} error(s) occurred:[/red bold]"
            )
            for error in summary.errors:
                self.console.print(f"  [red]• {escape(str(error))}[/red]")

        self.console.print()

    def print_kinds(self) -> None:
        """Print the table of supported resource kinds."""
        table = Table(title="Supported resource kinds", title_style="bold")
        table.add_column("Kind", style="cyan", no_wrap=True)
        table.add_column("Aliases", style="yellow")
        table.add_column("Type", style="white")
        table.add_column("Cleans", style="dim")

        for kind in KINDS.values():
            table.add_row(kind.name, ", ".join(kind.aliases), kind.label, kind.description)

        self.console.print(table)

    def print_error(self, message: str, title: str = "Error") -> None:
        """Print an error message."""
        self.console.print(f"\n[red bold]{title}:[/red bold] {escape(message)}")

    def print_warning(self, message: str) -> None:
        """Print a warning message."""
        self.console.print(f"\n[yellow bold]Warning:[/yellow bold] {escape(message)}")

    def close(self) -> None:
        """Stop a progress bar left running by an interrupted wait."""
        if self._progress is not None:
            self._progress.stop()
            self._progress = None
        self._tasks.clear()

    def __repr__(self) -> str:
        """Return string representation."""
        return "CLIReporter()"
