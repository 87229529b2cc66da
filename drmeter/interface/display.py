"""Rich console display components for the DR meter."""

from contextlib import contextmanager
from pathlib import Path
from typing import List, Optional

from rich.align import Align
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.text import Text

from ..album.models import AlbumSummary, DRRating
from ..core.config import AppInfo
from ..measurement.models import TrackResult

RATING_STYLES = {
    DRRating.EXCELLENT: "bold green",
    DRRating.GOOD: "green",
    DRRating.ACCEPTABLE: "yellow",
    DRRating.COMPRESSED: "dark_orange",
    DRRating.BRICKWALLED_OR_CLIPPED: "bold red",
}


def dr_style(dr_score: int) -> str:
    """Colour for a DR value, using the album rating bands."""
    return RATING_STYLES[DRRating.from_dr(dr_score)]


class AudioDisplay:
    """Handles all rich console output for DR measurements."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize with optional console instance."""
        self.console = console or Console()

    def show_app_header(self) -> None:
        """Display application header with branding."""
        header_text = Text()
        header_text.append(AppInfo.NAME.upper(), style="bold blue")
        header_text.append(f" v{AppInfo.VERSION}", style="dim")
        header_text.append(f"\n{AppInfo.DESCRIPTION}", style="italic")

        panel = Panel(Align.center(header_text), border_style="blue", padding=(1, 2))
        self.console.print(panel)

    def show_scan_start(self, count: int, folder: Path) -> None:
        self.console.print(
            f"[blue]Found {count} lossless file(s) in {folder}[/blue]\n"
        )

    def show_track_progress(
        self, index: int, total: int, result: TrackResult, elapsed: float
    ) -> None:
        """One line per analysed file: DR value or status, and time taken."""
        prefix = f"  [dim]({index}/{total})[/dim] {escape(result.file_identifier)} "
        if result.is_measured:
            score = result.measurement.dr_score
            self.console.print(
                f"{prefix}[{dr_style(score)}]DR{score}[/] [dim]({elapsed:.1f}s)[/dim]"
            )
        else:
            self.console.print(f"{prefix}[yellow]{result.status.label}[/yellow]")

    def show_results_table(self, results: List[TrackResult]) -> None:
        """Display per-track DR figures in a formatted table."""
        table = Table(title="Dynamic Range")
        table.add_column("DR", justify="right", style="bold", no_wrap=True)
        table.add_column("Peak dB", justify="right", style="cyan")
        table.add_column("RMS dB", justify="right", style="cyan")
        table.add_column("Duration", justify="right", style="green")
        table.add_column("Info", style="dim")
        table.add_column("File", style="magenta")

        for result in results:
            if result.is_measured:
                m = result.measurement
                table.add_row(
                    Text(m.dr_label, style=dr_style(m.dr_score)),
                    f"{m.peak_dbfs:+.2f}",
                    f"{m.rms_dbfs:+.2f}",
                    m.duration_str,
                    m.sample_format,
                    Text(m.file_identifier),
                )
            else:
                table.add_row(
                    Text("--", style="dim"),
                    "",
                    "",
                    "",
                    Text(result.status.label, style="yellow"),
                    Text(result.file_identifier),
                )

        self.console.print(table)

    def show_album_summary(self, summary: AlbumSummary, files_found: int) -> None:
        """Display the album DR panel."""
        if summary.is_empty:
            panel = Panel.fit(
                f"Files found: {files_found}\n"
                "[yellow]No measurable tracks, no album DR[/yellow]",
                title="Album Summary",
                border_style="yellow",
            )
            self.console.print(panel)
            return

        style = RATING_STYLES[summary.rating]
        panel = Panel.fit(
            f"Tracks analysed: {summary.track_count} of {files_found}\n"
            f"Album DR: [{style}]DR{summary.album_dr}[/]\n"
            f"DR range: {summary.dr_range}\n"
            f"Rating: [{style}]{summary.rating.label}[/]",
            title="Album Summary",
            border_style="blue",
        )
        self.console.print(panel)

    def show_track_detail(self, result: TrackResult) -> None:
        """Display a single track with its per-channel DR values."""
        if not result.is_measured:
            self.show_warning_message(
                escape(
                    f"{result.file_identifier}: {result.status.label}"
                    + (f" ({result.message})" if result.message else "")
                )
            )
            return

        m = result.measurement
        table = Table(title=f"Dynamic Range: {escape(m.file_identifier)}")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="magenta")

        table.add_row("DR", Text(m.dr_label, style=dr_style(m.dr_score)))
        table.add_row("DR (unrounded)", f"{m.dr_value:.2f}")
        for channel, value in enumerate(m.channel_values):
            shown = f"{value:.2f}" if value is not None else "silent"
            table.add_row(f"Channel {channel + 1}", shown)
        table.add_row("Peak", f"{m.peak_dbfs:+.2f} dBFS")
        table.add_row("RMS", f"{m.rms_dbfs:+.2f} dBFS")
        table.add_row("Duration", m.duration_str)
        table.add_row("Format", m.sample_format)

        self.console.print(table)

    def show_success_message(self, message: str) -> None:
        """Display a success message."""
        self.console.print(f"[green]✓ {message}[/green]")

    def show_warning_message(self, message: str) -> None:
        """Display a warning message."""
        self.console.print(f"[yellow]⚠ {message}[/yellow]")

    def show_error_message(self, message: str) -> None:
        """Display an error message."""
        self.console.print(f"[red]✗ {message}[/red]")


class ProgressTracker:
    """Manages progress bars and status updates."""

    def __init__(self, console: Optional[Console] = None):
        """Initialize with optional console instance."""
        self.console = console or Console()

    @contextmanager
    def batch_progress(self, total: int, description: str = "Analysing tracks..."):
        """Context manager for a batch of files."""
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            console=self.console,
            transient=True,
        ) as progress:
            task = progress.add_task(description, total=total)
            yield progress, task
