"""CLI commands for the DR meter."""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from ..album.services import AlbumAggregator
from ..core.config import AppInfo, Paths
from ..core.exceptions import ConfigurationError, DRMeterError, ReportWriteError
from ..core.log import setup_logging
from ..measurement.models import MeasurementStatus, TrackResult
from ..measurement.services import TrackMeasurer
from ..storage.models import DRReport
from ..storage.services import LibraryScanner, ReportWriter
from .display import AudioDisplay, ProgressTracker
from .report import render_report

# Initialize Rich console and Typer app
console = Console()
app = typer.Typer(
    name=AppInfo.NAME,
    help=AppInfo.DESCRIPTION,
    rich_markup_mode="rich",
    no_args_is_help=True,
)

# Initialize display components
display = AudioDisplay(console)
progress = ProgressTracker(console)

EXIT_INTERRUPTED = 130


def handle_error(error: Exception) -> None:
    """Centralized error handling."""
    if isinstance(error, DRMeterError):
        display.show_error_message(error.message)
        if getattr(error, "details", None):
            console.print(f"[dim]Details: {error.details}[/dim]")
    else:
        display.show_error_message(f"Unexpected error: {str(error)}")

    raise typer.Exit(1)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose (debug) logging"
    ),
):
    """Measure the Dynamic Range of lossless audio files."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    setup_logging(verbose)


@app.command()
def scan(
    folder: Path = typer.Argument(
        Path("."), help="Folder containing lossless audio files"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Report file path (default: <folder>/dr_report.txt)"
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress console output"),
    recursive: bool = typer.Option(
        False, "--recursive", "-r", help="Include files in subfolders"
    ),
    extensions: Optional[List[str]] = typer.Option(
        None, "--extension", "-e", help="File extension to include (repeatable)"
    ),
):
    """Measure every lossless file in a folder and write an album DR report."""
    try:
        scanner = LibraryScanner(extensions, recursive=recursive)
        audio_files = scanner.scan(folder)
    except ConfigurationError as e:
        handle_error(e)

    if not audio_files:
        if not quiet:
            display.show_warning_message(f"No lossless audio files found in {folder}")
        return

    measurer = TrackMeasurer()
    try:
        if quiet:
            results = measurer.measure_files(audio_files, base_dir=folder)
        else:
            display.show_app_header()
            display.show_scan_start(len(audio_files), folder)
            results = _measure_with_progress(measurer, audio_files, folder)
    except KeyboardInterrupt:
        if not quiet:
            display.show_warning_message("Interrupted, no report written")
        raise typer.Exit(EXIT_INTERRUPTED)

    summary = AlbumAggregator().aggregate(results)
    report = DRReport(folder=folder, results=results, summary=summary)

    output_path = output or Paths.default_report_path(folder)
    try:
        ReportWriter().write(render_report(report), output_path)
    except ReportWriteError as e:
        handle_error(e)

    if quiet:
        return

    console.print()
    display.show_results_table(results)
    display.show_album_summary(summary, files_found=len(results))

    failed = [r for r in results if r.status is MeasurementStatus.DECODE_ERROR]
    if failed:
        display.show_warning_message(f"{len(failed)} file(s) could not be decoded")
    display.show_success_message(f"Report written to {output_path}")


def _measure_with_progress(
    measurer: TrackMeasurer, audio_files: List[Path], folder: Path
) -> List[TrackResult]:
    """Measure files while showing a progress bar and one line per file."""
    with progress.batch_progress(len(audio_files)) as (prog, task):

        def on_result(index, total, audio_file, result, elapsed):
            display.show_track_progress(index, total, result, elapsed)
            prog.advance(task)

        return measurer.measure_files(audio_files, base_dir=folder, on_result=on_result)


@app.command()
def track(
    audio_file: Path = typer.Argument(help="Lossless audio file to measure"),
):
    """Measure a single file and show its per-channel DR values."""
    if not audio_file.is_file():
        display.show_error_message(f"Audio file not found: {audio_file}")
        raise typer.Exit(1)

    result = TrackMeasurer().measure_file(audio_file)
    display.show_track_detail(result)

    if result.status is MeasurementStatus.DECODE_ERROR:
        raise typer.Exit(1)
