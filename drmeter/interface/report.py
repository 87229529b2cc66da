"""Plain-text rendering of a DR report."""

from typing import List

from ..core.config import AppInfo
from ..measurement.models import TrackResult
from ..storage.models import DRReport

RULE = "=" * 75
THIN_RULE = "-" * 73
SUMMARY_RULE = "-" * 31
PLACEHOLDER = "--"


def format_db(value: float) -> str:
    """Signed dB with two decimals, e.g. -0.10 or +0.00."""
    return f"{value:+.2f}"


def format_track_row(result: TrackResult) -> str:
    """One report row: DR, peak dB, RMS dB, duration, sample format, file."""
    if result.is_measured:
        m = result.measurement
        return (
            f"  {m.dr_label:<4}  {format_db(m.peak_dbfs):>8}  {format_db(m.rms_dbfs):>8}"
            f"  {m.duration_str:<8}  {m.sample_format:<10}  {m.file_identifier}"
        )
    return (
        f"  {PLACEHOLDER:<4}  {'':>8}  {'':>8}  {'':<8}  {'':<10}"
        f"  {result.file_identifier}  [{result.status.label}]"
    )


def render_report(report: DRReport) -> str:
    """Render the fixed text layout written to the report file."""
    lines: List[str] = [
        RULE,
        "  Dynamic Range Report",
        f"  Generated : {report.generated_at:%Y-%m-%d %H:%M:%S}",
        f"  Folder    : {report.folder.resolve()}",
        RULE,
        "",
        f"  {'DR':<4}  {'Peak dB':>8}  {'RMS dB':>8}  {'Duration':<8}  {'Info':<10}  File",
        f"  {THIN_RULE}",
    ]
    lines.extend(format_track_row(result) for result in report.results)
    lines.extend([f"  {THIN_RULE}", ""])

    summary = report.summary
    lines.extend(["  Summary", f"  {SUMMARY_RULE}"])
    lines.append(f"  Files found     : {len(report.results)}")
    lines.append(f"  Tracks analysed : {summary.track_count}")
    if summary.is_empty:
        lines.append("  Album DR        : n/a (no measurable tracks)")
    else:
        lines.append(f"  Album DR        : DR{summary.album_dr}")
        lines.append(f"  DR range        : {summary.dr_range}")
        lines.append(f"  DR rating       : {summary.rating.label}")
    lines.append("")

    if report.unmeasured:
        lines.extend(["  Not measured", f"  {SUMMARY_RULE}"])
        for result in report.unmeasured:
            detail = f" ({result.message})" if result.message else ""
            lines.append(f"  x {result.file_identifier}: {result.status.label}{detail}")
        lines.append("")

    lines.extend(
        [
            RULE,
            f"  DR Loudness Standard: {AppInfo.STANDARD_URL}",
            RULE,
        ]
    )
    return "\n".join(lines) + "\n"
