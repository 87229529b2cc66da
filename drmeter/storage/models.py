"""Storage domain models."""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List

from ..album.models import AlbumSummary
from ..measurement.models import MeasurementStatus, TrackResult


@dataclass
class DRReport:
    """Everything handed to a renderer: one row per file plus the album summary."""

    folder: Path
    results: List[TrackResult]
    summary: AlbumSummary
    generated_at: datetime = field(default_factory=datetime.now)

    @property
    def measured(self) -> List[TrackResult]:
        """Rows that carry a DR value."""
        return [r for r in self.results if r.is_measured]

    @property
    def unmeasured(self) -> List[TrackResult]:
        """Rows shown with a placeholder instead of a DR value."""
        return [r for r in self.results if not r.is_measured]

    @property
    def errors(self) -> List[TrackResult]:
        """Files that could not be decoded."""
        return [r for r in self.results if r.status is MeasurementStatus.DECODE_ERROR]
