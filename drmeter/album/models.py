"""Album domain models."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..core.config import RatingThresholds


class DRRating(Enum):
    """Qualitative rating of an album DR value."""

    EXCELLENT = "Excellent"
    GOOD = "Good"
    ACCEPTABLE = "Acceptable"
    COMPRESSED = "Compressed"
    BRICKWALLED_OR_CLIPPED = "BrickwalledOrClipped"

    @classmethod
    def from_dr(cls, album_dr: int) -> "DRRating":
        """Map an album DR onto the fixed rating partition."""
        if album_dr >= RatingThresholds.EXCELLENT:
            return cls.EXCELLENT
        elif album_dr >= RatingThresholds.GOOD:
            return cls.GOOD
        elif album_dr >= RatingThresholds.ACCEPTABLE:
            return cls.ACCEPTABLE
        elif album_dr >= RatingThresholds.COMPRESSED:
            return cls.COMPRESSED
        else:
            return cls.BRICKWALLED_OR_CLIPPED

    @property
    def label(self) -> str:
        """Human-readable rating text."""
        return {
            DRRating.EXCELLENT: "Excellent, wide dynamic range",
            DRRating.GOOD: "Good",
            DRRating.ACCEPTABLE: "Acceptable",
            DRRating.COMPRESSED: "Compressed",
            DRRating.BRICKWALLED_OR_CLIPPED: "Heavily brick-walled / clipped",
        }[self]


@dataclass(frozen=True)
class AlbumSummary:
    """Album DR figures derived from the measured tracks of a folder."""

    track_count: int = 0
    album_dr: Optional[int] = None
    dr_min: Optional[int] = None
    dr_max: Optional[int] = None
    rating: Optional[DRRating] = None

    @property
    def is_empty(self) -> bool:
        """No measurable tracks, so no album DR and no rating."""
        return self.track_count == 0

    @property
    def dr_range(self) -> str:
        """DR range string, e.g. "DR10 - DR14"."""
        if self.is_empty:
            return "n/a"
        return f"DR{self.dr_min} - DR{self.dr_max}"
