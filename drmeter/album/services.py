"""Album aggregation service."""

import logging
from typing import Iterable

from .models import AlbumSummary, DRRating
from ..measurement.calculator import round_half_away
from ..measurement.models import TrackResult

logger = logging.getLogger(__name__)


class AlbumAggregator:
    """Folds the measured tracks of a folder into one AlbumSummary."""

    def aggregate(self, results: Iterable[TrackResult]) -> AlbumSummary:
        """Summarize measured results; unmeasurable ones are ignored.

        The summary only depends on the set of DR scores, so the order of
        ``results`` does not matter.
        """
        scores = [r.measurement.dr_score for r in results if r.is_measured]
        if not scores:
            logger.info("No measurable tracks, album summary is empty")
            return AlbumSummary()

        album_dr = round_half_away(sum(scores) / len(scores))
        summary = AlbumSummary(
            track_count=len(scores),
            album_dr=album_dr,
            dr_min=min(scores),
            dr_max=max(scores),
            rating=DRRating.from_dr(album_dr),
        )
        logger.debug(
            "Album DR%d over %d track(s), range %s",
            album_dr,
            summary.track_count,
            summary.dr_range,
        )
        return summary
