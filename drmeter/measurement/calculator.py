"""DR Loudness Standard formula applied to the blocks of one track.

Per channel:

1. blocks with an RMS of exactly zero (digital silence) are dropped;
2. the remaining blocks are sorted by RMS, loudest first;
3. the loudest ``k = max(1, round(0.2 * n))`` blocks are kept;
4. their RMS values are power-averaged: ``rms_top = sqrt(mean(rms**2))``;
5. the reference peak is the second-highest block peak of the channel, so a
   single transient click cannot dominate;
6. ``dr = 20 * log10(peak / rms_top)``.

The track value is the arithmetic mean of the channel values, rounded half
away from zero.
"""

import logging
import math
from typing import List, Optional, Sequence

from .models import SampleBlock, TrackDR
from ..core.config import DRStandard
from ..core.exceptions import (
    ConfigurationError,
    InsufficientDataError,
    InsufficientReason,
)

logger = logging.getLogger(__name__)


def round_half_away(value: float) -> int:
    """Round to the nearest integer, ties away from zero (6.5 -> 7, -6.5 -> -7)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def to_dbfs(
    value: float,
    floor: float = DRStandard.DB_FLOOR,
    epsilon: float = DRStandard.DB_EPSILON,
) -> float:
    """Linear full-scale amplitude to dBFS; zero and near-zero map to the floor."""
    if value < epsilon:
        return floor
    return 20.0 * math.log10(value)


class TrackDRCalculator:
    """Reduces the per-channel block lists of a track to its DR value."""

    def __init__(
        self,
        upmost_ratio: float = DRStandard.UPMOST_BLOCKS_RATIO,
        nth_highest_peak: int = DRStandard.NTH_HIGHEST_PEAK,
        min_blocks: int = DRStandard.MIN_BLOCKS,
    ):
        if not 0.0 < upmost_ratio <= 1.0:
            raise ConfigurationError(
                "Upmost block ratio must be in (0, 1]", parameter="upmost_ratio"
            )
        if nth_highest_peak < 1:
            raise ConfigurationError(
                "Peak rank must be at least 1", parameter="nth_highest_peak"
            )
        if min_blocks < nth_highest_peak:
            raise ConfigurationError(
                "Minimum block count cannot be below the peak rank",
                parameter="min_blocks",
            )

        self.upmost_ratio = upmost_ratio
        self.nth_highest_peak = nth_highest_peak
        self.min_blocks = min_blocks

    def upmost_count(self, block_count: int) -> int:
        """How many of the loudest blocks enter the RMS average."""
        return max(1, round_half_away(block_count * self.upmost_ratio))

    def loudest_rms(self, blocks: Sequence[SampleBlock]) -> float:
        """Power mean of the loudest blocks' RMS, ignoring silent blocks."""
        loud = sorted((b.rms for b in blocks if not b.is_silent), reverse=True)
        if not loud:
            return 0.0
        top = loud[: self.upmost_count(len(loud))]
        return math.sqrt(sum(r * r for r in top) / len(top))

    def reference_peak(self, blocks: Sequence[SampleBlock]) -> float:
        """The nth-highest block peak of a channel (second-highest by default)."""
        peaks = sorted((b.peak for b in blocks), reverse=True)
        return peaks[min(self.nth_highest_peak, len(peaks)) - 1]

    def channel_dr(self, blocks: Sequence[SampleBlock]) -> float:
        """Unrounded DR of a single channel.

        Raises InsufficientDataError when the channel is too short or silent.
        """
        if len(blocks) < self.min_blocks:
            raise InsufficientDataError(
                "Too short to measure",
                reason=InsufficientReason.TOO_SHORT,
                details=f"{len(blocks)} block(s), need {self.min_blocks}",
            )

        rms_top = self.loudest_rms(blocks)
        if rms_top == 0.0:
            raise InsufficientDataError(
                "No non-silent blocks", reason=InsufficientReason.SILENT
            )

        peak = self.reference_peak(blocks)
        if peak == 0.0:
            raise InsufficientDataError(
                "Too little non-silent audio to measure",
                reason=InsufficientReason.TOO_SHORT,
                details=f"fewer than {self.nth_highest_peak} non-silent blocks",
            )

        return 20.0 * math.log10(peak / rms_top)

    def calculate(self, channel_blocks: Sequence[Sequence[SampleBlock]]) -> TrackDR:
        """Combine all channels of a track into a TrackDR.

        Silent channels are left out of the mean; a track where no channel can
        be measured raises InsufficientDataError.
        """
        if not channel_blocks:
            raise InsufficientDataError(
                "Track has no channels", reason=InsufficientReason.EMPTY
            )

        block_count = min(len(blocks) for blocks in channel_blocks)
        if block_count < self.min_blocks:
            raise InsufficientDataError(
                "Too short to measure",
                reason=InsufficientReason.TOO_SHORT,
                details=f"{block_count} block(s), need {self.min_blocks}",
            )

        values: List[Optional[float]] = []
        reasons: List[InsufficientReason] = []
        for channel, blocks in enumerate(channel_blocks):
            try:
                values.append(self.channel_dr(blocks))
            except InsufficientDataError as e:
                logger.debug("Channel %d has no DR: %s", channel, e)
                values.append(None)
                reasons.append(e.reason)

        measured = [v for v in values if v is not None]
        if not measured:
            if all(reason is InsufficientReason.SILENT for reason in reasons):
                raise InsufficientDataError(
                    "Track is silent", reason=InsufficientReason.SILENT
                )
            raise InsufficientDataError(
                "Too little non-silent audio to measure",
                reason=InsufficientReason.TOO_SHORT,
            )

        if reasons:
            logger.warning(
                "%d of %d channel(s) left out of the DR mean",
                len(reasons),
                len(values),
            )

        dr_value = sum(measured) / len(measured)

        all_blocks = [b for blocks in channel_blocks for b in blocks]
        peak = max(b.peak for b in all_blocks)
        rms = math.sqrt(sum(b.rms * b.rms for b in all_blocks) / len(all_blocks))

        return TrackDR(
            dr_score=round_half_away(dr_value),
            dr_value=dr_value,
            channel_values=tuple(values),
            peak=peak,
            rms=rms,
            peak_dbfs=to_dbfs(peak),
            rms_dbfs=to_dbfs(rms),
            block_count=block_count,
        )
