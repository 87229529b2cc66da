"""Measurement domain models."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


@dataclass(frozen=True)
class SampleBlock:
    """Peak and RMS of one fixed-duration block of one channel."""

    channel_index: int
    index: int
    peak: float
    rms: float

    @property
    def is_silent(self) -> bool:
        """True digital silence: every sample in the block is zero."""
        return self.rms == 0.0


@dataclass(frozen=True)
class TrackDR:
    """Result of reducing all blocks of a track with the DR formula."""

    dr_score: int
    dr_value: float
    channel_values: Tuple[Optional[float], ...]
    peak: float
    rms: float
    peak_dbfs: float
    rms_dbfs: float
    block_count: int

    @property
    def measured_channels(self) -> int:
        """Number of channels that contributed to the mean."""
        return sum(1 for value in self.channel_values if value is not None)


@dataclass(frozen=True)
class TrackMeasurement:
    """Measured DR figures for a single track."""

    file_identifier: str
    duration: float
    sample_rate: int
    bit_depth: int
    channel_count: int
    dr_score: int
    peak_dbfs: float
    rms_dbfs: float
    dr_value: float = 0.0
    channel_values: Tuple[Optional[float], ...] = ()

    @property
    def duration_str(self) -> str:
        """Human-readable duration string, MM:SS or HH:MM:SS."""
        total = int(self.duration)
        hours = total // 3600
        minutes = (total % 3600) // 60
        seconds = total % 60
        if hours > 0:
            return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
        return f"{minutes:02d}:{seconds:02d}"

    @property
    def sample_format(self) -> str:
        """Compact "kHz/bits/channels" label, e.g. 44.1/16/2."""
        return f"{self.sample_rate / 1000:g}/{self.bit_depth}/{self.channel_count}"

    @property
    def dr_label(self) -> str:
        return f"DR{self.dr_score}"


class MeasurementStatus(Enum):
    """Outcome of measuring one discovered file."""

    MEASURED = "measured"
    EMPTY = "empty"
    TOO_SHORT = "too_short"
    SILENT = "silent"
    DECODE_ERROR = "decode_error"

    @property
    def label(self) -> str:
        """Short status text shown in place of a DR value."""
        return {
            MeasurementStatus.MEASURED: "measured",
            MeasurementStatus.EMPTY: "empty track",
            MeasurementStatus.TOO_SHORT: "too short to measure",
            MeasurementStatus.SILENT: "silent, no DR",
            MeasurementStatus.DECODE_ERROR: "decode error",
        }[self]


@dataclass(frozen=True)
class TrackResult:
    """Report row for one discovered file, measured or not."""

    file_identifier: str
    status: MeasurementStatus
    measurement: Optional[TrackMeasurement] = None
    message: Optional[str] = None

    @property
    def is_measured(self) -> bool:
        return self.status is MeasurementStatus.MEASURED and self.measurement is not None
