"""Track measurement service: decoder -> blocks -> DR figures."""

import logging
import time
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence

import numpy as np

from .blocks import BlockAccumulator
from .calculator import TrackDRCalculator
from .models import MeasurementStatus, TrackMeasurement, TrackResult
from ..core.config import DRStandard, FileConfig
from ..core.exceptions import (
    DecodeError,
    DRMeterError,
    InsufficientDataError,
    InsufficientReason,
)
from ..decoding.models import StreamInfo
from ..decoding.services import AudioDecoder

logger = logging.getLogger(__name__)

STATUS_FOR_REASON = {
    InsufficientReason.EMPTY: MeasurementStatus.EMPTY,
    InsufficientReason.TOO_SHORT: MeasurementStatus.TOO_SHORT,
    InsufficientReason.SILENT: MeasurementStatus.SILENT,
}

ResultCallback = Callable[[int, int, Path, TrackResult, float], None]


class TrackMeasurer:
    """Measures tracks one at a time; per-track failures become placeholder results."""

    def __init__(
        self,
        decoder: Optional[AudioDecoder] = None,
        calculator: Optional[TrackDRCalculator] = None,
        block_seconds: float = DRStandard.BLOCK_SECONDS,
        chunk_frames: int = FileConfig.READ_CHUNK_FRAMES,
    ):
        self.decoder = decoder or AudioDecoder()
        self.calculator = calculator or TrackDRCalculator()
        self.block_seconds = block_seconds
        self.chunk_frames = chunk_frames

    def measure_stream(
        self,
        chunks: Iterable[np.ndarray],
        info: StreamInfo,
        file_identifier: str,
    ) -> TrackMeasurement:
        """Measure an already-decoded frame stream.

        Raises InsufficientDataError for empty, too short or silent tracks.
        """
        accumulator = BlockAccumulator(
            info.sample_rate, info.channel_count, self.block_seconds
        )
        for chunk in chunks:
            accumulator.feed(chunk)
        channel_blocks = accumulator.finish()

        if accumulator.frames_seen == 0:
            raise InsufficientDataError(
                "Track contains no audio",
                reason=InsufficientReason.EMPTY,
                file_path=file_identifier,
            )

        try:
            track_dr = self.calculator.calculate(channel_blocks)
        except InsufficientDataError as e:
            e.file_path = file_identifier
            raise

        # Prefer the frames actually decoded over the header's frame count
        duration = accumulator.frames_seen / info.sample_rate
        logger.debug(
            "%s: DR%d (%.3f), %d blocks, peak %.2f dBFS, rms %.2f dBFS",
            file_identifier,
            track_dr.dr_score,
            track_dr.dr_value,
            track_dr.block_count,
            track_dr.peak_dbfs,
            track_dr.rms_dbfs,
        )

        return TrackMeasurement(
            file_identifier=file_identifier,
            duration=duration,
            sample_rate=info.sample_rate,
            bit_depth=info.bit_depth,
            channel_count=info.channel_count,
            dr_score=track_dr.dr_score,
            peak_dbfs=track_dr.peak_dbfs,
            rms_dbfs=track_dr.rms_dbfs,
            dr_value=track_dr.dr_value,
            channel_values=track_dr.channel_values,
        )

    def measure_file(
        self, audio_file: Path, file_identifier: Optional[str] = None
    ) -> TrackResult:
        """Measure one file; never raises for per-track measurement problems."""
        name = file_identifier or audio_file.name
        try:
            with self.decoder.open(audio_file) as track:
                measurement = self.measure_stream(
                    track.read_frames(self.chunk_frames), track.info, name
                )
        except DecodeError as e:
            logger.warning("Skipping %s: %s", name, e)
            return TrackResult(name, MeasurementStatus.DECODE_ERROR, message=str(e))
        except InsufficientDataError as e:
            logger.info("No DR for %s: %s", name, e)
            return TrackResult(name, STATUS_FOR_REASON[e.reason], message=str(e))
        except DRMeterError as e:
            logger.warning("Could not measure %s: %s", name, e)
            return TrackResult(name, MeasurementStatus.DECODE_ERROR, message=str(e))

        return TrackResult(name, MeasurementStatus.MEASURED, measurement=measurement)

    def measure_files(
        self,
        audio_files: Sequence[Path],
        base_dir: Optional[Path] = None,
        on_result: Optional[ResultCallback] = None,
    ) -> List[TrackResult]:
        """Measure files in order and return one result per file.

        Results are only returned once every file has been processed; an
        interrupt propagates and nothing partial is handed back.
        """
        results: List[TrackResult] = []
        total = len(audio_files)

        for i, audio_file in enumerate(audio_files):
            identifier = None
            if base_dir is not None:
                identifier = audio_file.relative_to(base_dir).as_posix()

            started = time.perf_counter()
            result = self.measure_file(audio_file, identifier)
            elapsed = time.perf_counter() - started

            results.append(result)
            if on_result is not None:
                on_result(i + 1, total, audio_file, result, elapsed)

        return results
