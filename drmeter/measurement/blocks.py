"""Reduction of a decoded sample stream into fixed-duration blocks.

Each channel is cut into consecutive, non-overlapping windows of
``round(sample_rate * block_seconds)`` frames. Every full window is reduced to
its peak magnitude and RMS. A trailing window shorter than the full length is
discarded so that a short tail cannot pull the RMS distribution down.

Silent blocks are kept here; deciding what counts for the DR value is the
calculator's job.
"""

import logging
from typing import Iterable, List, Tuple

import numpy as np

from .models import SampleBlock
from ..core.config import DRStandard
from ..core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ChannelBlocks = Tuple[Tuple[SampleBlock, ...], ...]


def block_frames_for(sample_rate: int, block_seconds: float = DRStandard.BLOCK_SECONDS) -> int:
    """Number of frames in one block at the given sample rate."""
    return int(round(sample_rate * block_seconds))


def reduce_block(block: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Per-channel (peak, rms) of a (frames, channels) block."""
    peak = np.max(np.abs(block), axis=0)
    rms = np.sqrt(np.mean(np.square(block), axis=0))
    # sqrt(mean(x^2)) <= max|x| holds exactly; clamp the last-ulp float noise
    return peak, np.minimum(rms, peak)


class BlockAccumulator:
    """Buffers incoming frames and emits one SampleBlock per channel per full block."""

    def __init__(
        self,
        sample_rate: int,
        channel_count: int,
        block_seconds: float = DRStandard.BLOCK_SECONDS,
    ):
        if sample_rate <= 0:
            raise ConfigurationError(
                "Sample rate must be positive", parameter="sample_rate"
            )
        if channel_count <= 0:
            raise ConfigurationError(
                "Channel count must be positive", parameter="channel_count"
            )
        if block_seconds <= 0:
            raise ConfigurationError(
                "Block duration must be positive", parameter="block_seconds"
            )

        self.sample_rate = sample_rate
        self.channel_count = channel_count
        self.block_frames = block_frames_for(sample_rate, block_seconds)
        self.frames_seen = 0

        self._pending = np.empty((0, channel_count), dtype=np.float64)
        self._blocks: List[List[SampleBlock]] = [[] for _ in range(channel_count)]
        self._finished = False

    @property
    def block_count(self) -> int:
        """Full blocks emitted so far (per channel)."""
        return len(self._blocks[0])

    def feed(self, frames: np.ndarray) -> int:
        """Add a chunk of frames; returns the number of blocks completed by it."""
        if self._finished:
            raise RuntimeError("BlockAccumulator.feed() called after finish()")

        frames = np.asarray(frames, dtype=np.float64)
        if frames.ndim == 1 and self.channel_count == 1:
            frames = frames.reshape(-1, 1)
        if frames.ndim != 2 or frames.shape[1] != self.channel_count:
            raise ValueError(
                f"Expected frames of shape (n, {self.channel_count}), got {frames.shape}"
            )
        if len(frames) == 0:
            return 0

        self.frames_seen += len(frames)
        data = np.concatenate([self._pending, frames]) if len(self._pending) else frames

        full = len(data) // self.block_frames
        if full:
            usable = data[: full * self.block_frames]
            windows = usable.reshape(full, self.block_frames, self.channel_count)
            for window in windows:
                self._emit(window)

        self._pending = data[full * self.block_frames:].copy()
        return full

    def _emit(self, window: np.ndarray) -> None:
        index = self.block_count
        peaks, rms_values = reduce_block(window)
        for channel in range(self.channel_count):
            self._blocks[channel].append(
                SampleBlock(
                    channel_index=channel,
                    index=index,
                    peak=float(peaks[channel]),
                    rms=float(rms_values[channel]),
                )
            )

    def finish(self) -> ChannelBlocks:
        """Drop the trailing partial block and return blocks grouped by channel."""
        if not self._finished:
            self._finished = True
            if len(self._pending):
                logger.debug(
                    "Discarding trailing partial block of %d frames (%.2fs)",
                    len(self._pending),
                    len(self._pending) / self.sample_rate,
                )
            self._pending = np.empty((0, self.channel_count), dtype=np.float64)

        return tuple(tuple(channel) for channel in self._blocks)


def accumulate_blocks(
    chunks: Iterable[np.ndarray],
    sample_rate: int,
    channel_count: int,
    block_seconds: float = DRStandard.BLOCK_SECONDS,
) -> ChannelBlocks:
    """Run a whole chunk stream through a fresh BlockAccumulator."""
    accumulator = BlockAccumulator(sample_rate, channel_count, block_seconds)
    for chunk in chunks:
        accumulator.feed(chunk)
    return accumulator.finish()
