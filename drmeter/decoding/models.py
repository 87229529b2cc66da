"""Decoding domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StreamInfo:
    """Stream parameters reported by the decoder for one track."""

    sample_rate: int
    bit_depth: int
    channel_count: int
    frame_count: int
    format: str = ""
    subtype: str = ""

    @property
    def duration(self) -> float:
        """Duration in seconds."""
        if self.sample_rate <= 0:
            return 0.0
        return self.frame_count / self.sample_rate
