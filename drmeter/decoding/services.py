"""Audio decoding service backed by libsndfile."""

import logging
from pathlib import Path
from typing import Iterator, Optional

import numpy as np
import soundfile as sf

from .models import StreamInfo
from ..core.config import FileConfig, SubtypeBitDepth
from ..core.exceptions import DecodeError

logger = logging.getLogger(__name__)


class DecodedTrack:
    """An open lossless stream read sequentially, one chunk of frames at a time."""

    def __init__(self, handle: sf.SoundFile, info: StreamInfo, file_path: Path):
        self._handle = handle
        self.info = info
        self.file_path = file_path

    def read_frames(
        self, chunk_frames: int = FileConfig.READ_CHUNK_FRAMES
    ) -> Iterator[np.ndarray]:
        """Yield (frames, channels) float64 arrays normalized to [-1.0, 1.0].

        The stream is single pass: frames already read are not returned again.
        """
        try:
            for chunk in self._handle.blocks(
                blocksize=chunk_frames, dtype="float64", always_2d=True
            ):
                yield chunk
        except Exception as e:
            raise DecodeError(
                "Failed while reading audio frames",
                file_path=str(self.file_path),
                details=str(e),
            )

    def close(self) -> None:
        self._handle.close()

    def __enter__(self) -> "DecodedTrack":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class AudioDecoder:
    """Opens lossless audio files and reports their stream parameters."""

    def __init__(self, allowed_formats: Optional[list] = None):
        self.allowed_formats = allowed_formats or FileConfig.LOSSLESS_FORMATS

    def open(self, file_path: Path) -> DecodedTrack:
        """Open a file for sequential reading.

        Raises DecodeError when the file cannot be read or is not a lossless
        container.
        """
        try:
            handle = sf.SoundFile(str(file_path), mode="r")
        except Exception as e:
            raise DecodeError(
                "Cannot open audio file", file_path=str(file_path), details=str(e)
            )

        if handle.format not in self.allowed_formats:
            fmt = handle.format
            handle.close()
            raise DecodeError(
                "Not a lossless stream",
                file_path=str(file_path),
                details=f"unsupported container {fmt}",
            )

        bit_depth = SubtypeBitDepth.BITS.get(handle.subtype)
        if bit_depth is None:
            subtype = handle.subtype
            handle.close()
            raise DecodeError(
                "Unsupported sample encoding",
                file_path=str(file_path),
                details=subtype,
            )

        info = StreamInfo(
            sample_rate=handle.samplerate,
            bit_depth=bit_depth,
            channel_count=handle.channels,
            frame_count=handle.frames,
            format=handle.format,
            subtype=handle.subtype,
        )
        logger.debug(
            "Opened %s: %s %s, %d Hz, %d ch, %d frames",
            Path(file_path).name,
            info.format,
            info.subtype,
            info.sample_rate,
            info.channel_count,
            info.frame_count,
        )
        return DecodedTrack(handle, info, Path(file_path))

    def get_stream_info(self, file_path: Path) -> StreamInfo:
        """Read stream parameters without decoding any samples."""
        with self.open(file_path) as track:
            return track.info
