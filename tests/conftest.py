"""Shared fixtures: synthetic signals and audio files written to tmp_path."""

from pathlib import Path
from types import SimpleNamespace

import numpy as np
import pytest
import soundfile as sf

from drmeter.measurement.models import MeasurementStatus, TrackMeasurement, TrackResult

# Low sample rate keeps 3 s blocks small and the tests fast
SR = 8000


def sine(
    seconds: float,
    freq: float = 100.0,
    amplitude: float = 0.5,
    channels: int = 2,
    sr: int = SR,
) -> np.ndarray:
    """(frames, channels) sine wave."""
    t = np.arange(int(round(seconds * sr))) / sr
    mono = amplitude * np.sin(2 * np.pi * freq * t)
    return np.tile(mono[:, None], (1, channels))


def square(seconds: float, amplitude: float = 1.0, channels: int = 2, sr: int = SR) -> np.ndarray:
    """(frames, channels) square wave alternating +amplitude / -amplitude."""
    frames = int(round(seconds * sr))
    mono = np.where(np.arange(frames) % 2 == 0, amplitude, -amplitude)
    return np.tile(mono[:, None], (1, channels)).astype(np.float64)


@pytest.fixture
def signals():
    """Access to the signal generators from tests."""
    return SimpleNamespace(sine=sine, square=square, sr=SR)


@pytest.fixture
def write_track(tmp_path: Path):
    """Factory writing a (frames, channels) array as an audio file under tmp_path."""

    def _write(
        name: str,
        data: np.ndarray,
        sr: int = SR,
        subtype: str = "PCM_16",
        folder: Path = None,
    ) -> Path:
        path = (folder or tmp_path) / name
        path.parent.mkdir(parents=True, exist_ok=True)
        sf.write(str(path), data, sr, subtype=subtype)
        return path

    return _write


@pytest.fixture
def measured_result():
    """Factory for a measured TrackResult with a given DR score."""

    def _make(name: str, dr_score: int, duration: float = 185.0) -> TrackResult:
        measurement = TrackMeasurement(
            file_identifier=name,
            duration=duration,
            sample_rate=44100,
            bit_depth=16,
            channel_count=2,
            dr_score=dr_score,
            peak_dbfs=-0.1,
            rms_dbfs=-12.5,
            dr_value=float(dr_score),
            channel_values=(float(dr_score), float(dr_score)),
        )
        return TrackResult(name, MeasurementStatus.MEASURED, measurement=measurement)

    return _make
