"""End-to-end tests for the track measurement service."""

import numpy as np
import pytest

from drmeter.album.services import AlbumAggregator
from drmeter.core.exceptions import InsufficientDataError, InsufficientReason
from drmeter.decoding.models import StreamInfo
from drmeter.measurement.models import MeasurementStatus
from drmeter.measurement.services import TrackMeasurer
from drmeter.storage.services import LibraryScanner


@pytest.fixture
def measurer():
    return TrackMeasurer(chunk_frames=5000)


def dynamic_track(seconds: float, sr: int, quiet: float = 0.05, loud: float = 0.5):
    """Sine whose level alternates between quiet and loud every 3 s."""
    t = np.arange(int(seconds * sr)) / sr
    level = np.where((t // 3) % 2 == 0, quiet, loud)
    mono = level * np.sin(2 * np.pi * 100.0 * t)
    return np.column_stack([mono, mono])


def test_measure_sine_file(measurer, signals, write_track):
    path = write_track("sine.flac", signals.sine(15.0, amplitude=0.5))
    result = measurer.measure_file(path)

    assert result.status is MeasurementStatus.MEASURED
    m = result.measurement
    assert m.file_identifier == "sine.flac"
    assert m.dr_score == 3
    assert m.peak_dbfs == pytest.approx(-6.02, abs=0.01)
    assert m.rms_dbfs == pytest.approx(-9.03, abs=0.01)
    assert m.duration == pytest.approx(15.0)
    assert (m.sample_rate, m.bit_depth, m.channel_count) == (signals.sr, 16, 2)


def test_full_scale_square_file_is_dr0(measurer, signals, write_track):
    path = write_track("square.wav", signals.square(12.0), subtype="FLOAT")
    result = measurer.measure_file(path)

    assert result.status is MeasurementStatus.MEASURED
    assert result.measurement.dr_score == 0
    assert result.measurement.peak_dbfs == pytest.approx(0.0, abs=1e-6)
    assert result.measurement.bit_depth == 32


def test_dynamic_track_scores_higher_than_sine(measurer, signals, write_track):
    path = write_track("dynamic.flac", dynamic_track(30.0, signals.sr))
    result = measurer.measure_file(path)

    # loudest 20% are the 0.5 blocks: same ratio as a plain sine
    assert result.measurement.dr_score == 3
    assert result.measurement.rms_dbfs < -9.03


def test_trailing_second_does_not_change_the_result(measurer, signals, write_track):
    exact = write_track("exact.flac", signals.sine(12.0))
    longer = write_track("longer.flac", signals.sine(13.0))

    a = measurer.measure_file(exact).measurement
    b = measurer.measure_file(longer).measurement
    assert a.dr_value == pytest.approx(b.dr_value)
    assert b.duration == pytest.approx(13.0)


def test_silent_file_is_reported_not_scored(measurer, signals, write_track):
    path = write_track("silence.flac", np.zeros((signals.sr * 12, 2)))
    result = measurer.measure_file(path)

    assert result.status is MeasurementStatus.SILENT
    assert result.measurement is None
    assert not result.is_measured
    assert result.message


def test_short_file_is_too_short(measurer, signals, write_track):
    path = write_track("short.flac", signals.sine(5.0))
    result = measurer.measure_file(path)
    assert result.status is MeasurementStatus.TOO_SHORT
    assert result.measurement is None


def test_zero_length_stream_is_empty(measurer):
    info = StreamInfo(sample_rate=44100, bit_depth=16, channel_count=2, frame_count=0)
    with pytest.raises(InsufficientDataError) as excinfo:
        measurer.measure_stream([], info, "empty.flac")
    assert excinfo.value.reason is InsufficientReason.EMPTY
    assert excinfo.value.file_path == "empty.flac"


def test_decode_failure_is_isolated(measurer, signals, write_track, tmp_path):
    bad = tmp_path / "01 broken.flac"
    bad.write_bytes(b"\x00" * 128)
    good = write_track("02 good.flac", signals.sine(9.0))

    results = measurer.measure_files([bad, good])

    assert [r.file_identifier for r in results] == ["01 broken.flac", "02 good.flac"]
    assert results[0].status is MeasurementStatus.DECODE_ERROR
    assert results[0].message
    assert results[1].status is MeasurementStatus.MEASURED


def test_other_measurement_errors_are_isolated(signals, write_track):
    first = write_track("01 a.flac", signals.sine(9.0))
    second = write_track("02 b.flac", signals.sine(9.0))
    # An invalid block length fails every track inside the accumulator
    measurer = TrackMeasurer(block_seconds=0.0)

    results = measurer.measure_files([first, second])

    assert [r.status for r in results] == [MeasurementStatus.DECODE_ERROR] * 2
    assert all("Block duration" in r.message for r in results)


def test_measure_files_reports_progress_and_relative_names(
    measurer, signals, write_track, tmp_path
):
    disc = tmp_path / "disc1"
    first = write_track("a.flac", signals.sine(6.0), folder=disc)
    second = write_track("b.flac", signals.sine(6.0), folder=disc)
    seen = []

    results = measurer.measure_files(
        [first, second],
        base_dir=tmp_path,
        on_result=lambda i, total, path, result, elapsed: seen.append((i, total, path)),
    )

    assert [r.file_identifier for r in results] == ["disc1/a.flac", "disc1/b.flac"]
    assert seen == [(1, 2, first), (2, 2, second)]


def test_rescanning_a_folder_is_idempotent(measurer, signals, write_track, tmp_path):
    write_track("01.flac", signals.sine(9.0, amplitude=0.3))
    write_track("02.flac", dynamic_track(15.0, signals.sr))
    write_track("03.flac", signals.square(9.0, amplitude=0.5), subtype="PCM_24")

    def run():
        files = LibraryScanner().scan(tmp_path)
        results = measurer.measure_files(files, base_dir=tmp_path)
        return results, AlbumAggregator().aggregate(results)

    first_results, first_summary = run()
    second_results, second_summary = run()

    assert first_summary == second_summary
    assert first_summary.track_count == 3
    assert [r.measurement for r in first_results] == [
        r.measurement for r in second_results
    ]
