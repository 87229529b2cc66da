"""CLI tests using Typer's CliRunner."""

import numpy as np
import pytest
from typer.testing import CliRunner

from drmeter.interface.cli import app
from drmeter.measurement.services import TrackMeasurer


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def album(tmp_path, signals, write_track):
    """Folder with two measurable tracks, one silent track and one broken file."""
    folder = tmp_path / "album"
    write_track("01 Opening.flac", signals.sine(9.0, amplitude=0.5), folder=folder)
    write_track("02 Closing.flac", signals.square(9.0, amplitude=0.5), folder=folder)
    write_track("03 Silence.flac", np.zeros((signals.sr * 9, 2)), folder=folder)
    (folder / "04 Broken.flac").write_bytes(b"fLaC-not-really")
    (folder / "cover.jpg").write_bytes(b"\xff\xd8")
    return folder


def test_scan_writes_report(runner, album):
    result = runner.invoke(app, ["scan", str(album)])
    assert result.exit_code == 0, result.output

    report = (album / "dr_report.txt").read_text(encoding="utf-8")
    for name in ["01 Opening.flac", "02 Closing.flac", "03 Silence.flac", "04 Broken.flac"]:
        assert name in report
    assert "cover.jpg" not in report
    assert "Tracks analysed : 2" in report
    # DR3 and DR0 average to 1.5 -> DR2
    assert "Album DR        : DR2" in report
    assert "DR range        : DR0 - DR3" in report
    assert "Heavily brick-walled / clipped" in report
    assert "silent, no DR" in report
    assert "decode error" in report


def test_scan_quiet_with_custom_output(runner, album, tmp_path):
    target = tmp_path / "out" / "report.txt"
    result = runner.invoke(app, ["scan", str(album), "--quiet", "--output", str(target)])

    assert result.exit_code == 0, result.output
    assert target.exists()
    assert not (album / "dr_report.txt").exists()
    assert "Album Summary" not in result.output


def test_scan_is_repeatable(runner, album):
    runner.invoke(app, ["scan", str(album), "-q"])
    first = (album / "dr_report.txt").read_text(encoding="utf-8")
    runner.invoke(app, ["scan", str(album), "-q"])
    second = (album / "dr_report.txt").read_text(encoding="utf-8")

    def body(text):
        return [line for line in text.splitlines() if "Generated" not in line]

    assert body(first) == body(second)


def test_scan_missing_folder_fails(runner, tmp_path):
    result = runner.invoke(app, ["scan", str(tmp_path / "missing")])
    assert result.exit_code == 1


def test_scan_file_instead_of_folder_fails(runner, tmp_path):
    target = tmp_path / "a.flac"
    target.write_bytes(b"")
    result = runner.invoke(app, ["scan", str(target)])
    assert result.exit_code == 1


def test_scan_empty_folder_succeeds(runner, tmp_path):
    result = runner.invoke(app, ["scan", str(tmp_path)])
    assert result.exit_code == 0
    assert not (tmp_path / "dr_report.txt").exists()


def test_scan_report_write_failure_is_fatal(runner, album, tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_bytes(b"")
    result = runner.invoke(app, ["scan", str(album), "-q", "-o", str(blocker / "r.txt")])
    assert result.exit_code == 1


def test_track_command(runner, signals, write_track):
    path = write_track("tone.flac", signals.sine(9.0))
    result = runner.invoke(app, ["track", str(path)])
    assert result.exit_code == 0, result.output
    assert "DR3" in result.output


def test_track_command_decode_error(runner, tmp_path):
    path = tmp_path / "bad.flac"
    path.write_bytes(b"nope")
    result = runner.invoke(app, ["track", str(path)])
    assert result.exit_code == 1


def test_track_command_missing_file(runner, tmp_path):
    result = runner.invoke(app, ["track", str(tmp_path / "missing.flac")])
    assert result.exit_code == 1


@pytest.fixture
def interrupt_on_second_file(monkeypatch):
    """Make the measurer raise KeyboardInterrupt when it reaches the second file."""
    original = TrackMeasurer.measure_file
    calls = []

    def measure_file(self, audio_file, file_identifier=None):
        calls.append(audio_file)
        if len(calls) == 2:
            raise KeyboardInterrupt
        return original(self, audio_file, file_identifier)

    monkeypatch.setattr(TrackMeasurer, "measure_file", measure_file)
    return calls


def test_scan_interrupted_writes_no_report(runner, album, interrupt_on_second_file):
    result = runner.invoke(app, ["scan", str(album)])

    assert result.exit_code == 130
    assert len(interrupt_on_second_file) == 2
    assert not (album / "dr_report.txt").exists()
    assert "Interrupted" in result.output


def test_scan_interrupted_quietly(runner, album, interrupt_on_second_file):
    result = runner.invoke(app, ["scan", str(album), "-q"])

    assert result.exit_code == 130
    assert not (album / "dr_report.txt").exists()
    assert "Interrupted" not in result.output
