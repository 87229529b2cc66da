"""Configuration constants and settings for the DR meter."""

from pathlib import Path


class DRStandard:
    """DR Loudness Standard measurement constants."""

    BLOCK_SECONDS = 3.0
    UPMOST_BLOCKS_RATIO = 0.2
    NTH_HIGHEST_PEAK = 2  # 1-based from the top
    MIN_BLOCKS = 2  # below this the top 20% is not a meaningful sample

    # Linear values below this render as the dB floor instead of -inf
    DB_EPSILON = 1e-10
    DB_FLOOR = -100.0


class RatingThresholds:
    """Lower bounds (inclusive) of each album DR rating."""

    EXCELLENT = 14
    GOOD = 10
    ACCEPTABLE = 8
    COMPRESSED = 6


class FileConfig:
    """File handling configuration."""

    SUPPORTED_INPUT_FORMATS = [".flac", ".wav", ".aiff", ".aif"]
    # libsndfile major formats accepted as lossless streams
    LOSSLESS_FORMATS = ["FLAC", "WAV", "WAVEX", "AIFF", "W64", "RF64"]
    DEFAULT_REPORT_NAME = "dr_report.txt"
    READ_CHUNK_FRAMES = 65536


class SubtypeBitDepth:
    """Bit depth of each libsndfile PCM/float subtype."""

    BITS = {
        "PCM_S8": 8,
        "PCM_U8": 8,
        "PCM_16": 16,
        "PCM_24": 24,
        "PCM_32": 32,
        "FLOAT": 32,
        "DOUBLE": 64,
    }


class AppInfo:
    """Application metadata."""

    NAME = "drmeter"
    VERSION = "1.0.0"
    DESCRIPTION = "Dynamic Range meter for lossless audio (DR Loudness Standard)"
    STANDARD_URL = "https://www.dynamicrange.de"


class Paths:
    """Default paths."""

    @staticmethod
    def default_report_path(folder: Path) -> Path:
        """Report file written next to the measured tracks."""
        return folder / FileConfig.DEFAULT_REPORT_NAME
