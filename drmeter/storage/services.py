"""File discovery and report writing."""

import logging
from pathlib import Path
from typing import Iterable, List, Optional

from ..core.config import FileConfig
from ..core.exceptions import ConfigurationError, ReportWriteError

logger = logging.getLogger(__name__)


def normalize_extensions(extensions: Iterable[str]) -> List[str]:
    """Lower-case extensions with a leading dot: "FLAC" -> ".flac"."""
    normalized = []
    for ext in extensions:
        ext = ext.strip().lower()
        if not ext:
            continue
        if not ext.startswith("."):
            ext = f".{ext}"
        if ext not in normalized:
            normalized.append(ext)
    return normalized


class LibraryScanner:
    """Finds candidate audio files in a folder."""

    def __init__(self, extensions: Optional[Iterable[str]] = None, recursive: bool = False):
        self.extensions = normalize_extensions(
            extensions or FileConfig.SUPPORTED_INPUT_FORMATS
        )
        if not self.extensions:
            raise ConfigurationError("No file extensions to scan for", parameter="extensions")
        self.recursive = recursive

    def matches(self, path: Path) -> bool:
        return path.is_file() and path.suffix.lower() in self.extensions

    def scan(self, folder: Path) -> List[Path]:
        """Matching files, sorted by path so the order is stable between runs."""
        if not folder.exists():
            raise ConfigurationError(f"Folder not found: {folder}", parameter="folder")
        if not folder.is_dir():
            raise ConfigurationError(f"Not a directory: {folder}", parameter="folder")

        candidates = folder.rglob("*") if self.recursive else folder.iterdir()
        files = sorted(path for path in candidates if self.matches(path))
        logger.debug(
            "Found %d file(s) matching %s in %s",
            len(files),
            ", ".join(self.extensions),
            folder,
        )
        return files


class ReportWriter:
    """Writes a rendered report to disk."""

    def write(self, text: str, output_path: Path) -> Path:
        """Write the report; failure is fatal to the run."""
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise ReportWriteError(
                "Failed to write report", file_path=str(output_path), details=str(e)
            )

        logger.debug("Report written to %s", output_path)
        return output_path
