"""Custom exceptions for the DR meter."""

from enum import Enum


class DRMeterError(Exception):
    """Base exception for all DR meter errors."""

    def __init__(self, message: str, details: str = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class DecodeError(DRMeterError):
    """Raised when a file is unreadable or not a lossless stream."""

    def __init__(self, message: str, file_path: str = None, details: str = None):
        super().__init__(message, details)
        self.file_path = file_path


class InsufficientReason(Enum):
    """Why a track could not produce a DR value."""

    EMPTY = "empty"
    TOO_SHORT = "too_short"
    SILENT = "silent"


class InsufficientDataError(DRMeterError):
    """Raised when a track is empty, too short or fully silent."""

    def __init__(
        self,
        message: str,
        reason: InsufficientReason,
        file_path: str = None,
        details: str = None,
    ):
        super().__init__(message, details)
        self.reason = reason
        self.file_path = file_path


class ReportWriteError(DRMeterError):
    """Raised when the report file cannot be written."""

    def __init__(self, message: str, file_path: str = None, details: str = None):
        super().__init__(message, details)
        self.file_path = file_path


class ConfigurationError(DRMeterError):
    """Raised when there are configuration issues."""

    def __init__(self, message: str, parameter: str = None, details: str = None):
        super().__init__(message, details)
        self.parameter = parameter
