"""Custom Exceptions for the subconvert package."""

from typing import Any, Optional, Sequence


class SubConvertError(Exception):
    """Base class for exceptions in this package."""
    pass


class ConfigurationError(SubConvertError):
    """Exception raised for errors in configuration loading."""
    pass


class FileSystemError(SubConvertError):
    """Exception raised for file system related errors (permissions, not found etc)."""
    pass


class InvalidSubtitleDataError(SubConvertError):
    """
    Exception raised when subtitle input is missing, empty or malformed.

    Attributes:
        reason: Human readable description of the violation.
        index: Position of the offending item, or None for whole-input errors.
        data: The offending item (or the whole input when index is None).
    """

    def __init__(self, reason: str, index: Optional[int] = None, data: Any = None):
        super().__init__(reason)
        self.reason = reason
        self.index = index
        self.data = data


class InvalidTimingError(InvalidSubtitleDataError):
    """Exception raised for negative timing or a start that is not before the end."""
    pass


class UnsupportedFormatError(SubConvertError):
    """Exception raised when a requested output format is not in the supported set."""

    def __init__(self, format: str, supported_formats: Sequence[str]):
        self.format = format
        self.supported_formats = list(supported_formats)
        super().__init__(
            f"Unsupported format '{format}'. Supported formats: {', '.join(self.supported_formats)}"
        )


class ConversionError(SubConvertError):
    """Exception raised when rendering to a specific format fails."""

    def __init__(self, format: str, cause: Optional[BaseException] = None):
        self.format = format
        self.cause = cause
        super().__init__(f"Failed to render subtitles as '{format}': {cause}")


class ProcessingError(SubConvertError):
    """Exception raised for unexpected failures inside a pipeline step."""

    def __init__(self, step: str, cause: Optional[BaseException] = None):
        self.step = step
        self.cause = cause
        super().__init__(f"Subtitle processing failed during '{step}': {cause}")
