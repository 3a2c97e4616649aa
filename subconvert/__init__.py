"""subconvert: validate, transform and render timed subtitles."""

from .converter import SubtitleConverter, convert, convert_multiple
from .exceptions import (
    ConfigurationError,
    ConversionError,
    FileSystemError,
    InvalidSubtitleDataError,
    InvalidTimingError,
    ProcessingError,
    SubConvertError,
    UnsupportedFormatError,
)
from .models import (
    SUPPORTED_FORMATS,
    ConversionOptions,
    ConversionResult,
    MultiFormatResult,
    SubtitleFormat,
    SubtitleItem,
)
from .pipeline import iter_processed, merge_adjacent_subtitles, process_subtitles
from .validator import validate_subtitle_data

__all__ = [
    "SUPPORTED_FORMATS",
    "ConfigurationError",
    "ConversionError",
    "ConversionOptions",
    "ConversionResult",
    "FileSystemError",
    "InvalidSubtitleDataError",
    "InvalidTimingError",
    "MultiFormatResult",
    "ProcessingError",
    "SubConvertError",
    "SubtitleConverter",
    "SubtitleFormat",
    "SubtitleItem",
    "UnsupportedFormatError",
    "convert",
    "convert_multiple",
    "iter_processed",
    "merge_adjacent_subtitles",
    "process_subtitles",
    "validate_subtitle_data",
]

__version__ = "0.1.0"
