"""Renders processed subtitle items into SRT, WebVTT, JSON and plain text."""

import json
import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Sequence, Union

from .exceptions import ConversionError, UnsupportedFormatError
from .models import SUPPORTED_FORMATS, SubtitleFormat, SubtitleItem
from .utils import format_time_srt, format_time_vtt

logger = logging.getLogger(__name__)

class SubtitleFormatter(ABC):
    """Abstract base class for subtitle formatters."""

    format: SubtitleFormat
    extension: str

    @abstractmethod
    def format_subtitles(self, items: Sequence[SubtitleItem]) -> str:
        """
        Renders already-processed items into the complete output document.

        No validation happens here; callers pass the output of the pipeline.

        Args:
            items: Processed subtitle items in display order.

        Returns:
            The rendered document.

        Raises:
            ConversionError: If rendering fails.
        """
        pass


class SRTFormatter(SubtitleFormatter):
    """Formats subtitles into the SRT (SubRip Text) format."""

    format = SubtitleFormat.SRT
    extension = "srt"

    def format_subtitles(self, items: Sequence[SubtitleItem]) -> str:
        lines: List[str] = []
        for index, item in enumerate(items, start=1):
            lines.append(str(index))
            lines.append(f"{format_time_srt(item.start)} --> {format_time_srt(item.end)}")
            lines.append(item.text)
            lines.append("")
        return "\n".join(lines)


class VTTFormatter(SubtitleFormatter):
    """Formats subtitles into the VTT (Web Video Text Tracks) format."""

    format = SubtitleFormat.VTT
    extension = "vtt"

    def format_subtitles(self, items: Sequence[SubtitleItem]) -> str:
        lines: List[str] = ["WEBVTT", ""]
        for item in items:
            lines.append(f"{format_time_vtt(item.start)} --> {format_time_vtt(item.end)}")
            lines.append(item.text)
            lines.append("")
        return "\n".join(lines)


class JSONFormatter(SubtitleFormatter):
    """Pretty-prints items as a JSON array with a two-space indent."""

    format = SubtitleFormat.JSON
    extension = "json"

    def format_subtitles(self, items: Sequence[SubtitleItem]) -> str:
        try:
            return json.dumps([item.to_dict() for item in items], indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.error(f"JSON serialization of {len(items)} subtitles failed: {e}", exc_info=True)
            raise ConversionError(self.format.value, e) from e


class PlainTextFormatter(SubtitleFormatter):
    """Texts only, separated by a blank line, without a trailing separator."""

    format = SubtitleFormat.PLAIN_TEXT
    extension = "txt"

    def format_subtitles(self, items: Sequence[SubtitleItem]) -> str:
        return "\n\n".join(item.text for item in items)


FORMATTERS: Dict[SubtitleFormat, SubtitleFormatter] = {
    formatter.format: formatter
    for formatter in (JSONFormatter(), SRTFormatter(), VTTFormatter(), PlainTextFormatter())
}


def resolve_format(value: Union[str, SubtitleFormat]) -> SubtitleFormat:
    """
    Maps an exact format name onto SubtitleFormat.

    Raises:
        UnsupportedFormatError: If the value is not one of the supported names.
    """
    if isinstance(value, SubtitleFormat):
        return value
    if isinstance(value, str) and value in SUPPORTED_FORMATS:
        return SubtitleFormat(value)
    logger.error(f"Unsupported subtitle format requested: {value!r}")
    raise UnsupportedFormatError(str(value), SUPPORTED_FORMATS)


def get_formatter(value: Union[str, SubtitleFormat]) -> SubtitleFormatter:
    return FORMATTERS[resolve_format(value)]
