"""Single entry point combining the processing pipeline and the format renderers."""

import logging
from typing import Any, Iterable, Optional, Sequence, Union

from .exceptions import ConversionError, SubConvertError
from .models import ConversionOptions, ConversionResult, MultiFormatResult, SubtitleFormat, SubtitleItem
from .pipeline import process_subtitles
from .subtitle_formatter import SubtitleFormatter, get_formatter

logger = logging.getLogger(__name__)

FormatLike = Union[str, SubtitleFormat]


class SubtitleConverter:
    """
    Converts raw subtitle items into one or more output formats.

    Options passed to a call take precedence over the converter's defaults.
    """

    def __init__(self, options: Optional[ConversionOptions] = None):
        """
        Initializes the SubtitleConverter.

        Args:
            options: Default processing options for calls that pass none.
        """
        self.options = options or ConversionOptions()

    def _render(self, formatter: SubtitleFormatter, items: Sequence[SubtitleItem]) -> str:
        try:
            return formatter.format_subtitles(items)
        except SubConvertError:
            raise
        except Exception as e:
            logger.error(f"Unexpected error while rendering {formatter.format.value}: {e}", exc_info=True)
            raise ConversionError(formatter.format.value, e) from e

    def convert(self, items: Optional[Sequence[Any]], format: FormatLike,
                options: Optional[ConversionOptions] = None) -> str:
        """
        Processes `items` and renders them in a single format.

        Args:
            items: Raw subtitle items.
            format: One of json, srt, vtt, plain-text.
            options: Processing options for this call.

        Returns:
            The rendered document.

        Raises:
            InvalidSubtitleDataError: If the input fails validation.
            UnsupportedFormatError: If the format is not supported.
            ConversionError: If rendering fails.
            ProcessingError: If a pipeline step fails unexpectedly.
        """
        processed = process_subtitles(items, options or self.options)
        formatter = get_formatter(format)
        content = self._render(formatter, processed)
        logger.info(f"Converted {len(processed)} subtitles to {formatter.format.value}")
        return content

    def convert_multiple(self, items: Optional[Sequence[Any]], formats: Iterable[FormatLike],
                         options: Optional[ConversionOptions] = None) -> MultiFormatResult:
        """
        Processes `items` once and renders every requested format in order.

        The first failure aborts the call; no partial result is returned. A
        single format name is accepted in place of a list.

        Raises:
            Same as convert().
        """
        if isinstance(formats, str):
            formats = [formats]
        processed = process_subtitles(items, options or self.options)
        result = MultiFormatResult()
        for requested in formats:
            formatter = get_formatter(requested)
            result.results.append(ConversionResult(formatter.format, self._render(formatter, processed)))
        logger.info(
            f"Converted {len(processed)} subtitles to {', '.join(r.format.value for r in result.results)}"
        )
        return result


_default_converter = SubtitleConverter()


def convert(items: Optional[Sequence[Any]], format: FormatLike,
            options: Optional[ConversionOptions] = None) -> str:
    return _default_converter.convert(items, format, options)


def convert_multiple(items: Optional[Sequence[Any]], formats: Iterable[FormatLike],
                     options: Optional[ConversionOptions] = None) -> MultiFormatResult:
    return _default_converter.convert_multiple(items, formats, options)
