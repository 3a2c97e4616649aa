"""
Request-level handling around the converter.

Shapes the payloads an enclosing service receives and returns: parses the
comma-separated format list, runs a multi-format (or single-format) conversion
and reports item counts plus a processing timestamp. Also maps error kinds onto
the HTTP status codes such a service answers with.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .converter import SubtitleConverter
from .exceptions import (
    ConversionError,
    InvalidSubtitleDataError,
    UnsupportedFormatError,
)
from .models import SUPPORTED_FORMATS, ConversionOptions, SubtitleFormat
from .subtitle_formatter import resolve_format
from .validator import validate_subtitle_data

logger = logging.getLogger(__name__)

SERVICE_NAME = "subtitle-processor"


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_format_list(output_format: str) -> List[SubtitleFormat]:
    """
    Parses "srt, VTT,json" style input into formats, keeping request order.

    Raises:
        UnsupportedFormatError: For the first entry that is not supported.
    """
    if not isinstance(output_format, str):
        raise UnsupportedFormatError(str(output_format), SUPPORTED_FORMATS)
    formats: List[SubtitleFormat] = []
    for entry in output_format.split(","):
        name = entry.strip().lower()
        if name not in SUPPORTED_FORMATS:
            logger.error(f"Rejected output format '{name}' from request '{output_format}'")
            raise UnsupportedFormatError(name, SUPPORTED_FORMATS)
        formats.append(SubtitleFormat(name))
    logger.debug(f"Parsed output formats: {[f.value for f in formats]}")
    return formats


def _read_payload(payload: Mapping[str, Any]) -> Tuple[str, List[Any], Optional[ConversionOptions]]:
    if not isinstance(payload, Mapping):
        raise InvalidSubtitleDataError("Request payload must be an object", data=payload)
    title = payload.get("title")
    if not isinstance(title, str):
        raise InvalidSubtitleDataError("Request 'title' must be a string", data=payload)
    subtitle_data = payload.get("subtitleData")
    if not isinstance(subtitle_data, list):
        raise InvalidSubtitleDataError("Request 'subtitleData' must be an array", data=payload)
    try:
        options = ConversionOptions.from_dict(payload["options"]) if "options" in payload else None
    except ValueError as e:
        raise InvalidSubtitleDataError(f"Invalid request options: {e}", data=payload.get("options")) from e
    return title, subtitle_data, options


def process_request(payload: Mapping[str, Any], converter: Optional[SubtitleConverter] = None) -> Dict[str, Any]:
    """
    Handles a `{title, outputFormat, subtitleData, options?}` request.

    The subtitle data is validated strictly before any option is applied, so
    empty text is rejected even when the options would drop it.

    Args:
        payload: Decoded request body.
        converter: Converter to use; a default one is created when omitted.
            Its default options apply when the payload carries no `options`.

    Returns:
        `{title, results: [{format, content, itemCount}], totalItemCount, processedAt}`.

    Raises:
        InvalidSubtitleDataError: For a malformed payload or invalid subtitle data.
        UnsupportedFormatError: For an unknown entry in outputFormat.
        ConversionError, ProcessingError: Propagated from the converter.
    """
    title, subtitle_data, options = _read_payload(payload)

    logger.info(f"Processing subtitle request '{title}' ({len(subtitle_data)} items, formats={payload.get('outputFormat')})")
    formats = parse_format_list(payload.get("outputFormat"))
    validate_subtitle_data(subtitle_data)

    converter = converter or SubtitleConverter()
    converted = converter.convert_multiple(subtitle_data, formats, options)

    item_count = len(subtitle_data)
    response = {
        "title": title,
        "results": [
            {"format": result.format.value, "content": result.content, "itemCount": item_count}
            for result in converted.results
        ],
        "totalItemCount": item_count,
        "processedAt": _timestamp(),
    }
    logger.info(f"Subtitle request '{title}' completed for {', '.join(f.value for f in formats)}")
    return response


def process_single_request(payload: Mapping[str, Any], converter: Optional[SubtitleConverter] = None) -> Dict[str, Any]:
    """
    Single-format form of process_request, where `outputFormat` names exactly one format.

    Returns:
        `{title, format, content, itemCount, processedAt}`.
    """
    title, subtitle_data, options = _read_payload(payload)
    output_format = payload.get("outputFormat")

    logger.info(f"Processing subtitle request '{title}' ({len(subtitle_data)} items, format={output_format})")
    validate_subtitle_data(subtitle_data)

    converter = converter or SubtitleConverter()
    content = converter.convert(subtitle_data, output_format, options)

    response = {
        "title": title,
        "format": resolve_format(output_format).value,
        "content": content,
        "itemCount": len(subtitle_data),
        "processedAt": _timestamp(),
    }
    logger.info(f"Subtitle request '{title}' completed for {response['format']}")
    return response


def get_supported_formats() -> List[str]:
    return list(SUPPORTED_FORMATS)


def health_check() -> Dict[str, str]:
    return {"status": "healthy", "service": SERVICE_NAME, "timestamp": _timestamp()}


def http_status_for(error: Exception) -> int:
    """400 for bad data or format, 422 for rendering failures, 500 for anything else."""
    if isinstance(error, (InvalidSubtitleDataError, UnsupportedFormatError)):
        return 400
    if isinstance(error, ConversionError):
        return 422
    return 500
