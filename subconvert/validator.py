"""Structural and timing validation of raw subtitle input."""

import logging
import math
from typing import Any, List, Mapping, Optional, Sequence

from .exceptions import InvalidSubtitleDataError, InvalidTimingError
from .models import SubtitleItem

logger = logging.getLogger(__name__)

_MISSING = object()


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def _field(raw: Any, name: str) -> Any:
    if isinstance(raw, SubtitleItem):
        return getattr(raw, name)
    if isinstance(raw, Mapping):
        return raw.get(name, _MISSING)
    return _MISSING


def check_input(items: Optional[Sequence[Any]]) -> None:
    """
    Checks that the input is present and a non-empty sequence.

    Raises:
        InvalidSubtitleDataError: If the input is None, not a sequence, or empty.
    """
    if items is None:
        raise InvalidSubtitleDataError("Subtitle data cannot be None", data=items)
    if isinstance(items, (str, bytes, Mapping)) or not isinstance(items, Sequence) or len(items) == 0:
        raise InvalidSubtitleDataError("Subtitle data must be a non-empty sequence", data=items)


def validate_item(raw: Any, index: int, allow_empty_text: bool = False) -> SubtitleItem:
    """
    Validates a single raw item and returns it as a SubtitleItem.

    Checks run in a fixed order: field shapes, timing, text, speaker.

    Args:
        raw: A mapping with start/end/text/speaker keys, or a SubtitleItem.
        index: Position of the item in its sequence, used in error reports.
        allow_empty_text: Accept text that is empty after trimming.

    Raises:
        InvalidSubtitleDataError: For malformed fields, empty text or a bad speaker.
        InvalidTimingError: For negative times or start >= end.
    """
    start = _field(raw, "start")
    end = _field(raw, "end")
    text = _field(raw, "text")
    if not _is_number(start) or not _is_number(end) or not isinstance(text, str):
        raise InvalidSubtitleDataError(
            f"Subtitle at index {index} must have start (number), end (number), and text (string) fields",
            index=index, data=raw,
        )

    if start < 0 or end < 0:
        raise InvalidTimingError(f"Subtitle at index {index} has negative timing values", index=index, data=raw)
    if start >= end:
        raise InvalidTimingError(f"Subtitle at index {index} has start time >= end time", index=index, data=raw)

    if not allow_empty_text and not text.strip():
        raise InvalidSubtitleDataError(f"Subtitle at index {index} has empty text content", index=index, data=raw)

    speaker = _field(raw, "speaker")
    if speaker is _MISSING:
        speaker = None
    if speaker is not None:
        integral = _is_number(speaker) and float(speaker).is_integer()
        if not integral or speaker < 0:
            raise InvalidSubtitleDataError(
                f"Subtitle at index {index} has invalid speaker value (must be non-negative integer)",
                index=index, data=raw,
            )
        speaker = int(speaker)

    return SubtitleItem(start=start, end=end, text=text, speaker=speaker)


def validate_subtitle_data(items: Optional[Sequence[Any]], allow_empty_text: bool = False) -> List[SubtitleItem]:
    """
    Validates a whole sequence, stopping at the first violation.

    Args:
        items: Raw subtitle items in order.
        allow_empty_text: Accept items whose text is empty after trimming.

    Returns:
        A new list of SubtitleItem in input order.

    Raises:
        InvalidSubtitleDataError: For missing/empty input or the first malformed item.
        InvalidTimingError: For the first item with invalid timing.
    """
    try:
        check_input(items)
        validated = [validate_item(raw, i, allow_empty_text) for i, raw in enumerate(items)]
    except InvalidSubtitleDataError as e:
        logger.error(f"Subtitle validation failed: {e.reason}")
        raise
    logger.debug(f"Validated {len(validated)} subtitle items (allow_empty_text={allow_empty_text})")
    return validated
