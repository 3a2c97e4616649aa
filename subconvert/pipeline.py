"""Validation plus fixed-order transformation of subtitle sequences."""

import logging
from typing import Any, Iterator, List, Optional, Sequence

from .exceptions import InvalidSubtitleDataError, ProcessingError
from .filters import (
    SubtitleFilter,
    annotate_speaker,
    apply_filters,
    clean_text,
    offset,
    remove_empty_subtitles,
    stream_subtitles,
)
from .models import ConversionOptions, SubtitleItem
from .validator import check_input, validate_item, validate_subtitle_data

logger = logging.getLogger(__name__)


def build_filter_chain(options: ConversionOptions) -> List[SubtitleFilter]:
    """
    Returns the per-item filters enabled by `options`.

    Order is timing offset, text cleaning, speaker annotation, then (only when
    clean_text is explicitly True) removal of items left with empty text.
    """
    chain: List[SubtitleFilter] = []
    if options.timing_offset:
        chain.append(offset(options.timing_offset))
    if options.clean_text is not False:
        chain.append(clean_text)
    if options.include_speaker:
        chain.append(annotate_speaker(True))
    if options.clean_text is True:
        chain.append(remove_empty_subtitles)
    return chain


def merge_adjacent_subtitles(items: Sequence[SubtitleItem], threshold: float) -> List[SubtitleItem]:
    """
    Merges consecutive items whose gap (next.start - current.end) is <= threshold.

    A merged item keeps the first start, takes the last end, joins texts with a
    single space and keeps the speaker only when both sides agree.
    """
    if len(items) <= 1:
        return list(items)

    merged: List[SubtitleItem] = []
    current = items[0]
    for nxt in items[1:]:
        gap = nxt.start - current.end
        if gap <= threshold:
            current = SubtitleItem(
                start=current.start,
                end=nxt.end,
                text=f"{current.text} {nxt.text}",
                speaker=current.speaker if current.speaker == nxt.speaker else None,
            )
        else:
            merged.append(current)
            current = nxt
    merged.append(current)

    logger.debug(f"Merged {len(items)} subtitles into {len(merged)} (threshold={threshold}ms)")
    return merged


def process_subtitles(items: Optional[Sequence[Any]], options: Optional[ConversionOptions] = None) -> List[SubtitleItem]:
    """
    Validates raw items and applies the transformations enabled in `options`.

    Args:
        items: Raw subtitle items (mappings or SubtitleItem).
        options: Processing options; defaults clean text and nothing else.

    Returns:
        The processed items, in input order.

    Raises:
        InvalidSubtitleDataError: If validation fails (InvalidTimingError for timing).
        ProcessingError: If a transformation step fails unexpectedly.
    """
    options = options or ConversionOptions()
    validated = validate_subtitle_data(items, allow_empty_text=options.clean_text is True)

    try:
        processed = apply_filters(validated, *build_filter_chain(options))
    except Exception as e:
        logger.error(f"Unexpected error while transforming subtitles: {e}", exc_info=True)
        raise ProcessingError("transform", e) from e

    if not options.merge_adjacent:
        return processed

    try:
        return merge_adjacent_subtitles(processed, options.effective_merge_threshold)
    except Exception as e:
        logger.error(f"Unexpected error while merging subtitles: {e}", exc_info=True)
        raise ProcessingError("merge", e) from e


def iter_processed(items: Optional[Sequence[Any]], options: Optional[ConversionOptions] = None) -> Iterator[SubtitleItem]:
    """
    Lazy variant of process_subtitles without the merge step.

    Each item is validated when it is reached, so items before an invalid one
    are yielded before the error is raised. Errors, including the empty-input
    check, surface during iteration. The iterator is finite and cannot be
    restarted; call again to re-run.
    """
    options = options or ConversionOptions()
    check_input(items)
    allow_empty_text = options.clean_text is True
    chain = build_filter_chain(options)

    def _validated() -> Iterator[SubtitleItem]:
        for index, raw in enumerate(items):
            try:
                yield validate_item(raw, index, allow_empty_text)
            except InvalidSubtitleDataError as e:
                logger.error(f"Subtitle validation failed: {e.reason}")
                raise

    yield from stream_subtitles(_validated(), *chain)
