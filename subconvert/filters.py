"""
Single-item subtitle filters.

A filter takes one SubtitleItem and either returns a new SubtitleItem (it
always applies) or a FilterResult: Keep(item) to pass an item on, DROP to
remove it. Filters never mutate their input and can be chained with
apply_filters / stream_subtitles.
"""

import logging
import re
from dataclasses import dataclass, replace
from typing import Callable, Iterable, Iterator, List, Sequence, Union

from .models import SubtitleItem

logger = logging.getLogger(__name__)

SPEAKER_PREFIX_PATTERN = re.compile(r"^\[Speaker \d+\]:\s*")

_WHITESPACE_RUN = re.compile(r"\s+")
_SPACE_AFTER_NEWLINE = re.compile(r"\n\s+")
_SPACE_BEFORE_NEWLINE = re.compile(r"\s+\n")


@dataclass(frozen=True)
class Keep:
    """Filter outcome that passes an item on."""
    item: SubtitleItem


class Drop:
    """Filter outcome that removes an item from the output."""

    def __repr__(self) -> str:
        return "DROP"


DROP = Drop()

FilterResult = Union[Keep, Drop]
SubtitleFilter = Callable[[SubtitleItem], Union[SubtitleItem, FilterResult]]


# --- Always-apply transforms ---

def offset(delta: float) -> Callable[[SubtitleItem], SubtitleItem]:
    """Shifts timing by `delta` ms. Start is floored at 0; end is shifted as-is."""
    def _offset(item: SubtitleItem) -> SubtitleItem:
        return replace(item, start=max(0, item.start + delta), end=item.end + delta)
    return _offset


def clean_text(item: SubtitleItem) -> SubtitleItem:
    """Trims text and collapses whitespace runs to a single space."""
    text = item.text.strip()
    text = _WHITESPACE_RUN.sub(" ", text)
    text = _SPACE_AFTER_NEWLINE.sub("\n", text)
    text = _SPACE_BEFORE_NEWLINE.sub("\n", text)
    return replace(item, text=text)


def annotate_speaker(enabled: bool) -> Callable[[SubtitleItem], SubtitleItem]:
    """Prefixes text with `[Speaker N]: ` when enabled and the item has a speaker."""
    def _annotate(item: SubtitleItem) -> SubtitleItem:
        if not enabled or item.speaker is None:
            return item
        return replace(item, text=f"[Speaker {item.speaker}]: {item.text}")
    return _annotate


def replace_text(new_text: str) -> Callable[[SubtitleItem], SubtitleItem]:
    """Replaces the text content, keeping an existing `[Speaker N]: ` prefix."""
    def _replace(item: SubtitleItem) -> SubtitleItem:
        match = SPEAKER_PREFIX_PATTERN.match(item.text)
        if match:
            return replace(item, text=f"{match.group(0)}{new_text}")
        return replace(item, text=new_text)
    return _replace


def add_prefix(prefix: str) -> Callable[[SubtitleItem], SubtitleItem]:
    def _prefix(item: SubtitleItem) -> SubtitleItem:
        return replace(item, text=f"{prefix} {item.text}")
    return _prefix


def add_suffix(suffix: str) -> Callable[[SubtitleItem], SubtitleItem]:
    def _suffix(item: SubtitleItem) -> SubtitleItem:
        return replace(item, text=f"{item.text} {suffix}")
    return _suffix


def transform_text(transformer: Callable[[str], str]) -> Callable[[SubtitleItem], SubtitleItem]:
    """Applies an arbitrary str -> str function to the text."""
    def _transform(item: SubtitleItem) -> SubtitleItem:
        return replace(item, text=transformer(item.text))
    return _transform


def to_upper_case(item: SubtitleItem) -> SubtitleItem:
    return replace(item, text=item.text.upper())


def to_lower_case(item: SubtitleItem) -> SubtitleItem:
    return replace(item, text=item.text.lower())


def capitalize(item: SubtitleItem) -> SubtitleItem:
    """Upper-cases the first character only; the rest is left untouched."""
    return replace(item, text=item.text[:1].upper() + item.text[1:])


def debug_subtitle() -> Callable[[SubtitleItem], SubtitleItem]:
    def _debug(item: SubtitleItem) -> SubtitleItem:
        logger.debug(f"Subtitle {item.start}-{item.end} (speaker={item.speaker}): {item.text!r}")
        return item
    return _debug


# --- Rejecting predicates ---

def filter_by_speaker(speaker_id: int) -> Callable[[SubtitleItem], FilterResult]:
    def _by_speaker(item: SubtitleItem) -> FilterResult:
        return Keep(item) if item.speaker == speaker_id else DROP
    return _by_speaker


def filter_by_speakers(speaker_ids: Iterable[int]) -> Callable[[SubtitleItem], FilterResult]:
    wanted = frozenset(speaker_ids)

    def _by_speakers(item: SubtitleItem) -> FilterResult:
        return Keep(item) if item.speaker is not None and item.speaker in wanted else DROP
    return _by_speakers


def filter_by_duration(min_duration: float, max_duration: float) -> Callable[[SubtitleItem], FilterResult]:
    """Keeps items whose duration lies in [min_duration, max_duration]."""
    def _by_duration(item: SubtitleItem) -> FilterResult:
        return Keep(item) if min_duration <= item.duration <= max_duration else DROP
    return _by_duration


def filter_by_time_range(range_start: float, range_end: float) -> Callable[[SubtitleItem], FilterResult]:
    """Keeps items overlapping the open interval (range_start, range_end)."""
    def _by_time_range(item: SubtitleItem) -> FilterResult:
        return Keep(item) if item.start < range_end and item.end > range_start else DROP
    return _by_time_range


def remove_empty_subtitles(item: SubtitleItem) -> FilterResult:
    return Keep(item) if item.text.strip() else DROP


def validate_subtitle(item: SubtitleItem) -> FilterResult:
    """Predicate form of the validator rules for an already-typed item."""
    if item.start < 0 or item.end < 0:
        return DROP
    if item.end <= item.start:
        return DROP
    if not item.text.strip():
        return DROP
    if item.speaker is not None and (isinstance(item.speaker, bool) or not isinstance(item.speaker, int) or item.speaker < 0):
        return DROP
    return Keep(item)


# --- Composition ---

def apply_filters_to_item(item: SubtitleItem, filters: Sequence[SubtitleFilter]) -> FilterResult:
    """Runs filters in order; the first DROP short-circuits the chain."""
    current = item
    for subtitle_filter in filters:
        result = subtitle_filter(current)
        if isinstance(result, Drop):
            return DROP
        current = result.item if isinstance(result, Keep) else result
    return Keep(current)


def stream_subtitles(items: Iterable[SubtitleItem], *filters: SubtitleFilter) -> Iterator[SubtitleItem]:
    """Lazily yields the items that survive the filter chain, in input order."""
    for item in items:
        result = apply_filters_to_item(item, filters)
        if isinstance(result, Keep):
            yield result.item


def apply_filters(items: Iterable[SubtitleItem], *filters: SubtitleFilter) -> List[SubtitleItem]:
    return list(stream_subtitles(items, *filters))
