"""Data models for subconvert."""

import math
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


class SubtitleFormat(str, Enum):
    """Closed set of output formats."""
    JSON = "json"
    SRT = "srt"
    VTT = "vtt"
    PLAIN_TEXT = "plain-text"


SUPPORTED_FORMATS: List[str] = [fmt.value for fmt in SubtitleFormat]

DEFAULT_MERGE_THRESHOLD = 1000


def _json_number(value: float) -> Any:
    # Integral floats serialize as integers, as a JavaScript producer would emit them.
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    return value


@dataclass(frozen=True)
class SubtitleItem:
    """One timed text unit. Times are in milliseconds."""
    start: float
    end: float
    text: str
    speaker: Optional[int] = None

    @property
    def duration(self) -> float:
        return self.end - self.start

    def to_dict(self) -> Dict[str, Any]:
        """Plain mapping in wire shape; `speaker` is omitted when absent."""
        data: Dict[str, Any] = {
            "start": _json_number(self.start),
            "end": _json_number(self.end),
            "text": self.text,
        }
        if self.speaker is not None:
            data["speaker"] = self.speaker
        return data


# Payload keys (camelCase) mapped onto option fields.
_OPTION_ALIASES = {
    "timingOffset": "timing_offset",
    "includeSpeaker": "include_speaker",
    "cleanText": "clean_text",
    "mergeAdjacent": "merge_adjacent",
    "mergeThreshold": "merge_threshold",
}
_NUMERIC_OPTIONS = {"timing_offset", "merge_threshold"}
_BOOLEAN_OPTIONS = {"include_speaker", "clean_text", "merge_adjacent"}


@dataclass(frozen=True)
class ConversionOptions:
    """
    Per-call processing options. Every field is optional.

    `clean_text` is tri-state: None cleans text (the default) without relaxing
    validation, True also admits empty text and drops items left empty, False
    disables cleaning.
    """
    timing_offset: Optional[float] = None
    include_speaker: Optional[bool] = None
    clean_text: Optional[bool] = None
    merge_adjacent: Optional[bool] = None
    merge_threshold: Optional[float] = None

    @property
    def effective_merge_threshold(self) -> float:
        if self.merge_threshold is None:
            return DEFAULT_MERGE_THRESHOLD
        return self.merge_threshold

    def merged_with(self, other: "ConversionOptions") -> "ConversionOptions":
        """Returns a copy where every field set on `other` replaces this one's."""
        overrides = {f.name: getattr(other, f.name) for f in fields(other) if getattr(other, f.name) is not None}
        return replace(self, **overrides)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ConversionOptions":
        """
        Builds options from a mapping using either snake_case or camelCase keys.

        Args:
            data: Mapping of option names to values. None yields default options.

        Returns:
            A ConversionOptions instance.

        Raises:
            ValueError: If a key is unknown or a value has the wrong type.
        """
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise ValueError(f"Options must be a mapping, got {type(data).__name__}")

        values: Dict[str, Any] = {}
        for key, value in data.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in _NUMERIC_OPTIONS and name not in _BOOLEAN_OPTIONS:
                raise ValueError(f"Unknown conversion option: '{key}'")
            if value is None:
                continue
            if name in _NUMERIC_OPTIONS:
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    raise ValueError(f"Option '{key}' must be a number, got {value!r}")
            elif not isinstance(value, bool):
                raise ValueError(f"Option '{key}' must be a boolean, got {value!r}")
            values[name] = value
        return cls(**values)


@dataclass(frozen=True)
class ConversionResult:
    """Rendered content for a single format."""
    format: SubtitleFormat
    content: str


@dataclass
class MultiFormatResult:
    """Rendered content per requested format, in request order."""
    results: List[ConversionResult] = field(default_factory=list)

    def get(self, format: SubtitleFormat) -> Optional[str]:
        for result in self.results:
            if result.format == format:
                return result.content
        return None
