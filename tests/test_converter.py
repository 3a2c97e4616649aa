import json

import pytest

import subconvert
from subconvert import SubtitleConverter, convert, convert_multiple
from subconvert.exceptions import (
    ConversionError,
    InvalidSubtitleDataError,
    InvalidTimingError,
    UnsupportedFormatError,
)
from subconvert.models import ConversionOptions, SubtitleFormat
from subconvert.subtitle_formatter import FORMATTERS, SubtitleFormatter


HELLO = [{"start": 0, "end": 5000, "text": "Hello world"}]


class BrokenSRTFormatter(SubtitleFormatter):
    format = SubtitleFormat.SRT
    extension = "srt"

    def format_subtitles(self, items):
        raise RuntimeError("renderer exploded")


def test_srt_scenario():
    assert "1\n00:00:00,000 --> 00:00:05,000\nHello world\n" in convert(HELLO, "srt")


def test_vtt_scenario():
    assert convert(HELLO, "vtt").startswith("WEBVTT\n\n00:00:00.000 --> 00:00:05.000\nHello world\n")


def test_plain_text_scenario():
    items = [{"start": 0, "end": 5000, "text": "A"}, {"start": 5000, "end": 10000, "text": "B"}]
    assert convert(items, "plain-text") == "A\n\nB"


def test_offset_scenario():
    content = convert([{"start": 0, "end": 5000, "text": "X"}], "json", ConversionOptions(timing_offset=1000))
    assert json.loads(content) == [{"start": 1000, "end": 6000, "text": "X"}]


def test_invalid_timing_scenario():
    with pytest.raises(InvalidTimingError) as exc_info:
        convert([{"start": -1000, "end": 5000, "text": "bad"}], "srt")
    assert exc_info.value.index == 0


def test_unsupported_format_scenario():
    with pytest.raises(UnsupportedFormatError) as exc_info:
        convert(HELLO, "unsupported")
    assert exc_info.value.format == "unsupported"
    assert exc_info.value.supported_formats == ["json", "srt", "vtt", "plain-text"]
    assert "json, srt, vtt, plain-text" in str(exc_info.value)


def test_conversion_is_idempotent(sample_subtitles):
    options = ConversionOptions(include_speaker=True, merge_adjacent=True)
    assert convert(sample_subtitles, "srt", options) == convert(sample_subtitles, "srt", options)


def test_json_round_trip_preserves_processed_items(sample_subtitles):
    decoded = json.loads(convert(sample_subtitles, SubtitleFormat.JSON))
    assert [item["text"] for item in decoded] == [item["text"] for item in sample_subtitles]
    assert "speaker" not in decoded[0]
    assert decoded[1]["speaker"] == 0


def test_convert_multiple_keeps_request_order(sample_subtitles):
    result = convert_multiple(sample_subtitles, ["vtt", "json", "srt", "plain-text"])
    assert [r.format for r in result.results] == [
        SubtitleFormat.VTT, SubtitleFormat.JSON, SubtitleFormat.SRT, SubtitleFormat.PLAIN_TEXT,
    ]
    assert result.get(SubtitleFormat.SRT) == convert(sample_subtitles, "srt")
    assert result.get("plain-text") == convert(sample_subtitles, "plain-text")


def test_convert_multiple_fails_on_first_bad_format(sample_subtitles):
    with pytest.raises(UnsupportedFormatError) as exc_info:
        convert_multiple(sample_subtitles, ["srt", "docx", "xml"])
    assert exc_info.value.format == "docx"


def test_convert_multiple_rejects_invalid_data():
    with pytest.raises(InvalidSubtitleDataError):
        convert_multiple([], ["srt"])


def test_converter_default_options_apply_when_call_passes_none():
    converter = SubtitleConverter(ConversionOptions(timing_offset=2000))
    assert converter.convert(HELLO, "srt").startswith("1\n00:00:02,000 --> 00:00:07,000")


def test_call_options_take_precedence_over_defaults():
    converter = SubtitleConverter(ConversionOptions(timing_offset=2000))
    content = converter.convert(HELLO, "srt", ConversionOptions(timing_offset=500))
    assert content.startswith("1\n00:00:00,500 --> 00:00:05,500")


def test_unexpected_render_failure_becomes_conversion_error(monkeypatch):
    monkeypatch.setitem(FORMATTERS, SubtitleFormat.SRT, BrokenSRTFormatter())
    with pytest.raises(ConversionError) as exc_info:
        convert(HELLO, "srt")
    assert exc_info.value.format == "srt"
    assert isinstance(exc_info.value.cause, RuntimeError)


def test_package_exports_the_facade():
    assert subconvert.convert is convert
    assert subconvert.SUPPORTED_FORMATS == ["json", "srt", "vtt", "plain-text"]


def test_negative_end_renders_with_signed_parts():
    content = convert([{"start": 0, "end": 5000, "text": "X"}], "srt", ConversionOptions(timing_offset=-6000))
    assert content == "1\n00:00:00,000 --> -1:-1:-1,000\nX\n"


def test_convert_multiple_accepts_a_single_format_name(sample_subtitles):
    result = convert_multiple(sample_subtitles, "srt")
    assert [r.format for r in result.results] == [SubtitleFormat.SRT]

    result = convert_multiple(sample_subtitles, SubtitleFormat.PLAIN_TEXT)
    assert [r.format for r in result.results] == [SubtitleFormat.PLAIN_TEXT]
