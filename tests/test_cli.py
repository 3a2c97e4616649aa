import json

import pytest

from subconvert.cli import CLIHandler, load_input_file, write_results
from subconvert.converter import SubtitleConverter
from subconvert.exceptions import InvalidSubtitleDataError
from subconvert.models import ConversionOptions, ConversionResult, MultiFormatResult, SubtitleFormat


@pytest.fixture(autouse=True)
def in_tmp_dir(tmp_path, monkeypatch):
    # Log files go to ./logs
    monkeypatch.chdir(tmp_path)


def write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def run_cli(argv):
    with pytest.raises(SystemExit) as exc_info:
        CLIHandler().run(argv)
    return exc_info.value.code


def test_load_input_file_accepts_bare_array(tmp_path, sample_subtitles):
    items, options = load_input_file(write_json(tmp_path / "in.json", sample_subtitles))
    assert items == sample_subtitles
    assert options == ConversionOptions()


def test_load_input_file_accepts_request_object(tmp_path, sample_subtitles):
    path = write_json(tmp_path / "in.json", {"subtitleData": sample_subtitles, "options": {"cleanText": False}})
    items, options = load_input_file(path)
    assert items == sample_subtitles
    assert options == ConversionOptions(clean_text=False)


@pytest.mark.parametrize("content", ["{not json", '{"items": []}', '"text"', '{"subtitleData": [], "options": 3}'])
def test_load_input_file_rejects_bad_content(tmp_path, content):
    path = tmp_path / "in.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(InvalidSubtitleDataError):
        load_input_file(str(path))


def test_write_results_uses_format_extensions(tmp_path):
    result = MultiFormatResult([
        ConversionResult(SubtitleFormat.PLAIN_TEXT, "A"),
        ConversionResult(SubtitleFormat.VTT, "WEBVTT\n"),
    ])
    paths = write_results(result, str(tmp_path / "out"), "show")
    assert [p.rsplit("/", 1)[-1] for p in paths] == ["show.txt", "show.vtt"]
    assert (tmp_path / "out" / "show.txt").read_text(encoding="utf-8") == "A"


def test_converts_to_requested_formats(tmp_path, sample_subtitles):
    source = write_json(tmp_path / "episode.json", sample_subtitles)
    assert run_cli(["-i", source, "-o", str(tmp_path / "out"), "-f", "srt,vtt"]) == 0
    srt = (tmp_path / "out" / "episode.srt").read_text(encoding="utf-8")
    assert srt.startswith("1\n00:00:00,000 --> 00:00:05,000\nHello world\n")
    assert (tmp_path / "out" / "episode.vtt").read_text(encoding="utf-8").startswith("WEBVTT\n")


def test_defaults_to_srt_next_to_the_input(tmp_path, sample_subtitles):
    source = write_json(tmp_path / "episode.json", sample_subtitles)
    assert run_cli(["-i", source]) == 0
    assert (tmp_path / "episode.srt").exists()


def test_cli_flags_override_file_options(tmp_path):
    data = {"subtitleData": [{"start": 0, "end": 5000, "text": "X", "speaker": 2}], "options": {"timingOffset": 1000}}
    source = write_json(tmp_path / "episode.json", data)
    assert run_cli(["-i", source, "-f", "srt", "--offset", "2000", "--include-speaker"]) == 0
    srt = (tmp_path / "episode.srt").read_text(encoding="utf-8")
    assert "00:00:02,000 --> 00:00:07,000\n[Speaker 2]: X" in srt


def test_no_clean_keeps_text_verbatim(tmp_path):
    source = write_json(tmp_path / "episode.json", [{"start": 0, "end": 1000, "text": "  padded  "}])
    assert run_cli(["-i", source, "-f", "plain-text", "--no-clean"]) == 0
    assert (tmp_path / "episode.txt").read_text(encoding="utf-8") == "  padded  "


def test_config_file_supplies_formats_options_and_output_dir(tmp_path, sample_subtitles):
    config = tmp_path / "config.yaml"
    config.write_text(
        "log_dir: custom_logs\n"
        "log_file: run.log\n"
        f"output_dir: {tmp_path / 'converted'}\n"
        "output_formats: [plain-text, json]\n"
        "options:\n"
        "  include_speaker: true\n",
        encoding="utf-8",
    )
    source = write_json(tmp_path / "episode.json", sample_subtitles)
    assert run_cli(["-i", source, "-c", str(config)]) == 0
    text = (tmp_path / "converted" / "episode.txt").read_text(encoding="utf-8")
    assert "[Speaker 1]: Subtitle processing" in text
    assert json.loads((tmp_path / "converted" / "episode.json").read_text(encoding="utf-8"))[0]["text"] == "Hello world"
    assert (tmp_path / "custom_logs" / "run.log").exists()


def test_invalid_subtitles_exit_with_one(tmp_path):
    source = write_json(tmp_path / "episode.json", [{"start": 5000, "end": 1000, "text": "backwards"}])
    assert run_cli(["-i", source]) == 1
    assert not (tmp_path / "episode.srt").exists()


def test_missing_input_exits_with_one(tmp_path):
    assert run_cli(["-i", str(tmp_path / "missing.json")]) == 1


def test_unknown_format_exits_with_one(tmp_path, sample_subtitles):
    source = write_json(tmp_path / "episode.json", sample_subtitles)
    assert run_cli(["-i", source, "-f", "srt,ass"]) == 1


def test_missing_config_exits_with_one(tmp_path, sample_subtitles):
    source = write_json(tmp_path / "episode.json", sample_subtitles)
    assert run_cli(["-i", source, "-c", str(tmp_path / "nope.yaml")]) == 1


def test_unexpected_error_exits_with_two(tmp_path, sample_subtitles, monkeypatch):
    def boom(self, items, formats, options=None):
        raise RuntimeError("unexpected")

    monkeypatch.setattr(SubtitleConverter, "convert_multiple", boom)
    source = write_json(tmp_path / "episode.json", sample_subtitles)
    assert run_cli(["-i", source]) == 2
