import pytest

from subconvert.config_loader import ConfigLoader
from subconvert.exceptions import ConfigurationError
from subconvert.models import ConversionOptions, SubtitleFormat


@pytest.fixture
def loader():
    return ConfigLoader()


def write(tmp_path, text, name="config.yaml"):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_load_config(loader, tmp_path):
    path = write(tmp_path, "output_formats: [srt, json]\noptions:\n  timing_offset: 250\n  clean_text: true\n")
    config = loader.load_config(path)
    assert config["output_formats"] == ["srt", "json"]
    assert loader.conversion_options(config) == ConversionOptions(timing_offset=250, clean_text=True)
    assert loader.output_formats(config) == [SubtitleFormat.SRT, SubtitleFormat.JSON]


def test_missing_file_raises_file_not_found(loader, tmp_path):
    with pytest.raises(FileNotFoundError):
        loader.load_config(str(tmp_path / "absent.yaml"))


def test_directory_is_rejected(loader, tmp_path):
    with pytest.raises(ConfigurationError):
        loader.load_config(str(tmp_path))


def test_invalid_yaml_is_rejected(loader, tmp_path):
    with pytest.raises(ConfigurationError):
        loader.load_config(write(tmp_path, "options: [unclosed\n"))


@pytest.mark.parametrize("text", ["", "- srt\n- vtt\n", "just a string\n"])
def test_root_must_be_a_mapping(loader, tmp_path, text):
    with pytest.raises(ConfigurationError):
        loader.load_config(write(tmp_path, text))


def test_options_accept_camel_case(loader):
    options = loader.conversion_options({"options": {"mergeAdjacent": True, "mergeThreshold": 500}})
    assert options == ConversionOptions(merge_adjacent=True, merge_threshold=500)


def test_missing_options_section_gives_defaults(loader):
    assert loader.conversion_options({}) == ConversionOptions()


@pytest.mark.parametrize("section", [{"timing_offset": "1s"}, {"verbose": True}, ["clean_text"]])
def test_bad_options_raise_configuration_error(loader, section):
    with pytest.raises(ConfigurationError):
        loader.conversion_options({"options": section})


def test_output_formats_default_and_string_forms(loader):
    assert loader.output_formats({}) == [SubtitleFormat.SRT]
    assert loader.output_formats({"output_formats": "vtt, plain-text"}) == [
        SubtitleFormat.VTT, SubtitleFormat.PLAIN_TEXT,
    ]


def test_unknown_output_format_raises_configuration_error(loader):
    with pytest.raises(ConfigurationError):
        loader.output_formats({"output_formats": ["srt", "ass"]})
