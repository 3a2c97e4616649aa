"""Command-Line Interface handler for subconvert."""

import argparse
import json
import logging
import os
import sys
from typing import Any, List, Optional, Sequence, Tuple

from .config_loader import ConfigLoader
from .converter import SubtitleConverter
from .exceptions import ConfigurationError, FileSystemError, InvalidSubtitleDataError, SubConvertError
from .log_setup import setup_logging, setup_logging_from_config
from .models import ConversionOptions, MultiFormatResult
from .subtitle_formatter import get_formatter
from .utils import ensure_dir_exists

logger = logging.getLogger(__name__) # Get logger for this module


def load_input_file(input_path: str) -> Tuple[List[Any], ConversionOptions]:
    """
    Reads subtitle items from a JSON file.

    The file holds either a bare array of items or a request object with a
    `subtitleData` array and optional `options`.

    Returns:
        The raw items and the options embedded in the file (defaults if none).

    Raises:
        FileSystemError: If the file cannot be read.
        InvalidSubtitleDataError: If the content is not valid JSON of either shape.
    """
    try:
        with open(input_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Input file {input_path} is not valid JSON: {e}")
        raise InvalidSubtitleDataError(f"Input file {input_path} is not valid JSON: {e}") from e
    except OSError as e:
        logger.error(f"Could not read input file {input_path}: {e}", exc_info=True)
        raise FileSystemError(f"Could not read input file {input_path}: {e}") from e

    if isinstance(data, list):
        return data, ConversionOptions()
    if isinstance(data, dict) and isinstance(data.get('subtitleData'), list):
        try:
            return data['subtitleData'], ConversionOptions.from_dict(data.get('options'))
        except ValueError as e:
            raise InvalidSubtitleDataError(f"Invalid options in {input_path}: {e}") from e
    raise InvalidSubtitleDataError(
        f"Input file {input_path} must contain an array of subtitles or an object with 'subtitleData'", data=data
    )


def apply_option_overrides(options: ConversionOptions, args: argparse.Namespace) -> ConversionOptions:
    """Returns `options` with every option flag given on the command line applied on top."""
    overrides = {
        'timing_offset': args.offset,
        'include_speaker': args.include_speaker,
        'merge_adjacent': args.merge,
        'merge_threshold': args.merge_threshold,
        'clean_text': args.clean_text,
    }
    overrides = {name: value for name, value in overrides.items() if value is not None}
    if overrides:
        logger.info(f"Overriding conversion options with CLI arguments: {overrides}")
    return options.merged_with(ConversionOptions(**overrides))


def write_results(result: MultiFormatResult, output_dir: str, base_name: str) -> List[str]:
    """
    Writes each rendered format to `<output_dir>/<base_name>.<ext>`.

    Returns:
        The written paths, in the order of `result.results`.

    Raises:
        FileSystemError: If the directory or a file cannot be written.
    """
    ensure_dir_exists(output_dir)
    written = []
    for conversion in result.results:
        extension = get_formatter(conversion.format).extension
        output_path = os.path.join(output_dir, f"{base_name}.{extension}")
        try:
            with open(output_path, 'w', encoding='utf-8') as f:
                f.write(conversion.content)
        except OSError as e:
            logger.error(f"Failed to write {conversion.format.value} output to {output_path}: {e}", exc_info=True)
            raise FileSystemError(f"Could not write {output_path}: {e}") from e
        logger.info(f"Wrote {conversion.format.value} subtitles to: {output_path}")
        written.append(output_path)
    return written


def add_option_arguments(parser: argparse.ArgumentParser) -> None:
    """Adds the processing option flags shared by the single-file and batch CLIs."""
    parser.add_argument(
        "-f", "--format",
        default=None, # Default taken from config file
        help="Comma-separated output formats (json, srt, vtt, plain-text)."
    )
    parser.add_argument(
        "-c", "--config",
        default=None,
        help="Path to an optional configuration YAML file."
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging level for console and file output."
    )
    parser.add_argument("--offset", type=float, default=None, help="Timing offset in milliseconds (may be negative).")
    parser.add_argument("--include-speaker", action="store_true", default=None, help="Prefix text with [Speaker N]: .")
    parser.add_argument("--merge", action="store_true", default=None, help="Merge adjacent subtitles.")
    parser.add_argument("--merge-threshold", type=float, default=None, help="Maximum gap in ms for merging.")
    parser.add_argument("--clean", dest="clean_text", action="store_true", default=None,
                        help="Clean text, accept empty text and drop subtitles left empty.")
    parser.add_argument("--no-clean", dest="clean_text", action="store_false", default=None,
                        help="Keep subtitle text exactly as given.")


def load_settings(args: argparse.Namespace, default_log_file: str) -> dict:
    """
    Sets up logging and loads the optional configuration file named in `args`.

    Raises:
        ConfigurationError, FileNotFoundError: If the configuration cannot be loaded.
    """
    log_level = getattr(logging, args.log_level.upper(), logging.INFO)
    setup_logging(log_level=log_level, log_file=default_log_file)

    config: dict = {}
    if args.config:
        config = ConfigLoader().load_config(args.config)
        setup_logging_from_config(config, log_level, default_log_file)
        logger.info("Logging re-configured with settings from config file.")
    return config


class CLIHandler:
    """Parses arguments and converts one subtitle JSON file."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Creates the argument parser for the CLI."""
        parser = argparse.ArgumentParser(
            description="subconvert: Convert timed subtitle JSON into SRT, WebVTT, JSON or plain text.",
            formatter_class=argparse.ArgumentDefaultsHelpFormatter # Show defaults in help
        )
        parser.add_argument(
            "-i", "--input",
            required=True,
            help="Path to the input JSON file (array of subtitles or request object)."
        )
        parser.add_argument(
            "-o", "--output-dir",
            default=None,
            help="Directory to write the converted files to. Defaults to the input file's directory."
        )
        add_option_arguments(parser)
        return parser

    def run(self, argv: Optional[Sequence[str]] = None) -> None:
        """Parses arguments, sets up logging, loads config, and runs the conversion."""
        args = self.parser.parse_args(argv)

        try:
            config = load_settings(args, 'subconvert.log')
            config_loader = ConfigLoader()
            base_options = config_loader.conversion_options(config)
            if args.format:
                config['output_formats'] = args.format
            formats = config_loader.output_formats(config)
        except (ConfigurationError, FileNotFoundError) as e:
            logger.critical(f"Failed to load configuration: {e}")
            sys.exit(1)

        if not os.path.isfile(args.input):
            logger.critical(f"Input file not found or is not a file: {args.input}")
            sys.exit(1)

        output_dir = args.output_dir or config.get('output_dir') or os.path.dirname(os.path.abspath(args.input))
        base_name = os.path.splitext(os.path.basename(args.input))[0]

        try:
            items, file_options = load_input_file(args.input)
            options = apply_option_overrides(base_options.merged_with(file_options), args)

            logger.info(f"Converting {args.input} to {', '.join(f.value for f in formats)}")
            result = SubtitleConverter(options).convert_multiple(items, formats)
            write_results(result, output_dir, base_name)
            logger.info("subconvert finished successfully.")
            sys.exit(0)

        except SubConvertError as e:
             logger.error(f"A subconvert error occurred: {e}")
             sys.exit(1)
        except KeyboardInterrupt:
             logger.warning("Process interrupted by user (Ctrl+C). Exiting.")
             sys.exit(1)
        except Exception as e:
             logger.critical(f"An unexpected critical error occurred at the top level: {e}", exc_info=True)
             sys.exit(2) # Different exit code for unexpected crashes


def main() -> None:
    CLIHandler().run()
