"""
Batch conversion of every subtitle JSON file in a directory.

Files are processed smallest first; converted output lands in
`<input_dir>/Subs/<format>/`.
"""

import argparse
import logging
import os
import sys
import time
from typing import List, Optional, Sequence, Tuple

# Progress bar library
from tqdm import tqdm

from .cli import add_option_arguments, apply_option_overrides, load_input_file, load_settings, write_results
from .config_loader import ConfigLoader
from .converter import SubtitleConverter
from .exceptions import ConfigurationError, FileSystemError, SubConvertError
from .models import MultiFormatResult
from .utils import ensure_dir_exists

logger = logging.getLogger(__name__)

def find_and_sort_inputs(input_dir: str) -> List[Tuple[str, int]]:
    """
    Finds all .json files in the input directory and sorts them by size.

    Args:
        input_dir: The directory to search for subtitle files.

    Returns:
        A list of (filepath, filesize) tuples in ascending size order.

    Raises:
        FileNotFoundError: If the input directory doesn't exist.
        ValueError: If the input path is not a directory.
    """
    if not os.path.exists(input_dir):
        raise FileNotFoundError(f"Input directory not found: {input_dir}")
    if not os.path.isdir(input_dir):
        raise ValueError(f"Input path is not a directory: {input_dir}")

    inputs = []
    logger.info(f"Scanning directory for JSON files: {input_dir}")
    for filename in os.listdir(input_dir):
        if filename.lower().endswith(".json"):
            filepath = os.path.join(input_dir, filename)
            try:
                if os.path.isfile(filepath):
                    inputs.append((filepath, os.path.getsize(filepath)))
            except OSError as e:
                logger.warning(f"Could not access file {filepath}: {e}. Skipping.")

    inputs.sort(key=lambda item: (item[1], item[0]))
    logger.info(f"Found {len(inputs)} JSON files. Sorted by size (smallest first).")
    return inputs


def _create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="subconvert batch: Convert every subtitle JSON file in a directory.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument(
        "-i", "--input-dir",
        required=True,
        help="Directory containing the input JSON files."
    )
    add_option_arguments(parser)
    return parser


def run_batch_processing(argv: Optional[Sequence[str]] = None) -> None:
    """Parses arguments, sets up, and runs the batch conversion."""
    args = _create_parser().parse_args(argv)

    try:
        config = load_settings(args, 'subconvert_batch.log')
        config_loader = ConfigLoader()
        base_options = config_loader.conversion_options(config)
        if args.format:
            config['output_formats'] = args.format
        formats = config_loader.output_formats(config)
    except (ConfigurationError, FileNotFoundError) as e:
        logger.critical(f"Failed to load configuration: {e}")
        sys.exit(1)

    try:
        input_paths = [path for path, _ in find_and_sort_inputs(args.input_dir)]
    except (FileNotFoundError, ValueError) as e:
        logger.critical(f"Input directory error: {e}")
        sys.exit(1)
    if not input_paths:
        logger.warning(f"No .json files found in {args.input_dir}. Exiting.")
        sys.exit(0)

    base_subs_dir = os.path.join(args.input_dir, "Subs")
    format_dirs = {fmt: os.path.join(base_subs_dir, fmt.value) for fmt in formats}
    try:
        for format_dir in format_dirs.values():
            ensure_dir_exists(format_dir)
    except FileSystemError as e:
        logger.critical(f"Could not create output directories: {e}")
        sys.exit(1)

    total_files = len(input_paths)
    files_processed = 0
    files_failed = 0
    batch_start_time = time.time()
    logger.info(f"--- Starting batch conversion of {total_files} files to {', '.join(f.value for f in formats)} ---")

    with tqdm(total=total_files, unit="file", desc="Starting Batch") as pbar:
        for input_path in input_paths:
            filename = os.path.basename(input_path)
            base_name = os.path.splitext(filename)[0]
            pbar.set_description(f"Processing: {filename[:30]}")
            try:
                items, file_options = load_input_file(input_path)
                options = apply_option_overrides(base_options.merged_with(file_options), args)
                result = SubtitleConverter(options).convert_multiple(items, formats)
                for conversion in result.results:
                    write_results(MultiFormatResult([conversion]), format_dirs[conversion.format], base_name)
                files_processed += 1
            except SubConvertError as e:
                logger.error(f"Conversion failed for '{filename}': {e}")
                files_failed += 1
            except KeyboardInterrupt:
                logger.warning("Batch process interrupted by user (Ctrl+C). Exiting.")
                sys.exit(1)
            except Exception as e:
                logger.error(f"An unexpected error occurred processing '{filename}': {e}", exc_info=True)
                files_failed += 1
            finally:
                pbar.update(1)

    logger.info("--- Batch Conversion Finished ---")
    logger.info(f"Total time: {time.time() - batch_start_time:.2f} seconds")
    logger.info(f"Successfully processed: {files_processed}/{total_files} files")
    logger.info(f"Failed: {files_failed}/{total_files} files")

    sys.exit(1 if files_failed > 0 else 0)


def main() -> None:
    run_batch_processing()
