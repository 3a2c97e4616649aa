"""Utility functions for subconvert."""

import math
import os
import logging
from typing import Tuple

from .exceptions import FileSystemError

logger = logging.getLogger(__name__)

def ensure_dir_exists(dir_path: str) -> None:
    """
    Ensures that a directory exists. Creates it if it doesn't.

    Args:
        dir_path: The path to the directory.

    Raises:
        FileSystemError: If the directory cannot be created due to permissions
                         or if the path exists but is not a directory.
    """
    if not dir_path:
        raise ValueError("Directory path cannot be empty.")
    try:
        if not os.path.exists(dir_path):
            os.makedirs(dir_path)
            logger.info(f"Created directory: {dir_path}")
        elif not os.path.isdir(dir_path):
            raise FileSystemError(f"Path exists but is not a directory: {dir_path}")
    except OSError as e:
        logger.error(f"Error creating or accessing directory {dir_path}: {e}", exc_info=True)
        raise FileSystemError(f"Could not create or access directory {dir_path}: {e}") from e

def _split_milliseconds(ms: float) -> Tuple[int, int, int, int]:
    # Remainders keep the sign of `ms`; a negative end time renders as e.g. -1:-1:-1,000
    total = math.floor(ms)
    hrs = total // 3600000
    mins = int(math.fmod(total, 3600000)) // 60000
    secs = int(math.fmod(total, 60000)) // 1000
    millis = int(math.fmod(total, 1000))
    return hrs, mins, secs, millis

def _pad(value: int, width: int) -> str:
    return str(value).rjust(width, "0")

def format_time_srt(ms: float) -> str:
    """
    Formats milliseconds into SRT time format HH:MM:SS,mmm.

    Hours are padded to two digits and are not wrapped at 24. Negative
    input is rendered part by part, each part carrying the sign.

    Args:
        ms: Time in milliseconds.

    Returns:
        Formatted time string.
    """
    hrs, mins, secs, millis = _split_milliseconds(ms)
    return f"{_pad(hrs, 2)}:{_pad(mins, 2)}:{_pad(secs, 2)},{_pad(millis, 3)}"

def format_time_vtt(ms: float) -> str:
    """Formats milliseconds into WebVTT time format HH:MM:SS.mmm."""
    hrs, mins, secs, millis = _split_milliseconds(ms)
    return f"{_pad(hrs, 2)}:{_pad(mins, 2)}:{_pad(secs, 2)}.{_pad(millis, 3)}"
