"""Logging configuration for subconvert."""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Mapping, Optional

from .exceptions import ConfigurationError, FileSystemError
from .utils import ensure_dir_exists

DEFAULT_LOG_FORMAT = '%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] - %(message)s'
DEFAULT_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
DEFAULT_LOG_DIR = "logs"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024 # 10 MB
DEFAULT_BACKUP_COUNT = 5

logger = logging.getLogger(__name__)


def _reset_root_handlers(root: logging.Logger) -> None:
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()


def _open_log_file(log_path: str, max_bytes: int, backup_count: int) -> RotatingFileHandler:
    ensure_dir_exists(os.path.dirname(log_path) or ".")
    return RotatingFileHandler(log_path, maxBytes=max_bytes, backupCount=backup_count, encoding='utf-8')


def setup_logging(
    log_level: int = logging.INFO,
    log_dir: str = DEFAULT_LOG_DIR,
    log_file: str = "subconvert.log",
    log_format: str = DEFAULT_LOG_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
) -> Optional[str]:
    """
    Routes all subconvert logging to stdout and a rotating log file.

    A second call replaces the handlers installed by the first one, so the CLI
    can start with defaults and switch to the config file's destination once
    that file has been read.

    Args:
        log_level: The minimum logging level (e.g., logging.INFO, logging.DEBUG).
        log_dir: The directory to store log files.
        log_file: The name of the log file.
        log_format: The format string for log messages.
        date_format: The format string for timestamps in logs.
        max_bytes: Maximum size of a log file before rotation.
        backup_count: Number of backup log files to keep.

    Returns:
        The log file path, or None when only console logging could be set up.
    """
    root = logging.getLogger()
    _reset_root_handlers(root)
    root.setLevel(log_level)
    formatter = logging.Formatter(log_format, datefmt=date_format)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    console.setLevel(log_level)
    root.addHandler(console)

    log_path = os.path.join(log_dir, log_file)
    try:
        file_handler = _open_log_file(log_path, max_bytes, backup_count)
    except (FileSystemError, OSError) as e:
        logger.error(f"File logging disabled, could not open {log_path}: {e}")
        return None
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)
    logger.info(f"Logging initialized at {logging.getLevelName(log_level)}. Log file: {log_path}")
    return log_path


def _setting(config: Mapping[str, Any], key: str, expected: type, default: Any) -> Any:
    value = config.get(key, default)
    if isinstance(value, bool) or not isinstance(value, expected):
        raise ConfigurationError(f"Config key '{key}' must be of type {expected.__name__}, got {value!r}")
    return value


def setup_logging_from_config(config: Mapping[str, Any], log_level: int, default_log_file: str) -> Optional[str]:
    """
    Applies the logging keys of a loaded config: `log_dir`, `log_file`,
    `log_format`, `log_max_bytes` and `log_backup_count`. Missing keys fall
    back to the setup_logging defaults.

    Raises:
        ConfigurationError: If a logging key has the wrong type.
    """
    return setup_logging(
        log_level=log_level,
        log_dir=_setting(config, 'log_dir', str, DEFAULT_LOG_DIR),
        log_file=_setting(config, 'log_file', str, default_log_file),
        log_format=_setting(config, 'log_format', str, DEFAULT_LOG_FORMAT),
        max_bytes=_setting(config, 'log_max_bytes', int, DEFAULT_MAX_BYTES),
        backup_count=_setting(config, 'log_backup_count', int, DEFAULT_BACKUP_COUNT),
    )
