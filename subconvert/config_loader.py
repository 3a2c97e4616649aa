"""Handles loading configuration from YAML files."""

import yaml
import os
import logging
from typing import Any, List, Mapping

from .exceptions import ConfigurationError, UnsupportedFormatError
from .handler import parse_format_list
from .models import ConversionOptions, SubtitleFormat

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_FORMATS = "srt"

class ConfigLoader:
    """Loads configuration settings from a YAML file."""

    def load_config(self, config_path: str) -> dict:
        """
        Loads configuration from the specified YAML file path.

        Args:
            config_path: The path to the YAML configuration file.

        Returns:
            A dictionary containing the loaded configuration settings.

        Raises:
            FileNotFoundError: If the configuration file does not exist.
            ConfigurationError: If the file cannot be parsed as YAML or
                              if there are other reading errors.
        """
        logger.info(f"Attempting to load configuration from: {config_path}")
        if not os.path.exists(config_path):
            logger.error(f"Configuration file not found at path: {config_path}")
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        if not os.path.isfile(config_path):
             logger.error(f"Configuration path is not a file: {config_path}")
             raise ConfigurationError(f"Configuration path is not a file: {config_path}")

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Error parsing YAML configuration file {config_path}: {e}", exc_info=True)
            raise ConfigurationError(f"Invalid YAML format in {config_path}: {e}") from e
        except IOError as e:
            logger.error(f"Error reading configuration file {config_path}: {e}", exc_info=True)
            raise ConfigurationError(f"Could not read configuration file {config_path}: {e}") from e

        if not isinstance(config, dict):
            # An empty file loads as None, a bare scalar as str/int
            logger.error(f"Configuration file {config_path} did not load as a dictionary (root object).")
            raise ConfigurationError(f"Invalid YAML structure in {config_path}. Root must be a mapping (dictionary).")
        logger.info(f"Configuration loaded successfully from {config_path}")
        return config

    def conversion_options(self, config: Mapping[str, Any]) -> ConversionOptions:
        """
        Builds ConversionOptions from the `options` section of a loaded config.

        Raises:
            ConfigurationError: If the section is not a mapping or holds bad values.
        """
        try:
            return ConversionOptions.from_dict(config.get('options'))
        except ValueError as e:
            logger.error(f"Invalid 'options' section in configuration: {e}")
            raise ConfigurationError(f"Invalid 'options' section: {e}") from e

    def output_formats(self, config: Mapping[str, Any]) -> List[SubtitleFormat]:
        """
        Reads `output_formats` as a list or a comma-separated string.

        Raises:
            ConfigurationError: If an entry is not a supported format.
        """
        value = config.get('output_formats', DEFAULT_OUTPUT_FORMATS)
        if isinstance(value, (list, tuple)):
            value = ",".join(str(v) for v in value)
        try:
            return parse_format_list(value)
        except UnsupportedFormatError as e:
            raise ConfigurationError(f"Invalid 'output_formats' in configuration: {e}") from e
