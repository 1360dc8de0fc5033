# settings/config_loader.py
# -*- coding: utf-8 -*-
"""
Configuration loader for the installer.

Handles loading settings from Pydantic model defaults, environment variables,
a YAML file, and command-line arguments, applying this order of precedence:
1. Pydantic Model Defaults
2. Environment Variables (SSI_ prefix, '__' for nested stack settings)
3. YAML Configuration File
4. Command-Line Arguments
"""

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from settings.config_models import AppSettings

module_logger = logging.getLogger(__name__)

# CLI destinations that map one-to-one onto AppSettings fields.
CLI_SETTING_KEYS = ("dry_run", "config_root", "log_file")


def _deep_update(
    source: Dict[str, Any], overrides: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Recursively updates ``source`` with values from ``overrides``.

    Nested dictionaries are merged key by key; ``None`` values in
    ``overrides`` never replace an existing value.

    Returns:
        The updated ``source`` dictionary.
    """
    for key, value in overrides.items():
        if (
            isinstance(value, dict)
            and key in source
            and isinstance(source[key], dict)
        ):
            source[key] = _deep_update(source[key], value)
        elif value is not None:
            source[key] = value
    return source


def read_yaml_config(
    config_file_path: str,
    current_logger: Optional[logging.Logger] = None,
) -> Dict[str, Any]:
    """
    Reads a YAML configuration file.

    A missing file is not an error: the installer runs on defaults, environment
    variables and CLI flags alone. Unparseable or non-mapping content is logged
    and ignored.

    Args:
        config_file_path: Path to the YAML file.
        current_logger: Optional logger to use instead of the module logger.

    Returns:
        The parsed mapping, or an empty dict.
    """
    logger_to_use = current_logger if current_logger else module_logger
    yaml_config_path = Path(config_file_path)

    if not (yaml_config_path.exists() and yaml_config_path.is_file()):
        logger_to_use.info(
            f"Configuration file '{yaml_config_path}' not found. Using defaults, environment variables, and CLI args."
        )
        return {}

    try:
        with open(yaml_config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger_to_use.warning(
            f"Could not parse YAML config file '{yaml_config_path}': {e}. Using defaults and environment variables."
        )
        return {}
    except IOError as e:
        logger_to_use.warning(
            f"Could not read config file '{yaml_config_path}': {e}. Using defaults and environment variables."
        )
        return {}

    if yaml_data is None:
        return {}
    if not isinstance(yaml_data, dict):
        logger_to_use.warning(
            f"Config file '{yaml_config_path}' does not contain a valid YAML dictionary. Ignoring."
        )
        return {}

    logger_to_use.info(f"Loaded configuration from {yaml_config_path}")
    return yaml_data


def load_app_settings(
    cli_args: Optional[argparse.Namespace] = None,
    config_file_path: str = "config.yaml",
    current_logger: Optional[logging.Logger] = None,
) -> AppSettings:
    """
    Loads application settings with the precedence
    defaults < environment < YAML file < CLI arguments.

    Args:
        cli_args: Parsed command-line arguments (from argparse).
        config_file_path: Path to the YAML configuration file.
        current_logger: Optional logger to use instead of the module logger.

    Returns:
        An instance of AppSettings with the fully resolved configuration.

    Raises:
        SystemExit: If the merged configuration fails validation.
    """
    logger_to_use = current_logger if current_logger else module_logger

    try:
        current_values_dict = AppSettings().model_dump()
    except ValidationError as e:
        logger_to_use.error(f"Environment configuration is invalid: {e}")
        raise SystemExit(f"Configuration error: {e}") from e

    yaml_data = read_yaml_config(config_file_path, logger_to_use)
    current_values_dict = _deep_update(current_values_dict, yaml_data)

    if cli_args:
        cli_arg_dict = vars(cli_args)
        mapped_cli_values: Dict[str, Any] = {}
        for cli_key in CLI_SETTING_KEYS:
            cli_value = cli_arg_dict.get(cli_key)
            if cli_value is None:
                continue
            # store_true flags only ever switch dry-run on
            if cli_key == "dry_run" and not cli_value:
                continue
            mapped_cli_values[cli_key] = cli_value
        current_values_dict = _deep_update(
            current_values_dict, mapped_cli_values
        )

    try:
        final_settings = AppSettings(**current_values_dict)
    except ValidationError as e:
        logger_to_use.error(f"Configuration validation failed: {e}")
        raise SystemExit(f"Configuration error: {e}") from e

    logger_to_use.debug(
        "Successfully loaded and validated application settings"
    )
    return final_settings
