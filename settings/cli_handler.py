# settings/cli_handler.py
# -*- coding: utf-8 -*-
"""
Handles Command Line Interface (CLI) interactions for the installer:
yes/no confirmations, prompts with defaults, and the configuration view.
"""

import datetime
import logging
from typing import Any, Dict, List, Optional, Tuple, Type

from pydantic import BaseModel, ValidationError

from common.command_utils import log_installer
from settings import config as static_config
from settings.config_models import AppSettings

module_logger = logging.getLogger(__name__)

MASKED_VALUE = "********"
SECRET_FIELD_NAMES = ("admin_password",)


def _read_input(
    prompt_text: str,
    app_settings: AppSettings,
    logger_to_use: logging.Logger,
) -> Optional[str]:
    """Reads one line from stdin; returns None on EOF."""
    try:
        return input(prompt_text).strip()
    except EOFError:
        log_installer(
            f"{app_settings.symbols.get('warning', '!')} No user input (EOF) for prompt: '{prompt_text.strip()}'",
            "warning",
            logger_to_use,
            app_settings,
        )
        return None


def cli_confirm(
    prompt_message: str,
    app_settings: AppSettings,
    current_logger_instance: Optional[logging.Logger] = None,
    default: bool = True,
) -> bool:
    """
    Ask a yes/no question. Blank input or EOF selects the default.

    Returns:
        True for 'y'/'yes', False for anything else that is not blank.
    """
    logger_to_use = (
        current_logger_instance if current_logger_instance else module_logger
    )
    options = "[Y/n]" if default else "[y/N]"
    response = _read_input(
        f"{prompt_message} {options}: ", app_settings, logger_to_use
    )
    if not response:
        return default
    return response.lower() in ("y", "yes")


def prompt_with_default(
    prompt_message: str,
    default: Any,
    app_settings: AppSettings,
    current_logger_instance: Optional[logging.Logger] = None,
) -> str:
    """
    Prompt for a value, returning the default as a string for blank input or EOF.
    """
    logger_to_use = (
        current_logger_instance if current_logger_instance else module_logger
    )
    response = _read_input(
        f"{prompt_message} (default: {default}): ",
        app_settings,
        logger_to_use,
    )
    if not response:
        return str(default)
    return response


def prompt_choice(
    prompt_message: str,
    choices: List[Tuple[str, str]],
    default_value: str,
    app_settings: AppSettings,
    current_logger_instance: Optional[logging.Logger] = None,
) -> str:
    """
    Offer a numbered menu and return the value of the chosen entry.

    Args:
        prompt_message: Heading printed above the menu.
        choices: (value, label) pairs in display order.
        default_value: Value selected on blank input or EOF.

    Returns:
        The value of the selected choice.
    """
    logger_to_use = (
        current_logger_instance if current_logger_instance else module_logger
    )
    values = [value for value, _ in choices]
    default_index = values.index(default_value) + 1

    print(prompt_message)
    for idx, (_, label) in enumerate(choices, 1):
        print(f"{idx}) {label}")

    while True:
        response = _read_input(
            f"Enter choice [1-{len(choices)}] (default: {default_index}): ",
            app_settings,
            logger_to_use,
        )
        if not response:
            return default_value
        if response.isdigit() and 1 <= int(response) <= len(choices):
            return values[int(response) - 1]
        log_installer(
            f"{app_settings.symbols.get('warning', '!')} Please enter a number between 1 and {len(choices)}.",
            "warning",
            logger_to_use,
            app_settings,
        )


def prompt_model_fields(
    model: BaseModel,
    app_settings: AppSettings,
    current_logger_instance: Optional[logging.Logger] = None,
) -> BaseModel:
    """
    Prompt for every field of ``model`` flagged with ``prompt`` in its schema
    extras. The current value is the default; invalid input (e.g. a port out
    of range) is reported and asked again.

    Returns:
        A new, validated model instance holding the answers.
    """
    logger_to_use = (
        current_logger_instance if current_logger_instance else module_logger
    )
    model_class: Type[BaseModel] = type(model)
    values: Dict[str, Any] = model.model_dump()

    for field_name, field_info in model_class.model_fields.items():
        extra = field_info.json_schema_extra
        if not (isinstance(extra, dict) and extra.get("prompt")):
            continue
        while True:
            answer = prompt_with_default(
                field_info.description or field_name,
                values[field_name],
                app_settings,
                logger_to_use,
            )
            try:
                candidate = model_class.model_validate(
                    {**values, field_name: answer}
                )
            except ValidationError as e:
                error_msg = e.errors()[0].get("msg", str(e))
                log_installer(
                    f"{app_settings.symbols.get('warning', '!')} Invalid value for {field_name}: {error_msg}",
                    "warning",
                    logger_to_use,
                    app_settings,
                )
                continue
            values[field_name] = getattr(candidate, field_name)
            break

    return model_class.model_validate(values)


def _format_section(name: str, model: BaseModel) -> str:
    section = f"  {name} Settings ({name.lower()}.*):\n"
    for field_name, value in model.model_dump().items():
        if field_name in SECRET_FIELD_NAMES:
            value = MASKED_VALUE
        section += f"    {field_name + ':':<29}{value}\n"
    return section + "\n"


def view_configuration(
    app_config: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """
    Displays the current effective configuration values, including values
    sourced from CLI, YAML configuration, environment variables, or model
    defaults. Passwords are masked.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_config.symbols

    config_text = f"{symbols.get('info', 'ℹ️')} Current effective configuration values (CLI > YAML > ENV > Defaults):\n\n"
    config_text += f"  Dry Run:                       {app_config.dry_run}\n"
    config_text += (
        f"  Configuration Root:            {app_config.config_root}\n"
    )
    config_text += f"  Log Prefix:                    {app_config.log_prefix}\n"
    config_text += f"  Log File:                      {app_config.log_file or '[timestamped file in ' + static_config.LOG_FILE_DIR + ']'}\n"
    config_text += (
        f"  Compose Command:               {app_config.compose_command}\n"
    )
    config_text += f"  Container Runtime Command:     {app_config.container_runtime_command}\n"
    config_text += (
        f"  Docker Repository URL:         {app_config.docker_repo_url}\n\n"
    )

    config_text += _format_section("GitLab", app_config.gitlab)
    config_text += _format_section("Nginx", app_config.nginx)
    config_text += _format_section("Redmine", app_config.redmine)
    config_text += _format_section("Zabbix", app_config.zabbix)
    config_text += _format_section("Grafana", app_config.grafana)

    config_text += (
        f"  Script Version (static):       {static_config.SCRIPT_VERSION}\n"
    )
    config_text += f"  Timestamp (current view):      {datetime.datetime.now().strftime('%Y-%m-%d-%H%M%S')}\n\n"
    config_text += "Configuration is loaded with precedence: CLI > YAML File > Environment Variables > Model Defaults."

    log_installer(
        "Displaying current configuration:", "info", logger_to_use, app_config
    )
    log_installer(f"\n{config_text}\n", "info", logger_to_use, app_config)
