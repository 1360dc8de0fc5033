# common/command_utils.py
# -*- coding: utf-8 -*-
"""
Utilities for executing shell commands and logging their output.

Every external command goes through ``run_command``. When the settings
passed in have ``dry_run`` enabled the command is described in the log
and never started.
"""

import logging
import os
import shutil
import subprocess
from typing import Dict, List, Optional

from settings.config_models import SYMBOLS_DEFAULT, AppSettings

module_logger = logging.getLogger(__name__)


def log_installer(
    message: str,
    level: str = "info",
    current_logger: Optional[logging.Logger] = None,
    app_settings: Optional[AppSettings] = None,
    exc_info: bool = False,
) -> None:
    """
    Logs a message at the given level.

    Args:
        message (str): The log message to be recorded.
        level (str): "debug", "info", "success", "warning", "error" or
            "critical". "success" is logged at INFO. Defaults to "info".
        current_logger (Optional[logging.Logger]): Logger to use. If not
            provided, the module-level logger is used.
        app_settings (Optional[AppSettings]): Optional application settings.
        exc_info (bool): Whether to include exception details.
    """
    effective_logger = current_logger if current_logger else module_logger

    if level == "warning":
        effective_logger.warning(message, exc_info=exc_info)
    elif level == "error":
        effective_logger.error(message, exc_info=exc_info)
    elif level == "critical":
        effective_logger.critical(message, exc_info=exc_info)
    elif level == "debug":
        effective_logger.debug(message, exc_info=exc_info)
    else:
        effective_logger.info(message, exc_info=exc_info)


def _symbols(app_settings: Optional[AppSettings]) -> Dict[str, str]:
    return (
        app_settings.symbols
        if app_settings and app_settings.symbols
        else SYMBOLS_DEFAULT
    )


def is_dry_run(app_settings: Optional[AppSettings]) -> bool:
    return bool(app_settings and app_settings.dry_run)


def log_dry_run(
    description: str,
    command_text: str,
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Logs what would have been done for a skipped external action."""
    log_installer(
        f"Would execute: {description}",
        "info",
        current_logger,
        app_settings,
    )
    log_installer(
        f"Command: {command_text}", "info", current_logger, app_settings
    )


def _get_elevated_command_prefix() -> List[str]:
    """
    Returns ``["sudo"]`` when the process is not root, otherwise an empty list.
    """
    return [] if os.geteuid() == 0 else ["sudo"]


def run_command(
    command: List[str],
    app_settings: Optional[AppSettings],
    check: bool = True,
    capture_output: bool = False,
    text: bool = True,
    current_logger: Optional[logging.Logger] = None,
    cwd: Optional[str] = None,
    env: Optional[Dict[str, str]] = None,
    description: Optional[str] = None,
) -> subprocess.CompletedProcess:
    """
    Executes a system command and logs the process details and results.

    In dry-run mode nothing is executed: the description and the command line
    are logged and a successful ``CompletedProcess`` with empty output is
    returned.

    Args:
        command (List[str]): The command and its arguments.
        app_settings (Optional[AppSettings]): Settings carrying the dry-run
            flag and logging symbols.
        check (bool): Raise CalledProcessError on a non-zero exit code.
        capture_output (bool): Capture stdout and stderr.
        text (bool): Decode output streams as text.
        current_logger (Optional[logging.Logger]): Logger to use.
        cwd (Optional[str]): Working directory for the command.
        env (Optional[Dict[str, str]]): Environment for the command.
        description (Optional[str]): Human readable summary of the action.

    Returns:
        subprocess.CompletedProcess: The completed (or simulated) process.

    Raises:
        subprocess.CalledProcessError: Non-zero exit code with ``check=True``.
        FileNotFoundError: The executable does not exist.
    """
    effective_logger = current_logger if current_logger else module_logger
    symbols = _symbols(app_settings)
    command_to_log_str = subprocess.list2cmdline(command)

    location = f" (in {cwd})" if cwd else ""
    if is_dry_run(app_settings):
        log_dry_run(
            description or command_to_log_str,
            f"{command_to_log_str}{location}",
            app_settings,
            effective_logger,
        )
        return subprocess.CompletedProcess(
            args=command, returncode=0, stdout="", stderr=""
        )

    if description:
        log_installer(
            f"{symbols.get('step', '➡️')} {description}",
            "info",
            effective_logger,
            app_settings,
        )
    log_installer(
        f"{symbols.get('gear', '⚙️')} Executing: {command_to_log_str}{location}",
        "info",
        effective_logger,
        app_settings,
    )
    try:
        result = subprocess.run(
            command,
            check=check,
            capture_output=capture_output,
            text=text,
            cwd=cwd,
            env=env,
        )
        if capture_output:
            if result.stdout and result.stdout.strip():
                log_installer(
                    f"   stdout: {result.stdout.strip()}",
                    "debug",
                    effective_logger,
                    app_settings,
                )
            if (
                result.stderr
                and result.stderr.strip()
                and (not check or result.returncode == 0)
            ):
                log_installer(
                    f"   stderr: {result.stderr.strip()}",
                    "debug",
                    effective_logger,
                    app_settings,
                )
        return result
    except subprocess.CalledProcessError as e:
        stdout_info = (
            e.stdout.strip()
            if e.stdout and hasattr(e.stdout, "strip")
            else "N/A"
        )
        stderr_info = (
            e.stderr.strip()
            if e.stderr and hasattr(e.stderr, "strip")
            else "N/A"
        )
        cmd_executed_str = (
            subprocess.list2cmdline(e.cmd)
            if isinstance(e.cmd, list)
            else str(e.cmd)
        )

        log_installer(
            f"{symbols.get('error', '❌')} Command `{cmd_executed_str}` failed (rc {e.returncode}).",
            "error",
            effective_logger,
            app_settings,
        )
        if stdout_info != "N/A":
            log_installer(
                f"   stdout: {stdout_info}",
                "error",
                effective_logger,
                app_settings,
            )
        if stderr_info != "N/A":
            log_installer(
                f"   stderr: {stderr_info}",
                "error",
                effective_logger,
                app_settings,
            )
        raise
    except FileNotFoundError as e:
        log_installer(
            f"{symbols.get('error', '❌')} Command not found: {e.filename}. Ensure it's installed and in PATH.",
            "error",
            effective_logger,
            app_settings,
        )
        raise


def run_elevated_command(
    command: List[str],
    app_settings: Optional[AppSettings],
    check: bool = True,
    capture_output: bool = False,
    current_logger: Optional[logging.Logger] = None,
    cwd: Optional[str] = None,
    env: Optional[Dict[str, str]] = None,
    description: Optional[str] = None,
) -> subprocess.CompletedProcess:
    """
    Executes a command with elevated permissions, prefixing ``sudo`` when the
    process is not already root. Dry-run handling is inherited from
    ``run_command``.
    """
    prefix = _get_elevated_command_prefix()
    elevated_command_list = prefix + list(command)
    return run_command(
        elevated_command_list,
        app_settings,
        check=check,
        capture_output=capture_output,
        text=True,
        current_logger=current_logger,
        cwd=cwd,
        env=env,
        description=description,
    )


def command_exists(command_name: str) -> bool:
    """
    Check if a command exists in the system's PATH.
    """
    return shutil.which(command_name) is not None
