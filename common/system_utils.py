# common/system_utils.py
# -*- coding: utf-8 -*-
"""
System-level utility functions for the installer.

This module includes privilege checks, distribution codename and
architecture detection, and database password generation.
"""

import base64
import logging
import os
import secrets
import subprocess
from pathlib import Path
from typing import Dict, Optional

from common.command_utils import log_installer, run_command
from settings.config_models import SYMBOLS_DEFAULT, AppSettings

module_logger = logging.getLogger(__name__)

OS_RELEASE_PATH = "/etc/os-release"
SECRET_BYTES = 16


def is_root() -> bool:
    return os.geteuid() == 0


def get_sudo_user() -> Optional[str]:
    """The invoking user when running under sudo, otherwise None."""
    return os.environ.get("SUDO_USER") or None


def generate_secret(num_bytes: int = SECRET_BYTES) -> str:
    """
    Generate a random password, base64 encoded like ``openssl rand -base64 16``.
    """
    return base64.b64encode(secrets.token_bytes(num_bytes)).decode("ascii")


def read_os_release(path: str = OS_RELEASE_PATH) -> Dict[str, str]:
    """
    Parse an os-release file into a dict. A missing file yields an empty dict.
    """
    values: Dict[str, str] = {}
    release_file = Path(path)
    if not release_file.is_file():
        return values
    for line in release_file.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        values[key] = value.strip().strip('"').strip("'")
    return values


def get_distribution_codename(
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
    os_release_path: str = OS_RELEASE_PATH,
) -> Optional[str]:
    """
    Get the distribution codename (e.g., 'noble', 'bookworm').

    UBUNTU_CODENAME is preferred over VERSION_CODENAME so that Ubuntu
    derivatives resolve to their Ubuntu base.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = (
        app_settings.symbols
        if app_settings and app_settings.symbols
        else SYMBOLS_DEFAULT
    )
    release = read_os_release(os_release_path)
    codename = release.get("UBUNTU_CODENAME") or release.get(
        "VERSION_CODENAME"
    )
    if not codename:
        log_installer(
            f"{symbols.get('warning', '!')} Could not determine distribution codename from {os_release_path}.",
            "warning",
            logger_to_use,
            app_settings,
        )
        return None
    return codename


def get_dpkg_architecture(
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> Optional[str]:
    """
    Get the dpkg architecture (e.g., 'amd64').

    Returns None in dry-run mode, where ``dpkg`` is not invoked.
    """
    logger_to_use = current_logger if current_logger else module_logger
    try:
        result = run_command(
            ["dpkg", "--print-architecture"],
            app_settings,
            check=True,
            capture_output=True,
            current_logger=logger_to_use,
            description="Detecting dpkg architecture",
        )
    except (subprocess.CalledProcessError, FileNotFoundError) as e:
        log_installer(
            f"Could not determine dpkg architecture: {e}",
            "warning",
            logger_to_use,
            app_settings,
        )
        return None
    return result.stdout.strip() or None
