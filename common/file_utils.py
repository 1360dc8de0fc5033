# common/file_utils.py
# -*- coding: utf-8 -*-
"""
File system utility functions that honour dry-run mode: creating
directories and writing rendered configuration files.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from settings.config_models import SYMBOLS_DEFAULT, AppSettings

from .command_utils import is_dry_run, log_dry_run, log_installer

module_logger = logging.getLogger(__name__)


def ensure_directory(
    directory: Union[str, Path],
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
    description: Optional[str] = None,
) -> None:
    """
    Create ``directory`` and any missing parents (``mkdir -p``).

    In dry-run mode the action is only logged.

    Raises:
        OSError: If the directory cannot be created.
    """
    logger_to_use = current_logger if current_logger else module_logger
    directory = Path(directory)
    description = description or f"Creating directory {directory}"

    if is_dry_run(app_settings):
        log_dry_run(
            description, f"mkdir -p {directory}", app_settings, logger_to_use
        )
        return

    log_installer(description, "info", logger_to_use, app_settings)
    directory.mkdir(parents=True, exist_ok=True)


def write_text_file(
    file_path: Union[str, Path],
    content: str,
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
    description: Optional[str] = None,
    mode: Optional[int] = None,
) -> None:
    """
    Write ``content`` to ``file_path``, replacing any existing file.

    Args:
        file_path: Destination path. Its directory must already exist.
        content: Text to write (UTF-8).
        app_settings: Settings carrying the dry-run flag and symbols.
        current_logger: Logger to use.
        description: Human readable summary of the write.
        mode: Optional permission bits. A new file is created with them, an
            existing one is narrowed before its content is replaced.

    Raises:
        OSError: If the file cannot be written.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = (
        app_settings.symbols
        if app_settings and app_settings.symbols
        else SYMBOLS_DEFAULT
    )
    file_path = Path(file_path)
    description = description or f"Writing {file_path}"

    if is_dry_run(app_settings):
        log_dry_run(
            description,
            f"write {len(content.splitlines())} lines to {file_path}",
            app_settings,
            logger_to_use,
        )
        return

    log_installer(
        f"{symbols.get('file', '📄')} {description} ({file_path})",
        "info",
        logger_to_use,
        app_settings,
    )
    if mode is None:
        file_path.write_text(content, encoding="utf-8")
        return

    # Narrow an existing file before the new content lands in it.
    if file_path.exists():
        os.chmod(file_path, mode)
    fd = os.open(file_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    with os.fdopen(fd, "w", encoding="utf-8") as file_handle:
        file_handle.write(content)
