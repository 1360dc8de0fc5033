# installer/basic_installer.py
# -*- coding: utf-8 -*-
"""
System update and basic administration utilities.
"""

import logging
from typing import Optional

from common.command_utils import log_installer
from common.debian.apt_manager import AptManager
from installer.base_component import BaseComponent
from installer.registry import ComponentRegistry
from settings import config as static_config
from settings.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def update_system(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> bool:
    """
    Refresh package lists and upgrade installed packages.

    Returns:
        True if both steps succeeded, False otherwise.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = app_settings.symbols
    try:
        apt_manager = AptManager(
            logger=logger_to_use, require_apt=not app_settings.dry_run
        )
    except FileNotFoundError as e:
        log_installer(
            f"{symbols.get('error', '❌')} {e}",
            "error",
            logger_to_use,
            app_settings,
        )
        return False

    if not apt_manager.update(app_settings):
        log_installer(
            f"{symbols.get('error', '❌')} Failed to update package lists",
            "error",
            logger_to_use,
            app_settings,
        )
        return False
    if not apt_manager.upgrade(app_settings):
        log_installer(
            f"{symbols.get('error', '❌')} Failed to upgrade system packages",
            "error",
            logger_to_use,
            app_settings,
        )
        return False

    log_installer(
        f"{symbols.get('success', '✅')} System packages updated successfully",
        "success",
        logger_to_use,
        app_settings,
    )
    return True


@ComponentRegistry.register(
    "basic",
    metadata={
        "display_name": "basic utilities",
        "description": "Administration tools: mc, htop, fail2ban, git, chrony and others.",
    },
)
class BasicUtilitiesComponent(BaseComponent):
    def __init__(
        self, app_settings: AppSettings, logger: Optional[logging.Logger] = None
    ):
        super().__init__(app_settings, logger)
        self.apt_manager = AptManager(
            logger=self.logger, require_apt=not app_settings.dry_run
        )

    @property
    def packages(self):
        return self.app_settings.basic_packages or list(
            static_config.BASIC_PACKAGES
        )

    def install(self) -> bool:
        log_installer(
            f"{self.symbols.get('package', '📦')} Installing basic utilities...",
            "info",
            self.logger,
            self.app_settings,
        )
        # Package lists were refreshed by update_system.
        if not self.apt_manager.install(
            self.packages, self.app_settings, update_first=False
        ):
            log_installer(
                f"{self.symbols.get('error', '❌')} Failed to install basic utilities",
                "error",
                self.logger,
                self.app_settings,
            )
            return False

        log_installer(
            f"{self.symbols.get('success', '✅')} Basic utilities installed successfully",
            "success",
            self.logger,
            self.app_settings,
        )
        return True
