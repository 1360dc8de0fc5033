# installer/docker_installer.py
# -*- coding: utf-8 -*-
"""
Installs Docker Engine from Docker's official apt repository.
"""

import logging
import subprocess
from typing import Optional

from common.command_utils import log_installer, run_command, run_elevated_command
from common.debian.apt_manager import AptManager
from common.file_utils import ensure_directory
from common.system_utils import (
    get_distribution_codename,
    get_dpkg_architecture,
    get_sudo_user,
)
from installer.base_component import BaseComponent
from installer.registry import ComponentRegistry
from settings import config as static_config
from settings.config_models import AppSettings


@ComponentRegistry.register(
    "docker",
    metadata={
        "display_name": "Docker",
        "description": "Docker Engine, CLI, containerd and the compose plugin.",
    },
)
class DockerEngineComponent(BaseComponent):
    """
    Installs Docker following the upstream Debian/Ubuntu procedure.
    """

    def __init__(
        self, app_settings: AppSettings, logger: Optional[logging.Logger] = None
    ):
        super().__init__(app_settings, logger)
        self.apt_manager = AptManager(
            logger=self.logger, require_apt=not app_settings.dry_run
        )

    def _log(self, message: str, level: str = "info") -> None:
        log_installer(message, level, self.logger, self.app_settings)

    def repository_line(self) -> Optional[str]:
        """
        Build the apt source line for Docker's repository.

        Returns None when the distribution codename cannot be determined.
        """
        codename = get_distribution_codename(self.app_settings, self.logger)
        if not codename:
            if not self.dry_run:
                return None
            codename = "$(. /etc/os-release && echo ${UBUNTU_CODENAME:-$VERSION_CODENAME})"
        arch = get_dpkg_architecture(self.app_settings, self.logger)
        if not arch:
            # dpkg is not run in dry-run mode
            arch = "$(dpkg --print-architecture)"
        return (
            f"deb [arch={arch} signed-by={static_config.DOCKER_KEYRING_PATH}] "
            f"{self.app_settings.docker_repo_url} {codename} stable"
        )

    def add_user_to_group(self) -> None:
        sudo_user = get_sudo_user()
        if not sudo_user:
            self.logger.debug("SUDO_USER not set; skipping docker group setup.")
            return
        try:
            run_elevated_command(
                ["usermod", "-aG", "docker", sudo_user],
                self.app_settings,
                current_logger=self.logger,
                description=f"Adding user {sudo_user} to docker group",
            )
        except (subprocess.CalledProcessError, FileNotFoundError) as e:
            self._log(
                f"{self.symbols.get('warning', '!')} Could not add {sudo_user} to the docker group: {e}",
                "warning",
            )
            return
        self._log(
            f"Added user {sudo_user} to docker group. Log out and back in to apply changes."
        )

    def verify(self) -> bool:
        try:
            run_command(
                [self.app_settings.container_runtime_command, "run", "--rm", "hello-world"],
                self.app_settings,
                capture_output=True,
                current_logger=self.logger,
                description="Verifying Docker installation",
            )
        except (subprocess.CalledProcessError, FileNotFoundError):
            return False
        return True

    def install(self) -> bool:
        self._log(f"{self.symbols.get('step', '➡️')} Installing Docker...")

        try:
            ensure_directory(
                self.app_settings.config_root,
                self.app_settings,
                self.logger,
                description="Creating container configuration root",
            )
        except OSError as e:
            self._log(
                f"{self.symbols.get('error', '❌')} Failed to create {self.app_settings.config_root}: {e}",
                "error",
            )
            return False

        self._log("Removing old Docker versions if present")
        self.apt_manager.remove(
            list(static_config.DOCKER_CONFLICTING_PACKAGES), self.app_settings
        )

        self._log("Installing Docker prerequisites")
        if not self.apt_manager.install(
            list(static_config.DOCKER_PREREQ_PACKAGES), self.app_settings
        ):
            self._log(
                f"{self.symbols.get('error', '❌')} Failed to install Docker prerequisites",
                "error",
            )
            return False

        self._log("Setting up Docker repository")
        if not self.apt_manager.add_gpg_key_from_url(
            f"{self.app_settings.docker_repo_url}/gpg",
            static_config.DOCKER_KEYRING_PATH,
            self.app_settings,
        ):
            self._log(
                f"{self.symbols.get('error', '❌')} Failed to add Docker signing key",
                "error",
            )
            return False

        source_line = self.repository_line()
        if source_line is None or not self.apt_manager.add_repository(
            source_line,
            static_config.DOCKER_SOURCES_LIST_PATH,
            self.app_settings,
            update_after=False,
        ):
            self._log(
                f"{self.symbols.get('error', '❌')} Failed to add Docker apt repository",
                "error",
            )
            return False

        self._log("Installing Docker packages")
        if not self.apt_manager.install(
            list(static_config.DOCKER_PACKAGES), self.app_settings
        ):
            self._log(
                f"{self.symbols.get('error', '❌')} Failed to install Docker",
                "error",
            )
            return False

        self.add_user_to_group()

        if not self.verify():
            self._log(
                f"{self.symbols.get('error', '❌')} Docker installation verification failed",
                "error",
            )
            return False

        self._log(
            f"{self.symbols.get('success', '✅')} Docker installed and verified successfully",
            "success",
        )
        return True
