# common/debian/apt_manager.py
# -*- coding: utf-8 -*-
import logging
import os
import subprocess
from typing import List, Optional, Union

from common.command_utils import (
    command_exists,
    run_command,
    run_elevated_command,
)
from common.file_utils import ensure_directory, write_text_file
from settings.config_models import AppSettings

APT_ENV = {"DEBIAN_FRONTEND": "noninteractive"}


class AptManager:
    """
    A small manager for Debian/Ubuntu packages using the apt-get command-line
    tool. Every call is routed through ``run_elevated_command`` so dry-run
    mode is honoured.
    """

    def __init__(
        self, logger: Optional[logging.Logger] = None, require_apt: bool = True
    ):
        """
        Initializes the AptManager.
        Args:
            logger: An optional logging object.
            require_apt: Fail fast when 'apt-get' is not on PATH. Disabled for
                dry runs, which never invoke it.
        """
        self.logger = logger or logging.getLogger(__name__)
        if require_apt and not command_exists("apt-get"):
            self.logger.critical(
                "'apt-get' command not found. This manager cannot function."
            )
            raise FileNotFoundError(
                "'apt-get' not found. Is this a Debian-based system?"
            )

    def _env(self) -> dict:
        return {**os.environ, **APT_ENV}

    def update(
        self, app_settings: AppSettings, raise_error: bool = False
    ) -> bool:
        """
        Updates the list of available packages using 'apt-get update'.

        Args:
            app_settings: The application settings.
            raise_error: Whether to raise an exception on failure.

        Returns:
            True if successful, False otherwise.
        """
        try:
            run_elevated_command(
                ["apt-get", "update", "-yq"],
                app_settings,
                current_logger=self.logger,
                env=self._env(),
                description="Updating package lists",
            )
            return True
        except (subprocess.CalledProcessError, FileNotFoundError) as e:
            self.logger.error(f"Failed to update package lists: {e}")
            if raise_error:
                raise
            return False

    def upgrade(self, app_settings: AppSettings) -> bool:
        """
        Upgrades installed packages using 'apt-get upgrade'.

        Returns:
            True if successful, False otherwise.
        """
        try:
            run_elevated_command(
                ["apt-get", "upgrade", "-yq"],
                app_settings,
                current_logger=self.logger,
                env=self._env(),
                description="Upgrading installed packages",
            )
            return True
        except (subprocess.CalledProcessError, FileNotFoundError) as e:
            self.logger.error(f"Failed to upgrade system packages: {e}")
            return False

    def install(
        self,
        packages: Union[List[str], str],
        app_settings: AppSettings,
        update_first: bool = True,
    ) -> bool:
        """
        Installs one or more packages using 'apt-get install'.

        Args:
            packages: A single package name or a list of package names.
            app_settings: The application settings.
            update_first: Whether to update the package lists before installing.

        Returns:
            True if successful, False otherwise.
        """
        if not isinstance(packages, list):
            packages = [packages]

        if update_first:
            if not self.update(app_settings):
                return False

        try:
            run_elevated_command(
                ["apt-get", "install", "-yq"] + packages,
                app_settings,
                current_logger=self.logger,
                env=self._env(),
                description=f"Installing packages: {', '.join(packages)}",
            )
            return True
        except (subprocess.CalledProcessError, FileNotFoundError) as e:
            self.logger.error(f"Failed to install packages: {e}")
            return False

    def remove(
        self,
        packages: Union[List[str], str],
        app_settings: AppSettings,
    ) -> None:
        """
        Removes packages one at a time with 'apt-get remove'. Packages that
        are not installed are expected; failures are logged at debug level
        and otherwise ignored.
        """
        if not isinstance(packages, list):
            packages = [packages]

        for pkg_name in packages:
            result = run_elevated_command(
                ["apt-get", "remove", "-yq", pkg_name],
                app_settings,
                check=False,
                capture_output=True,
                current_logger=self.logger,
                env=self._env(),
                description=f"Removing package {pkg_name} if present",
            )
            if result.returncode != 0:
                self.logger.debug(
                    f"Package '{pkg_name}' was not removed (rc {result.returncode})."
                )

    def add_gpg_key_from_url(
        self, key_url: str, keyring_path: str, app_settings: AppSettings
    ) -> bool:
        """
        Downloads a GPG key from a URL and saves it to a specified keyring.

        Args:
            key_url: The URL of the GPG key.
            keyring_path: The path to save the keyring file.
            app_settings: The application settings.

        Returns:
            True if successful, False otherwise.
        """
        self.logger.info(f"Adding GPG key from {key_url} to {keyring_path}")

        keyring_dir = os.path.dirname(keyring_path)
        try:
            run_elevated_command(
                ["install", "-m", "0755", "-d", keyring_dir],
                app_settings,
                current_logger=self.logger,
                description=f"Creating keyring directory {keyring_dir}",
            )
            run_command(
                ["curl", "-fsSL", key_url, "-o", keyring_path],
                app_settings,
                check=True,
                current_logger=self.logger,
                description="Downloading repository signing key",
            )
            run_elevated_command(
                ["chmod", "a+r", keyring_path],
                app_settings,
                current_logger=self.logger,
            )
            return True
        except (subprocess.CalledProcessError, FileNotFoundError) as e:
            self.logger.error(f"Failed to add GPG key: {e}")
            return False

    def add_repository(
        self,
        source_line: str,
        list_path: str,
        app_settings: AppSettings,
        update_after: bool = True,
    ) -> bool:
        """
        Adds an apt repository by writing a one-line-style .list file.

        Args:
            source_line: The full "deb [...] url suite component" line.
            list_path: Destination under /etc/apt/sources.list.d.
            app_settings: The application settings.
            update_after: Whether to update package lists after adding.

        Returns:
            True if successful, False otherwise.
        """
        self.logger.info(f"Adding repository: {source_line}")
        try:
            ensure_directory(
                os.path.dirname(list_path), app_settings, self.logger
            )
            write_text_file(
                list_path,
                source_line + "\n",
                app_settings,
                self.logger,
                description="Writing apt source list",
                mode=0o644,
            )
        except OSError as e:
            self.logger.error(
                f"Failed to create repository file '{list_path}': {e}"
            )
            return False

        if update_after:
            return self.update(app_settings)
        return True
