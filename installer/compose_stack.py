# installer/compose_stack.py
# -*- coding: utf-8 -*-
"""
Generic installer for docker-compose based stacks.

A stack component declares where its files live, which settings model holds
its parameters, and three templates (environment file, orchestration
descriptor, documentation). ``ComposeStackComponent.install`` runs the same
linear routine for every stack:

1. ensure the stack directory exists;
2. gather parameters (prompted, or the configured values in dry-run mode);
3. generate database secrets where the stack needs them;
4. render and validate ``.env`` and ``docker-compose.yml`` (``.env``
   values are quoted where compose would reinterpret them);
5. render ``README.md``;
6. write the files and run ``<compose command> up -d`` in the directory.

Templates are ``str.format`` strings; compose variable references are
written ``${{NAME}}`` so they survive formatting as ``${NAME}``.
"""

import re
import shlex
import string
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel

from common.command_utils import log_installer, run_command
from common.file_utils import ensure_directory, write_text_file
from installer.base_component import BaseComponent
from settings import config as static_config
from settings.cli_handler import prompt_model_fields


def validate_compose_descriptor(content: str) -> Dict[str, Any]:
    """
    Parse a rendered docker-compose descriptor.

    Returns:
        The parsed descriptor.

    Raises:
        ValueError: If the content is not YAML or has no ``services`` mapping.
    """
    try:
        descriptor = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ValueError(f"Rendered compose file is not valid YAML: {e}") from e
    if not isinstance(descriptor, dict):
        raise ValueError("Rendered compose file is not a YAML mapping")
    services = descriptor.get("services")
    if not isinstance(services, dict) or not services:
        raise ValueError("Rendered compose file defines no services")
    return descriptor


ENV_SAFE_VALUE = re.compile(r"^[A-Za-z0-9_./:,@+=-]*$")


def quote_env_value(key: str, value: Any) -> str:
    """
    Render ``value`` for a compose ``.env`` file. Anything compose would
    interpolate or strip (``$``, `` #``, spaces, quotes) is single-quoted,
    which compose reads literally.

    Raises:
        ValueError: If the value holds a single quote or a newline.
    """
    text = str(value)
    if ENV_SAFE_VALUE.match(text):
        return text
    if "'" in text or "\n" in text:
        raise ValueError(
            f"Value for {key} contains a single quote or newline and cannot be written to .env"
        )
    return f"'{text}'"


class ComposeStackComponent(BaseComponent):
    """
    Base class for components deployed as a docker-compose stack.

    Subclasses set the class attributes below and may override the hooks
    ``gather_parameters``, ``generate_secrets``, ``build_context``,
    ``prepare_host``, ``get_compose_template`` and ``access_summary``.
    """

    directory_name: str = ""
    settings_attr: str = ""
    env_template: str = ""
    compose_template: str = ""
    readme_template: str = ""

    def __init__(self, app_settings, logger=None):
        super().__init__(app_settings, logger)
        self.parameters: Optional[BaseModel] = None
        self.rendered_files: Dict[str, str] = {}

    @property
    def stack_dir(self) -> Path:
        return Path(self.app_settings.config_root) / self.directory_name

    def compose_command(self) -> List[str]:
        return shlex.split(self.app_settings.compose_command)

    def _log(self, message: str, level: str = "info") -> None:
        log_installer(message, level, self.logger, self.app_settings)

    def _fail(self, message: str) -> bool:
        self._log(f"{self.symbols.get('error', '❌')} {message}", "error")
        return False

    def gather_parameters(self) -> BaseModel:
        """
        Prompt for the stack parameters. Dry runs use the configured values
        without prompting.
        """
        configured = getattr(self.app_settings, self.settings_attr)
        if self.dry_run:
            return configured
        return prompt_model_fields(configured, self.app_settings, self.logger)

    def generate_secrets(self) -> Dict[str, str]:
        """Secrets added to the template context. None by default."""
        return {}

    def build_context(
        self, parameters: BaseModel, secrets: Dict[str, str]
    ) -> Dict[str, Any]:
        """
        Values available to the templates: every parameter field, the
        generated secrets, the stack directory and the compose command.
        """
        context: Dict[str, Any] = parameters.model_dump()
        context.update(secrets)
        context["stack_dir"] = str(self.stack_dir)
        context["compose"] = self.app_settings.compose_command
        return context

    def prepare_host(self, context: Dict[str, Any]) -> bool:
        """Extra host preparation before files are written."""
        return True

    def access_summary(self, context: Dict[str, Any]) -> List[str]:
        """Lines logged after a successful installation."""
        return []

    def get_compose_template(self, context: Dict[str, Any]) -> str:
        return self.compose_template

    def render(self, context: Dict[str, Any]) -> Dict[str, str]:
        """
        Render the environment file, the compose descriptor and the README.

        Returns:
            Mapping of file name to rendered content.

        Raises:
            KeyError: If a template references an unknown placeholder.
            ValueError: If the rendered descriptor is invalid or an
                environment value cannot be quoted.
        """
        compose_content = self.get_compose_template(context).format(**context)
        validate_compose_descriptor(compose_content)
        env_fields = {
            field
            for _, field, _, _ in string.Formatter().parse(self.env_template)
            if field
        }
        env_context = {
            key: quote_env_value(key, value) if key in env_fields else value
            for key, value in context.items()
        }
        return {
            static_config.ENV_FILE_NAME: self.env_template.format(
                **env_context
            ),
            static_config.COMPOSE_FILE_NAME: compose_content,
            static_config.README_FILE_NAME: self.readme_template.format(
                **context
            ),
        }

    def install(self) -> bool:
        name = self.get_display_name()
        self._log(f"{self.symbols.get('step', '➡️')} Installing {name}...")

        try:
            ensure_directory(
                self.stack_dir,
                self.app_settings,
                self.logger,
                description=f"Creating {name} configuration directory",
            )
        except OSError as e:
            return self._fail(
                f"Failed to create or access {name} directory {self.stack_dir}: {e}"
            )

        self.parameters = self.gather_parameters()
        context = self.build_context(self.parameters, self.generate_secrets())

        if not self.prepare_host(context):
            return False

        try:
            self.rendered_files = self.render(context)
        except (KeyError, ValueError) as e:
            return self._fail(f"Failed to render {name} configuration: {e}")

        descriptions = {
            static_config.ENV_FILE_NAME: f"Creating {name} .env file",
            static_config.COMPOSE_FILE_NAME: f"Creating {name} docker-compose.yml",
            static_config.README_FILE_NAME: f"Creating {name} README file",
        }
        for file_name, content in self.rendered_files.items():
            mode = 0o600 if file_name == static_config.ENV_FILE_NAME else None
            try:
                write_text_file(
                    self.stack_dir / file_name,
                    content,
                    self.app_settings,
                    self.logger,
                    description=descriptions[file_name],
                    mode=mode,
                )
            except OSError as e:
                return self._fail(f"Failed to write {file_name} for {name}: {e}")

        try:
            run_command(
                self.compose_command() + ["up", "-d"],
                self.app_settings,
                current_logger=self.logger,
                cwd=str(self.stack_dir),
                description=f"Starting {name} containers",
            )
        except (subprocess.CalledProcessError, FileNotFoundError) as e:
            return self._fail(f"Failed to start {name} containers: {e}")

        self._log(
            f"{self.symbols.get('success', '✅')} {name} installed successfully",
            "success",
        )
        self._log(f"Configuration files saved to: {self.stack_dir}")
        for line in self.access_summary(context):
            self._log(line)
        return True
