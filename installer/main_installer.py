# installer/main_installer.py
# -*- coding: utf-8 -*-
"""
Main entry point and orchestrator for the server services installer.
Handles argument parsing, logging setup, the root check, and runs the
selected components in the fixed installation order.
"""

import argparse
import logging
import sys
from enum import Enum
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel, Field

from common.command_utils import log_installer
from common.core_utils import default_log_file_path
from common.core_utils import setup_logging as common_setup_logging
from common.system_utils import is_root
from installer.basic_installer import update_system
from installer.registry import ComponentRegistry
from settings import config as static_config
from settings.cli_handler import cli_confirm, view_configuration
from settings.config_loader import load_app_settings
from settings.config_models import (
    CONFIG_ROOT_DEFAULT,
    DRY_RUN_LOG_PREFIX,
    AppSettings,
)

logger = logging.getLogger(__name__)

COMPONENT_FLAG_HELP: Dict[str, str] = {
    "basic": "Install basic utilities only",
    "docker": "Install Docker only",
    "gitlab": "Install GitLab only",
    "nginx": "Install Nginx only",
    "redmine": "Install Redmine only",
    "zabbix": "Install Zabbix only",
    "grafana": "Install Grafana only",
}


class InstallMode(str, Enum):
    INTERACTIVE = "interactive"
    BATCH = "batch"

    def __str__(self) -> str:
        return self.value


class InstallPlan(BaseModel):
    """Components to run and whether each one is confirmed first."""

    mode: InstallMode
    components: List[str] = Field(default_factory=list)


class InstallerArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports unknown options and exits with 1."""

    def error(self, message: str):
        logger.error(f"Unknown option: {message}")
        print(f"Unknown option: {message}", file=sys.stderr)
        self.print_help(sys.stderr)
        sys.exit(1)


def build_parser() -> InstallerArgumentParser:
    parser = InstallerArgumentParser(
        prog="server-services-install",
        description="Install and configure various server applications and tools.",
        epilog=(
            "If no component options are provided, the installer will prompt "
            "for each component. The --dry-run option can be combined with any "
            "other option to preview actions."
        ),
    )
    parser.add_argument(
        "--dry-run",
        dest="dry_run",
        action="store_true",
        help="Show what would be executed without actually running commands.",
    )
    parser.add_argument(
        "--all", action="store_true", help="Install all components."
    )

    component_group = parser.add_argument_group("Component Flags")
    for name in static_config.COMPONENT_ORDER:
        component_group.add_argument(
            f"--{name}",
            action="store_true",
            help=COMPONENT_FLAG_HELP.get(name, f"Install {name} only"),
        )

    config_group = parser.add_argument_group(
        "Configuration Overrides (CLI > YAML > ENV > Defaults)"
    )
    config_group.add_argument(
        "--config-file",
        default="config.yaml",
        help="Path to YAML configuration file (default: config.yaml).",
    )
    config_group.add_argument(
        "--config-root",
        dest="config_root",
        default=None,
        help=f"Directory for per-service configuration. Default: {CONFIG_ROOT_DEFAULT}",
    )
    config_group.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Log file path. Default: a timestamped file in /tmp.",
    )
    config_group.add_argument(
        "--view-config",
        action="store_true",
        help="View current configuration settings and exit.",
    )
    return parser


def resolve_install_plan(parsed_args: argparse.Namespace) -> InstallPlan:
    """
    Turn parsed flags into an install plan.

    ``--all`` selects every component. Otherwise the selected component
    flags form a batch in the fixed order; with none selected the plan is
    interactive over every component.
    """
    all_components = ComponentRegistry.ordered_names()
    if getattr(parsed_args, "all", False):
        return InstallPlan(mode=InstallMode.BATCH, components=all_components)

    selected = [
        name for name in all_components if getattr(parsed_args, name, False)
    ]
    if selected:
        return InstallPlan(
            mode=InstallMode.BATCH,
            components=ComponentRegistry.sort_names(selected),
        )
    return InstallPlan(mode=InstallMode.INTERACTIVE, components=all_components)


def execute_component(
    name: str,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Instantiate and install one component.

    Returns:
        True if the component installed successfully. An exception raised
        by the component is logged and treated as a failure.
    """
    logger_to_use = current_logger if current_logger else logger
    symbols = app_settings.symbols
    component_class = ComponentRegistry.get_component(name)
    display_name = str(component_class.metadata.get("display_name") or name)

    log_installer(
        f"--- {symbols.get('step', '➡️')} Executing: {display_name} ({name}) ---",
        "info",
        logger_to_use,
        app_settings,
    )
    description = component_class.metadata.get("description")
    if description:
        log_installer(f"   {description}", "info", logger_to_use, app_settings)
    try:
        component = component_class(app_settings, logger_to_use)
        result = component.install()
    except Exception as e:
        log_installer(
            f"{symbols.get('error', '❌')} FAILED: {display_name} ({name}): {e}",
            "error",
            logger_to_use,
            app_settings,
            exc_info=True,
        )
        return False

    if not result:
        log_installer(
            f"{symbols.get('error', '❌')} Failed to install {display_name}",
            "error",
            logger_to_use,
            app_settings,
        )
        return False
    return True


def run_install_plan(
    plan: InstallPlan,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
    confirm: Callable[..., bool] = cli_confirm,
) -> Dict[str, bool]:
    """
    Run the system update once, then each planned component in order.

    In interactive mode every component is confirmed first; declined
    components are left out of the result.

    Returns:
        Mapping of component name to installation success, in run order.
    """
    logger_to_use = current_logger if current_logger else logger
    symbols = app_settings.symbols

    if not update_system(app_settings, logger_to_use):
        log_installer(
            f"{symbols.get('warning', '!')} System update failed; continuing with component installation.",
            "warning",
            logger_to_use,
            app_settings,
        )

    results: Dict[str, bool] = {}
    for name in plan.components:
        if plan.mode == InstallMode.INTERACTIVE:
            component_class = ComponentRegistry.get_component(name)
            display_name = str(
                component_class.metadata.get("display_name") or name
            )
            if not confirm(
                f"Install {display_name}?", app_settings, logger_to_use
            ):
                log_installer(
                    f"{symbols.get('info', 'ℹ️')} Skipping {display_name}",
                    "info",
                    logger_to_use,
                    app_settings,
                )
                continue
        results[name] = execute_component(name, app_settings, logger_to_use)
    return results


def log_summary(
    results: Dict[str, bool],
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    logger_to_use = current_logger if current_logger else logger
    symbols = app_settings.symbols

    log_installer(
        "===== Installation Summary =====", "info", logger_to_use, app_settings
    )
    if not results:
        log_installer(
            f"{symbols.get('info', 'ℹ️')} No components were installed.",
            "info",
            logger_to_use,
            app_settings,
        )
        return
    for name, succeeded in results.items():
        display_name = str(
            ComponentRegistry.get_component(name).metadata.get("display_name")
            or name
        )
        if succeeded:
            log_installer(
                f"{symbols.get('success', '✅')} {display_name}: installed",
                "success",
                logger_to_use,
                app_settings,
            )
        else:
            log_installer(
                f"{symbols.get('error', '❌')} {display_name}: failed",
                "error",
                logger_to_use,
                app_settings,
            )
    succeeded_count = sum(1 for ok in results.values() if ok)
    log_installer(
        f"{succeeded_count} of {len(results)} components installed successfully.",
        "info",
        logger_to_use,
        app_settings,
    )


def main_installer_entry(cli_args_list: Optional[List[str]] = None) -> int:
    parser = build_parser()
    parsed_cli_args = parser.parse_args(cli_args_list)

    try:
        app_settings = load_app_settings(
            parsed_cli_args, parsed_cli_args.config_file
        )
    except SystemExit as e:
        print(
            f"CRITICAL: Failed to load or validate application configuration: {e}",
            file=sys.stderr,
        )
        return 1

    # Dry runs log to the console only.
    log_file: Optional[str] = None
    if app_settings.dry_run:
        common_setup_logging(
            log_level=logging.INFO,
            log_to_console=True,
            log_prefix=f"{app_settings.log_prefix} {DRY_RUN_LOG_PREFIX}",
        )
    else:
        log_file = app_settings.log_file or default_log_file_path()
        common_setup_logging(
            log_level=logging.INFO,
            log_file=log_file,
            log_to_console=True,
            log_prefix=app_settings.log_prefix,
        )

    if parsed_cli_args.view_config:
        view_configuration(app_settings, logger)
        return 0

    log_installer(
        f"{app_settings.symbols.get('sparkles', '✨')} Server Services Installer (v{static_config.SCRIPT_VERSION})",
        "info",
        logger,
        app_settings,
    )

    if not app_settings.dry_run and not is_root():
        log_installer(
            f"{app_settings.symbols.get('error', '❌')} This script must be run as root",
            "critical",
            logger,
            app_settings,
        )
        print(
            f"Please run with: sudo {parser.prog} {' '.join(cli_args_list if cli_args_list is not None else sys.argv[1:])}",
            file=sys.stderr,
        )
        return 1

    if app_settings.dry_run:
        log_installer(
            f"{app_settings.symbols.get('info', 'ℹ️')} Dry-run mode: skipping root check. No commands will be executed and no files written.",
            "info",
            logger,
            app_settings,
        )

    plan = resolve_install_plan(parsed_cli_args)
    logger.debug(f"Install plan: {plan.mode} {plan.components}")

    results = run_install_plan(plan, app_settings, logger)
    log_summary(results, app_settings, logger)

    log_installer(
        f"{app_settings.symbols.get('sparkles', '✨')} Installation completed."
        + (f" Check {log_file} for details." if log_file else ""),
        "success",
        logger,
        app_settings,
    )
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main_installer_entry())
