"""
Component installers for the server services installer.

Importing this package registers every component with the
``ComponentRegistry`` in the fixed installation order.
"""

from installer.base_component import BaseComponent
from installer.compose_stack import ComposeStackComponent
from installer.registry import ComponentRegistry

# Registration side effects.
from installer import (  # noqa: F401, E402
    basic_installer,
    docker_installer,
    gitlab_installer,
    grafana_installer,
    nginx_installer,
    redmine_installer,
    zabbix_installer,
)

__all__ = ["BaseComponent", "ComponentRegistry", "ComposeStackComponent"]
