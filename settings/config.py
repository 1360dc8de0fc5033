# settings/config.py
# -*- coding: utf-8 -*-
"""
Centralized static constants and definitions for the server services installer.

This module defines truly static values for the installer, such as package
lists for apt installation, the fixed component order, and the log file
location pattern.

Mutable runtime configuration (ports, hostnames, versions, the configuration
root) is handled by 'settings/config_models.py' and 'settings/config_loader.py'.
"""

SCRIPT_VERSION: str = "2.0"

LOG_FILE_DIR: str = "/tmp"
LOG_FILE_NAME_PATTERN: str = "server_install_{timestamp}.log"
LOG_FILE_TIMESTAMP_FORMAT: str = "%Y%m%d_%H%M%S"

# Order in which components are offered and installed.
COMPONENT_ORDER: list[str] = [
    "basic",
    "docker",
    "gitlab",
    "nginx",
    "redmine",
    "zabbix",
    "grafana",
]

BASIC_PACKAGES: list[str] = [
    "mc",
    "inxi",
    "curl",
    "fail2ban",
    "htop",
    "iotop",
    "net-tools",
    "wget",
    "lsof",
    "git",
    "unzip",
    "tar",
    "chrony",
]

DOCKER_CONFLICTING_PACKAGES: list[str] = [
    "docker.io",
    "docker-doc",
    "docker-compose",
    "podman-docker",
    "containerd",
    "runc",
]

DOCKER_PREREQ_PACKAGES: list[str] = [
    "ca-certificates",
    "curl",
    "gnupg",
]

DOCKER_PACKAGES: list[str] = [
    "docker-ce",
    "docker-ce-cli",
    "containerd.io",
    "docker-buildx-plugin",
    "docker-compose-plugin",
]

DOCKER_KEYRING_PATH: str = "/etc/apt/keyrings/docker.asc"
DOCKER_SOURCES_LIST_PATH: str = "/etc/apt/sources.list.d/docker.list"

ENV_FILE_NAME: str = ".env"
COMPOSE_FILE_NAME: str = "docker-compose.yml"
README_FILE_NAME: str = "README.md"
