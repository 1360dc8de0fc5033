# settings/config_models.py
# -*- coding: utf-8 -*-
"""
Pydantic models for application configuration.

This module defines the structured settings for the installer, including
defaults, type annotations, and descriptions. Each container stack has its
own model; fields marked with ``prompt`` in their schema extras are asked
for interactively, using the field description as the prompt text and the
current value as the default.
"""

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Default Static Values (can be overridden by config file/env/cli) ---
LOG_PREFIX_DEFAULT: str = "[SERVER-INSTALL]"
DRY_RUN_LOG_PREFIX: str = "[DRY-RUN]"
CONFIG_ROOT_DEFAULT: str = "/home/docker-configs"
COMPOSE_COMMAND_DEFAULT: str = "docker-compose"
CONTAINER_RUNTIME_COMMAND_DEFAULT: str = "docker"
DOCKER_REPO_URL_DEFAULT: str = "https://download.docker.com/linux/ubuntu"

GITLAB_HOSTNAME_DEFAULT: str = "gitlab.example.com"
GITLAB_HOME_DEFAULT: str = "/srv/gitlab"

REDMINE_DEMO_DB_PASSWORD: str = "demo_redmine_password_123"
ZABBIX_DEMO_MYSQL_PASSWORD: str = "demo_password_123"
ZABBIX_DEMO_MYSQL_ROOT_PASSWORD: str = "demo_root_password_123"

GRAFANA_PLUGINS_DEFAULT: str = (
    "grafana-clock-panel,grafana-simple-json-datasource,"
    "grafana-worldmap-panel,grafana-piechart-panel"
)

SYMBOLS_DEFAULT: Dict[str, str] = {
    "success": "✅",
    "error": "❌",
    "warning": "⚠️",
    "info": "ℹ️",
    "step": "➡️",
    "gear": "⚙️",
    "package": "📦",
    "rocket": "🚀",
    "sparkles": "✨",
    "critical": "🔥",
    "debug": "🐛",
    "file": "📄",
}

PROMPT = {"prompt": True}


def _port(default: int, description: str):
    """A prompted TCP port field."""
    return Field(
        default=default,
        ge=1,
        le=65535,
        description=description,
        json_schema_extra=PROMPT,
    )


class GitlabSettings(BaseModel):
    """GitLab stack parameters."""

    hostname: str = Field(
        default=GITLAB_HOSTNAME_DEFAULT,
        min_length=1,
        description="Enter GitLab hostname (e.g., gitlab.example.com)",
        json_schema_extra=PROMPT,
    )
    version: str = Field(
        default="latest",
        min_length=1,
        description="Enter GitLab version (e.g., 16.10.0, latest)",
        json_schema_extra=PROMPT,
    )
    http_port: int = _port(8080, "Enter HTTP port for GitLab")
    https_port: int = _port(8443, "Enter HTTPS port for GitLab")
    ssh_port: int = _port(2222, "Enter SSH port for GitLab")
    home: str = Field(
        default=GITLAB_HOME_DEFAULT,
        description="Host directory for GitLab config, logs and data.",
    )

    @property
    def external_url(self) -> str:
        return f"https://{self.hostname}"


class NginxSettings(BaseModel):
    """Nginx stack parameters."""

    port: int = _port(80, "Enter port to expose Nginx")
    version: str = Field(default="latest", description="Nginx image tag.")
    container_name: str = Field(
        default="docker-nginx", description="Name of the Nginx container."
    )


class RedmineSettings(BaseModel):
    """Redmine stack parameters."""

    port: int = _port(3000, "Enter Redmine port")
    database: Literal["postgres", "mysql"] = Field(
        default="postgres",
        description="Database backend for Redmine.",
    )
    version: str = Field(default="latest", description="Redmine image tag.")
    db_user: str = Field(default="redmine", description="Database user.")
    db_name: str = Field(default="redmine", description="Database name.")


class ZabbixSettings(BaseModel):
    """Zabbix stack parameters."""

    web_port: int = _port(9000, "Enter Zabbix web port")
    server_port: int = _port(10051, "Enter Zabbix server port")
    timezone: str = Field(
        default="Europe/Bratislava",
        min_length=1,
        description="Enter timezone",
        json_schema_extra=PROMPT,
    )
    version: str = Field(
        default="alpine-7.2-latest", description="Zabbix image tag."
    )
    mysql_version: str = Field(
        default="8.0-oracle", description="MySQL image tag."
    )
    mysql_database: str = Field(default="zabbix")
    mysql_user: str = Field(default="zabbix")
    network_subnet: str = Field(default="172.35.0.0/16")
    network_iprange: str = Field(default="172.35.240.0/20")


class GrafanaSettings(BaseModel):
    """Grafana stack parameters."""

    port: int = _port(3000, "Enter port to expose Grafana")
    admin_password: str = Field(
        default="admin",
        min_length=1,
        description="Enter Grafana admin password",
        json_schema_extra=PROMPT,
    )
    org_name: str = Field(
        default="Main Org.",
        min_length=1,
        description="Enter organization name",
        json_schema_extra=PROMPT,
    )
    plugins: str = Field(
        default=GRAFANA_PLUGINS_DEFAULT,
        description="Comma separated plugins installed on first start.",
    )


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="SSI_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    dry_run: bool = Field(
        default=False,
        description="Describe external actions instead of performing them.",
    )
    config_root: str = Field(
        default=CONFIG_ROOT_DEFAULT,
        description="Directory holding one sub-directory per container stack.",
    )
    log_prefix: str = Field(
        default=LOG_PREFIX_DEFAULT,
        description="Prefix for log messages from the installer.",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Log file path. A timestamped file in /tmp is used when unset.",
    )
    compose_command: str = Field(
        default=COMPOSE_COMMAND_DEFAULT,
        description="Command used to bring stacks up (e.g., 'docker-compose' or 'docker compose').",
    )
    container_runtime_command: str = Field(
        default=CONTAINER_RUNTIME_COMMAND_DEFAULT,
        description="Command for the container runtime CLI.",
    )
    docker_repo_url: str = Field(
        default=DOCKER_REPO_URL_DEFAULT,
        description="Base URL of Docker's apt repository.",
    )
    basic_packages: Optional[List[str]] = Field(
        default=None,
        description="Override for the basic utilities package list.",
    )

    gitlab: GitlabSettings = Field(default_factory=GitlabSettings)
    nginx: NginxSettings = Field(default_factory=NginxSettings)
    redmine: RedmineSettings = Field(default_factory=RedmineSettings)
    zabbix: ZabbixSettings = Field(default_factory=ZabbixSettings)
    grafana: GrafanaSettings = Field(default_factory=GrafanaSettings)

    symbols: Dict[str, str] = Field(
        default_factory=lambda: dict(SYMBOLS_DEFAULT)
    )
