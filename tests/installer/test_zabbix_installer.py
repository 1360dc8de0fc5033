import os
import stat
import subprocess

import yaml

from installer.zabbix_installer import ZabbixComponent
from settings.config_models import (
    ZABBIX_DEMO_MYSQL_PASSWORD,
    ZABBIX_DEMO_MYSQL_ROOT_PASSWORD,
)


def test_dry_run_renders_demo_passwords(mocker, dry_run_settings, mock_logger):
    mock_run = mocker.patch("common.command_utils.subprocess.run")

    component = ZabbixComponent(dry_run_settings, mock_logger)

    assert component.install() is True
    mock_run.assert_not_called()
    env_text = component.rendered_files[".env"]
    assert f"MYSQL_PASSWORD={ZABBIX_DEMO_MYSQL_PASSWORD}" in env_text
    assert f"MYSQL_ROOT_PASSWORD={ZABBIX_DEMO_MYSQL_ROOT_PASSWORD}" in env_text
    assert "ZABBIX_TIMEZONE=Europe/Bratislava" in env_text
    assert not component.stack_dir.exists()


def test_compose_descriptor_services_and_network(
    mocker, dry_run_settings, mock_logger
):
    mocker.patch("common.command_utils.subprocess.run")
    component = ZabbixComponent(dry_run_settings, mock_logger)
    component.install()

    compose = yaml.safe_load(component.rendered_files["docker-compose.yml"])

    assert set(compose["services"]) == {
        "mysql-server",
        "zabbix-java-gateway",
        "zabbix-server",
        "zabbix-web",
    }
    ipam = compose["networks"]["zabbix-net"]["ipam"]["config"][0]
    assert ipam["subnet"] == "${ZABBIX_NETWORK_SUBNET}"
    assert ipam["ip_range"] == "${ZABBIX_NETWORK_IPRANGE}"
    assert compose["services"]["zabbix-web"]["ports"] == [
        "${ZABBIX_WEB_PORT}:8080"
    ]


def test_prompted_values_and_distinct_secrets(
    mocker, app_settings, mock_logger
):
    mocker.patch("builtins.input", side_effect=["9090", "", "UTC"])
    mocker.patch(
        "installer.zabbix_installer.generate_secret",
        side_effect=["user-secret", "root-secret"],
    )
    mocker.patch(
        "common.command_utils.subprocess.run",
        return_value=subprocess.CompletedProcess([], 0),
    )

    component = ZabbixComponent(app_settings, mock_logger)

    assert component.install() is True
    env_text = (component.stack_dir / ".env").read_text(encoding="utf-8")
    assert "ZABBIX_WEB_PORT=9090" in env_text
    assert "ZABBIX_SERVER_PORT=10051" in env_text
    assert "ZABBIX_TIMEZONE=UTC" in env_text
    assert "MYSQL_PASSWORD=user-secret" in env_text
    assert "MYSQL_ROOT_PASSWORD=root-secret" in env_text
    readme = (component.stack_dir / "README.md").read_text(encoding="utf-8")
    assert "connect to this server on port 10051" in readme


def test_env_file_is_private_while_secrets_are_written(
    mocker, app_settings, mock_logger
):
    mocker.patch("builtins.input", return_value="")
    mocker.patch(
        "common.command_utils.subprocess.run",
        return_value=subprocess.CompletedProcess([], 0),
    )
    real_fdopen = os.fdopen
    modes = []

    def recording_fdopen(fd, *args, **kwargs):
        modes.append(stat.S_IMODE(os.fstat(fd).st_mode))
        return real_fdopen(fd, *args, **kwargs)

    mocker.patch("common.file_utils.os.fdopen", side_effect=recording_fdopen)

    component = ZabbixComponent(app_settings, mock_logger)

    assert component.install() is True
    assert modes == [0o600]
    env_file = component.stack_dir / ".env"
    assert stat.S_IMODE(env_file.stat().st_mode) == 0o600
    assert "MYSQL_ROOT_PASSWORD=" in env_file.read_text(encoding="utf-8")


def test_readme_uses_configured_compose_command(
    mocker, dry_run_settings, mock_logger
):
    mock_run = mocker.patch("common.command_utils.subprocess.run")
    dry_run_settings.compose_command = "docker compose"

    component = ZabbixComponent(dry_run_settings, mock_logger)

    assert component.install() is True
    mock_run.assert_not_called()
    readme = component.rendered_files["README.md"]
    assert "docker compose logs -f zabbix-server" in readme
    assert "docker-compose " not in readme
