import argparse

import pytest

from settings.config_loader import load_app_settings, read_yaml_config
from settings.config_models import CONFIG_ROOT_DEFAULT, AppSettings


def _cli(**overrides):
    values = {"dry_run": False, "config_root": None, "log_file": None}
    values.update(overrides)
    return argparse.Namespace(**values)


def test_defaults_when_no_config_file(tmp_path, mock_logger):
    settings = load_app_settings(
        _cli(), str(tmp_path / "missing.yaml"), mock_logger
    )

    assert settings.dry_run is False
    assert settings.config_root == CONFIG_ROOT_DEFAULT
    assert settings.gitlab.hostname == "gitlab.example.com"
    assert settings.gitlab.http_port == 8080
    assert settings.redmine.database == "postgres"
    assert settings.zabbix.timezone == "Europe/Bratislava"
    assert settings.grafana.org_name == "Main Org."


def test_environment_overrides_defaults(monkeypatch, tmp_path, mock_logger):
    monkeypatch.setenv("SSI_CONFIG_ROOT", "/opt/stacks")
    monkeypatch.setenv("SSI_GITLAB__HOSTNAME", "git.internal")

    settings = load_app_settings(
        _cli(), str(tmp_path / "missing.yaml"), mock_logger
    )

    assert settings.config_root == "/opt/stacks"
    assert settings.gitlab.hostname == "git.internal"
    assert settings.gitlab.http_port == 8080


def test_yaml_overrides_environment(monkeypatch, tmp_path, mock_logger):
    monkeypatch.setenv("SSI_GITLAB__HOSTNAME", "from-env")
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "gitlab:\n  hostname: from-yaml\nzabbix:\n  web_port: 9100\n",
        encoding="utf-8",
    )

    settings = load_app_settings(_cli(), str(config_file), mock_logger)

    assert settings.gitlab.hostname == "from-yaml"
    assert settings.gitlab.ssh_port == 2222
    assert settings.zabbix.web_port == 9100


def test_cli_overrides_yaml(tmp_path, mock_logger):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "config_root: /from/yaml\ndry_run: false\n", encoding="utf-8"
    )

    settings = load_app_settings(
        _cli(config_root="/from/cli", dry_run=True),
        str(config_file),
        mock_logger,
    )

    assert settings.config_root == "/from/cli"
    assert settings.dry_run is True


def test_unset_dry_run_flag_keeps_yaml_value(tmp_path, mock_logger):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("dry_run: true\n", encoding="utf-8")

    settings = load_app_settings(_cli(), str(config_file), mock_logger)

    assert settings.dry_run is True


def test_invalid_yaml_value_raises_system_exit(tmp_path, mock_logger):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("nginx:\n  port: 70000\n", encoding="utf-8")

    with pytest.raises(SystemExit, match="Configuration error"):
        load_app_settings(_cli(), str(config_file), mock_logger)


def test_invalid_redmine_database_rejected(tmp_path, mock_logger):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("redmine:\n  database: sqlite\n", encoding="utf-8")

    with pytest.raises(SystemExit):
        load_app_settings(_cli(), str(config_file), mock_logger)


def test_read_yaml_config_ignores_non_mapping(tmp_path, mock_logger):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("- just\n- a list\n", encoding="utf-8")

    assert read_yaml_config(str(config_file), mock_logger) == {}
    mock_logger.warning.assert_called_once()


def test_read_yaml_config_ignores_unparseable(tmp_path, mock_logger):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("gitlab: [unclosed\n", encoding="utf-8")

    assert read_yaml_config(str(config_file), mock_logger) == {}
    mock_logger.warning.assert_called_once()


def test_gitlab_external_url():
    settings = AppSettings()
    settings.gitlab.hostname = "git.example.org"
    assert settings.gitlab.external_url == "https://git.example.org"
