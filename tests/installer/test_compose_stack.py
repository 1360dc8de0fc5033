import subprocess

import pytest
import yaml

from installer.compose_stack import validate_compose_descriptor
from installer.gitlab_installer import GitlabComponent
from installer.grafana_installer import GrafanaComponent
from installer.nginx_installer import NginxComponent


def test_validate_compose_descriptor_accepts_services():
    descriptor = validate_compose_descriptor(
        "services:\n  web:\n    image: nginx\n"
    )
    assert "web" in descriptor["services"]


@pytest.mark.parametrize(
    "content",
    ["", "- a\n- b\n", "version: '3.8'\n", "services: []\n", "services: {}\n", "a: [b\n"],
)
def test_validate_compose_descriptor_rejects(content):
    with pytest.raises(ValueError):
        validate_compose_descriptor(content)


def test_dry_run_gitlab_writes_nothing(
    mocker, dry_run_settings, mock_logger, logged_messages
):
    mock_run = mocker.patch("common.command_utils.subprocess.run")
    mock_input = mocker.patch("builtins.input")

    component = GitlabComponent(dry_run_settings, mock_logger)

    assert component.install() is True
    mock_run.assert_not_called()
    mock_input.assert_not_called()
    assert not (component.stack_dir.parent).exists()

    messages = logged_messages()
    for name in (".env", "docker-compose.yml", "README.md"):
        assert any(
            name in m
            for m in messages
            if m.startswith(("Would execute:", "Command:"))
        ), name
    assert "Would execute: Starting GitLab containers" in messages


def test_gitlab_install_writes_files_and_starts_stack(
    mocker, app_settings, mock_logger, tmp_path
):
    app_settings.gitlab.home = str(tmp_path / "srv-gitlab")
    mocker.patch("builtins.input", return_value="")
    mock_run = mocker.patch(
        "common.command_utils.subprocess.run",
        return_value=subprocess.CompletedProcess([], 0),
    )

    component = GitlabComponent(app_settings, mock_logger)

    assert component.install() is True

    stack_dir = tmp_path / "docker-configs" / "gitlab"
    env_text = (stack_dir / ".env").read_text(encoding="utf-8")
    assert "GITLAB_HOSTNAME=gitlab.example.com" in env_text
    assert "GITLAB_EXTERNAL_URL=https://gitlab.example.com" in env_text
    assert "GITLAB_HTTP_PORT=8080" in env_text
    assert (stack_dir / ".env").stat().st_mode & 0o777 == 0o600

    compose = yaml.safe_load(
        (stack_dir / "docker-compose.yml").read_text(encoding="utf-8")
    )
    gitlab_service = compose["services"]["gitlab"]
    assert gitlab_service["image"] == "gitlab/gitlab-ee:${GITLAB_VERSION}"
    assert "${GITLAB_HTTP_PORT}:80" in gitlab_service["ports"]

    readme = (stack_dir / "README.md").read_text(encoding="utf-8")
    assert "SSH: git@gitlab.example.com:2222" in readme
    assert (tmp_path / "srv-gitlab").is_dir()

    mock_run.assert_called_once()
    assert mock_run.call_args.args[0] == ["docker-compose", "up", "-d"]
    assert mock_run.call_args.kwargs["cwd"] == str(stack_dir)


def test_compose_command_is_split(mocker, app_settings, mock_logger):
    app_settings.compose_command = "docker compose"
    mocker.patch("builtins.input", return_value="")
    mock_run = mocker.patch(
        "common.command_utils.subprocess.run",
        return_value=subprocess.CompletedProcess([], 0),
    )

    assert NginxComponent(app_settings, mock_logger).install() is True
    assert mock_run.call_args.args[0] == ["docker", "compose", "up", "-d"]


def test_compose_up_failure_returns_false(mocker, app_settings, mock_logger):
    mocker.patch("builtins.input", return_value="")
    mocker.patch(
        "common.command_utils.subprocess.run",
        side_effect=subprocess.CalledProcessError(1, ["docker-compose"]),
    )

    assert NginxComponent(app_settings, mock_logger).install() is False
    assert any(
        "Failed to start Nginx containers" in c.args[0]
        for c in mock_logger.error.call_args_list
    )


def test_directory_failure_returns_false(mocker, app_settings, mock_logger):
    mocker.patch(
        "installer.compose_stack.ensure_directory",
        side_effect=PermissionError("denied"),
    )
    mock_run = mocker.patch("common.command_utils.subprocess.run")

    assert GrafanaComponent(app_settings, mock_logger).install() is False
    mock_run.assert_not_called()


def test_broken_template_is_reported(mocker, app_settings, mock_logger):
    mocker.patch("builtins.input", return_value="")
    mock_run = mocker.patch("common.command_utils.subprocess.run")

    component = NginxComponent(app_settings, mock_logger)
    component.compose_template = "services: {unknown_placeholder}\n"

    assert component.install() is False
    mock_run.assert_not_called()
    assert not (component.stack_dir / ".env").exists()
