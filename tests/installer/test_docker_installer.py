# tests/installer/test_docker_installer.py
import subprocess
from pathlib import Path
from unittest.mock import MagicMock, create_autospec

from common.debian.apt_manager import AptManager
from installer.docker_installer import DockerEngineComponent


def _component(mocker, app_settings, logger):
    mock_apt_manager_instance = create_autospec(AptManager, instance=True)
    mock_apt_manager_instance.install.return_value = True
    mock_apt_manager_instance.add_gpg_key_from_url.return_value = True
    mock_apt_manager_instance.add_repository.return_value = True
    mocker.patch(
        "installer.docker_installer.AptManager",
        return_value=mock_apt_manager_instance,
    )
    return DockerEngineComponent(app_settings, logger), mock_apt_manager_instance


def test_install_docker_engine_success(mocker, app_settings, mock_logger):
    """Test DockerEngineComponent.install successful execution."""
    component, apt = _component(mocker, app_settings, mock_logger)
    mocker.patch(
        "installer.docker_installer.get_distribution_codename",
        return_value="noble",
    )
    mocker.patch(
        "installer.docker_installer.get_dpkg_architecture",
        return_value="amd64",
    )
    mocker.patch(
        "installer.docker_installer.get_sudo_user", return_value="alice"
    )
    mock_elevated = mocker.patch(
        "installer.docker_installer.run_elevated_command"
    )
    mock_run = mocker.patch(
        "installer.docker_installer.run_command",
        return_value=MagicMock(returncode=0),
    )

    assert component.install() is True

    apt.remove.assert_called_once_with(
        [
            "docker.io",
            "docker-doc",
            "docker-compose",
            "podman-docker",
            "containerd",
            "runc",
        ],
        app_settings,
    )
    apt.add_gpg_key_from_url.assert_called_once_with(
        "https://download.docker.com/linux/ubuntu/gpg",
        "/etc/apt/keyrings/docker.asc",
        app_settings,
    )
    apt.add_repository.assert_called_once_with(
        "deb [arch=amd64 signed-by=/etc/apt/keyrings/docker.asc] "
        "https://download.docker.com/linux/ubuntu noble stable",
        "/etc/apt/sources.list.d/docker.list",
        app_settings,
        update_after=False,
    )
    assert apt.install.call_args_list[-1].args[0] == [
        "docker-ce",
        "docker-ce-cli",
        "containerd.io",
        "docker-buildx-plugin",
        "docker-compose-plugin",
    ]
    assert mock_elevated.call_args.args[0] == [
        "usermod",
        "-aG",
        "docker",
        "alice",
    ]
    assert mock_run.call_args.args[0] == ["docker", "run", "--rm", "hello-world"]
    assert Path(app_settings.config_root).is_dir()


def test_gpg_key_failure_stops_install(mocker, app_settings, mock_logger):
    component, apt = _component(mocker, app_settings, mock_logger)
    apt.add_gpg_key_from_url.return_value = False

    assert component.install() is False
    apt.add_repository.assert_not_called()


def test_unknown_codename_fails(mocker, app_settings, mock_logger):
    component, apt = _component(mocker, app_settings, mock_logger)
    mocker.patch(
        "installer.docker_installer.get_distribution_codename",
        return_value=None,
    )

    assert component.install() is False
    apt.add_repository.assert_not_called()


def test_verification_failure(mocker, app_settings, mock_logger):
    component, _ = _component(mocker, app_settings, mock_logger)
    mocker.patch(
        "installer.docker_installer.get_distribution_codename",
        return_value="noble",
    )
    mocker.patch(
        "installer.docker_installer.get_dpkg_architecture",
        return_value="amd64",
    )
    mocker.patch(
        "installer.docker_installer.run_command",
        side_effect=subprocess.CalledProcessError(125, "docker"),
    )

    assert component.install() is False
    assert any(
        "verification failed" in c.args[0]
        for c in mock_logger.error.call_args_list
    )


def test_no_sudo_user_skips_group(mocker, app_settings, mock_logger):
    component, _ = _component(mocker, app_settings, mock_logger)
    mock_elevated = mocker.patch(
        "installer.docker_installer.run_elevated_command"
    )

    component.add_user_to_group()

    mock_elevated.assert_not_called()


def test_dry_run_runs_no_processes(
    mocker, dry_run_settings, mock_logger, logged_messages, tmp_path
):
    mock_run = mocker.patch("common.command_utils.subprocess.run")
    mocker.patch(
        "common.debian.apt_manager.command_exists", return_value=False
    )
    mocker.patch(
        "installer.docker_installer.get_distribution_codename",
        return_value="noble",
    )

    component = DockerEngineComponent(dry_run_settings, mock_logger)

    assert component.install() is True
    mock_run.assert_not_called()
    assert not (tmp_path / "docker-configs").exists()
    messages = logged_messages()
    assert "Would execute: Verifying Docker installation" in messages
    assert any(
        m.startswith("Command: write 1 lines to /etc/apt/sources.list.d/docker.list")
        for m in messages
    )


def test_dry_run_codename_placeholder_falls_back_to_version_codename(
    mocker, dry_run_settings, mock_logger
):
    _component(mocker, dry_run_settings, mock_logger)
    mocker.patch(
        "installer.docker_installer.get_distribution_codename",
        return_value=None,
    )
    mocker.patch(
        "installer.docker_installer.get_dpkg_architecture", return_value=None
    )

    component = DockerEngineComponent(dry_run_settings, mock_logger)
    line = component.repository_line()

    assert line == (
        "deb [arch=$(dpkg --print-architecture) "
        "signed-by=/etc/apt/keyrings/docker.asc] "
        "https://download.docker.com/linux/ubuntu "
        "$(. /etc/os-release && echo ${UBUNTU_CODENAME:-$VERSION_CODENAME}) "
        "stable"
    )
