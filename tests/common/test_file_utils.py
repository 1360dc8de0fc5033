import os
import stat

from common.file_utils import ensure_directory, write_text_file


def test_ensure_directory_creates_parents(app_settings, mock_logger, tmp_path):
    target = tmp_path / "a" / "b" / "c"

    ensure_directory(target, app_settings, mock_logger)

    assert target.is_dir()


def test_ensure_directory_is_idempotent(app_settings, mock_logger, tmp_path):
    ensure_directory(tmp_path / "x", app_settings, mock_logger)
    ensure_directory(tmp_path / "x", app_settings, mock_logger)

    assert (tmp_path / "x").is_dir()


def test_ensure_directory_dry_run_logs_only(
    dry_run_settings, mock_logger, logged_messages, tmp_path
):
    target = tmp_path / "never"

    ensure_directory(
        target, dry_run_settings, mock_logger, description="Creating stack dir"
    )

    assert not target.exists()
    messages = logged_messages()
    assert "Would execute: Creating stack dir" in messages
    assert f"Command: mkdir -p {target}" in messages


def test_write_text_file_writes_content_and_mode(
    app_settings, mock_logger, tmp_path
):
    target = tmp_path / ".env"

    write_text_file(target, "A=1\nB=2\n", app_settings, mock_logger, mode=0o600)

    assert target.read_text(encoding="utf-8") == "A=1\nB=2\n"
    assert stat.S_IMODE(target.stat().st_mode) == 0o600


def test_write_text_file_dry_run_writes_nothing(
    dry_run_settings, mock_logger, logged_messages, tmp_path
):
    target = tmp_path / "docker-compose.yml"

    write_text_file(
        target,
        "services:\n  web: {}\n",
        dry_run_settings,
        mock_logger,
        description="Creating compose file",
    )

    assert not target.exists()
    messages = logged_messages()
    assert "Would execute: Creating compose file" in messages
    assert f"Command: write 2 lines to {target}" in messages


def _record_modes_on_open(mocker):
    real_fdopen = os.fdopen
    modes = []

    def recording_fdopen(fd, *args, **kwargs):
        modes.append(stat.S_IMODE(os.fstat(fd).st_mode))
        return real_fdopen(fd, *args, **kwargs)

    mocker.patch("common.file_utils.os.fdopen", side_effect=recording_fdopen)
    return modes


def test_write_text_file_creates_private_file_before_writing(
    mocker, app_settings, mock_logger, tmp_path
):
    modes = _record_modes_on_open(mocker)
    mock_chmod = mocker.spy(os, "chmod")
    target = tmp_path / ".env"

    write_text_file(
        target, "DB_PASSWORD=secret\n", app_settings, mock_logger, mode=0o600
    )

    assert modes == [0o600]
    mock_chmod.assert_not_called()
    assert target.read_text(encoding="utf-8") == "DB_PASSWORD=secret\n"


def test_write_text_file_narrows_existing_file_before_writing(
    mocker, app_settings, mock_logger, tmp_path
):
    target = tmp_path / ".env"
    target.write_text("OLD=1\n", encoding="utf-8")
    os.chmod(target, 0o644)
    modes = _record_modes_on_open(mocker)

    write_text_file(
        target, "DB_PASSWORD=secret\n", app_settings, mock_logger, mode=0o600
    )

    assert modes == [0o600]
    assert stat.S_IMODE(target.stat().st_mode) == 0o600
    assert target.read_text(encoding="utf-8") == "DB_PASSWORD=secret\n"
