import datetime
import logging
import sys
from unittest.mock import MagicMock

from common.core_utils import (
    SymbolFormatter,
    default_log_file_path,
    setup_logging,
)


def test_default_log_file_path():
    now = datetime.datetime(2024, 1, 2, 3, 4, 5)
    assert default_log_file_path(now) == "/tmp/server_install_20240102_030405.log"


def test_setup_logging_with_file_and_console(mocker, tmp_path):
    """Test setup_logging when both log_file and log_to_console are provided."""
    mock_file_handler = mocker.patch("logging.FileHandler")
    mock_stream_handler = mocker.patch("logging.StreamHandler")
    mock_formatter = mocker.patch("common.core_utils.SymbolFormatter")

    mock_root_logger = MagicMock()
    mocker.patch("logging.getLogger", return_value=mock_root_logger)
    mock_root_logger.handlers = []

    log_file_path = tmp_path / "logs" / "install.log"

    setup_logging(log_file=str(log_file_path), log_to_console=True)

    mock_file_handler.assert_called_once_with(log_file_path, mode="a")
    mock_stream_handler.assert_called_once_with(sys.stdout)
    assert mock_formatter.call_count == 1
    assert mock_root_logger.addHandler.call_count == 2
    assert log_file_path.parent.is_dir()


def test_setup_logging_console_only_uses_prefix(mocker):
    mocker.patch("logging.StreamHandler")
    mock_formatter = mocker.patch("common.core_utils.SymbolFormatter")
    mock_root_logger = MagicMock()
    mocker.patch("logging.getLogger", return_value=mock_root_logger)
    mock_root_logger.handlers = []

    setup_logging(log_to_console=True, log_prefix="[SERVER-INSTALL] [DRY-RUN]")

    fmt = mock_formatter.call_args.kwargs["fmt"]
    assert fmt.startswith("[SERVER-INSTALL] [DRY-RUN] %(asctime)s")
    assert mock_formatter.call_args.kwargs["datefmt"] == "%Y-%m-%d %H:%M:%S"
    assert mock_root_logger.addHandler.call_count == 1


def test_symbol_formatter_adds_level_symbol():
    formatter = SymbolFormatter(
        fmt="%(symbol)s %(message)s", symbols={"error": "E!", "info": "I"}
    )
    record = logging.LogRecord(
        "test", logging.ERROR, __file__, 1, "boom", None, None
    )

    assert formatter.format(record) == "E! boom"
