"""
Tests for the main module.
"""

import io
import logging
from unittest.mock import patch

from rich.console import Console
from rich.logging import RichHandler

from filecabinet.config import Settings
from filecabinet.main import main, run, setup_logging


def test_run_session():
    """Test a short interactive session end to end."""
    console = Console(file=io.StringIO(), width=200)
    answers = iter(["stat", "exit"])

    with patch.object(Console, "input", side_effect=lambda prompt="": next(answers)):
        assert run(Settings(), console) == 0

    out = console.file.getvalue()
    assert "Using default validation rules. Using memory mode." in out
    assert "0 record(s). 0 of them are deleted." in out
    assert "Exiting an application..." in out


def test_run_reports_configuration_errors():
    console = Console(file=io.StringIO(), width=200)
    assert run(Settings(validation_rules="strict"), console) == 1
    assert "Unknown validation rule set" in console.file.getvalue()


def test_main_parses_arguments():
    with patch("filecabinet.main.run", return_value=0) as run_mock:
        assert main(["-s", "file", "--use-cache"]) == 0

    settings = run_mock.call_args[0][0]
    assert settings.file_mode
    assert settings.use_cache


def test_setup_logging_installs_single_handler():
    setup_logging("DEBUG")
    setup_logging("INFO")

    package_logger = logging.getLogger("filecabinet")
    assert package_logger.level == logging.INFO
    assert sum(isinstance(h, RichHandler) for h in package_logger.handlers) == 1
