"""Unit tests for the main CLI application."""

import logging

import pytest
from backsync import __version__
from backsync.cli.main import app, configure_logging
from typer.testing import CliRunner

runner = CliRunner()


class TestMainApp:
    """Tests for global options."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"backsync version {__version__}" in result.stdout

    def test_short_version(self) -> None:
        result = runner.invoke(app, ["-V"])

        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_help_lists_commands(self) -> None:
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("diff", "sync", "config"):
            assert command in result.stdout

    def test_no_args_shows_help(self) -> None:
        result = runner.invoke(app, [])

        assert "Usage" in result.output


class TestConfigureLogging:
    """Tests for log level selection."""

    @pytest.mark.parametrize(
        ("verbose", "quiet", "level"),
        [
            (False, False, logging.WARNING),
            (True, False, logging.DEBUG),
            (False, True, logging.ERROR),
            (True, True, logging.DEBUG),
        ],
    )
    def test_levels(self, verbose: bool, quiet: bool, level: int) -> None:
        configure_logging(verbose, quiet)

        assert logging.getLogger().level == level

    def test_verbose_flag(self) -> None:
        result = runner.invoke(app, ["--verbose", "config", "path"])

        assert result.exit_code == 0
        assert logging.getLogger().level == logging.DEBUG
