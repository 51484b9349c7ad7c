"""Tests for CLI commands."""

from click.testing import CliRunner
import pytest

from cpdscan.cli import main


@pytest.fixture
def runner():
    """Create a CLI runner."""
    return CliRunner()


def test_main_help(runner):
    """Test main help command."""
    result = runner.invoke(main, ["--help"])
    assert result.exit_code == 0
    assert "Copy-Paste Detector" in result.output


def test_version(runner):
    """Test version command."""
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_detect_help(runner):
    """Test detect help command."""
    result = runner.invoke(main, ["detect", "--help"])
    assert result.exit_code == 0
    assert "Find duplicated code" in result.output
    assert "--minimum-tokens" in result.output


def test_languages(runner):
    """Test listing the supported languages."""
    result = runner.invoke(main, ["languages"])
    assert result.exit_code == 0
    for name in ["java", "cpp", "plsql", "python", "any"]:
        assert name in result.output
