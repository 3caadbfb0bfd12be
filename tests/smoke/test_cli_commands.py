"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
They don't validate correctness deeply - just that commands work.

Usage:
    pytest tests/smoke/test_cli_commands.py -v
    pytest tests/smoke/test_cli_commands.py -v -m smoke
"""

import json

import pytest
from rich.console import Console
from typer.testing import CliRunner

from biaslab.cli import biaslab_cli
from biaslab.cli.biaslab_cli import app

# Mark all tests in this module as smoke tests
pytestmark = pytest.mark.smoke

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_env(tmp_path, monkeypatch):
    """Point the CLI at a throwaway data directory and the bundled catalog."""
    monkeypatch.setenv("BIASLAB_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("BIASLAB_STORAGE_BACKEND", "file")
    monkeypatch.setenv("BIASLAB_LOG_LEVEL", "ERROR")
    monkeypatch.delenv("BIASLAB_CATALOG_SOURCE", raising=False)
    monkeypatch.setattr(biaslab_cli, "console", Console(width=200))
    return tmp_path


def run_cli_command(*args: str, input: str | None = None):
    return runner.invoke(app, list(args), input=input)


def stored_state(data_dir):
    return json.loads((data_dir / "biaslab_v1.json").read_text(encoding="utf-8"))


class TestCLIHelp:
    """Test that help commands work."""

    def test_main_help(self):
        result = run_cli_command("--help")
        assert result.exit_code == 0, result.output
        for command in ("practice", "stats", "library", "concept", "set", "reset"):
            assert command in result.output

    def test_practice_help(self):
        result = run_cli_command("practice", "--help")
        assert result.exit_code == 0, result.output
        assert "--concept" in result.output


class TestCLIStats:
    """Test stats command."""

    def test_stats_on_fresh_install(self):
        result = run_cli_command("stats")
        assert result.exit_code == 0, result.output
        assert "Your Stats" in result.output
        assert "Answer more scenarios to see targeted suggestions." in result.output

    def test_stats_after_practice_lists_missed(self):
        run_cli_command("practice", "--seed", "1", "-c", "anchoring", input="2\n2\n")
        result = run_cli_command("stats")
        assert result.exit_code == 0, result.output
        assert "Most missed" in result.output
        assert "biaslab practice -c anchoring" in result.output


class TestCLILibrary:
    """Test library and concept commands."""

    def test_library_lists_bundled_concepts(self):
        result = run_cli_command("library")
        assert result.exit_code == 0, result.output
        assert "Confirmation Bias" in result.output
        assert "Sunk Cost Fallacy" in result.output

    def test_library_search(self):
        result = run_cli_command("library", "-s", "anchor")
        assert result.exit_code == 0, result.output
        assert "Anchoring Effect" in result.output
        assert "Straw Man" not in result.output

    def test_library_search_without_match(self):
        result = run_cli_command("library", "--search", "quantum")
        assert result.exit_code == 0, result.output
        assert "No entries match" in result.output

    def test_concept_detail(self):
        result = run_cli_command("concept", "sunk_cost")
        assert result.exit_code == 0, result.output
        assert "Sunk Cost Fallacy" in result.output
        assert "Mastery:" in result.output

    def test_unknown_concept(self):
        result = run_cli_command("concept", "not_a_bias")
        assert result.exit_code == 1
        assert "Unknown concept" in result.output


class TestCLIPractice:
    """Test interactive practice."""

    def test_drill_runs_to_completion(self, cli_env):
        result = run_cli_command("practice", "--seed", "1", "-c", "anchoring", input="1\n1\n")
        assert result.exit_code == 0, result.output
        assert "Session complete" in result.output
        assert "You answered" in result.output
        assert stored_state(cli_env)["stats"]["totalAnswered"] == 2

    def test_feedback_lines_use_plain_separators(self):
        result = run_cli_command("practice", "--seed", "1", "-c", "anchoring", input="1\n1\n")
        assert result.exit_code == 0, result.output
        assert "Correct" in result.output
        assert "\u2014" not in result.output

    def test_quit_immediately(self, cli_env):
        result = run_cli_command("practice", "--seed", "3", input="q\n")
        assert result.exit_code == 0, result.output
        assert "Session ended" in result.output
        assert "0 out of 0" in result.output

    def test_skip_records_nothing(self, cli_env):
        result = run_cli_command("practice", "-c", "anchoring", input="s\ns\n")
        assert result.exit_code == 0, result.output
        assert "0 out of 2" in result.output
        assert not (cli_env / "biaslab_v1.json").exists()


class TestCLISettings:
    """Test set and reset commands."""

    def test_set_theme(self, cli_env):
        result = run_cli_command("set", "theme", "light")
        assert result.exit_code == 0, result.output
        assert "theme = light" in result.output
        assert stored_state(cli_env)["settings"]["theme"] == "light"

    def test_set_audio_off(self, cli_env):
        result = run_cli_command("set", "audio", "off")
        assert result.exit_code == 0, result.output
        assert stored_state(cli_env)["settings"]["audio"] is False

    @pytest.mark.parametrize(("key", "value"), [("theme", "neon"), ("audio", "loud"), ("volume", "11")])
    def test_invalid_setting(self, key, value):
        result = run_cli_command("set", key, value)
        assert result.exit_code == 1

    def test_reset_with_yes(self, cli_env):
        run_cli_command("set", "theme", "light")
        result = run_cli_command("reset", "--yes")
        assert result.exit_code == 0, result.output
        assert "Progress reset" in result.output
        assert stored_state(cli_env)["settings"]["theme"] == "dark"

    def test_reset_cancelled(self, cli_env):
        run_cli_command("set", "theme", "light")
        result = run_cli_command("reset", input="n\n")
        assert result.exit_code == 0, result.output
        assert "Cancelled" in result.output
        assert stored_state(cli_env)["settings"]["theme"] == "light"
