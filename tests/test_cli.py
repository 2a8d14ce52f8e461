"""
Tests for the command-line interface.
"""

import pytest
from click.testing import CliRunner

from spotlight_search import __version__
from spotlight_search import cli as cli_module
from spotlight_search.cli import cli
from spotlight_search.config import Config


@pytest.fixture
def runner(monkeypatch, temp_dir):
    # Keep the user's own config files out of the tests
    monkeypatch.setattr(cli_module, "load_config", Config)
    return CliRunner()


@pytest.fixture
def report_tree(temp_dir):
    for name in ["Report.PDF", "report_final.txt", "image.png"]:
        (temp_dir / name).write_text("x")
    return temp_dir


def test_query_prints_matches(runner, report_tree):
    result = runner.invoke(cli, [str(report_tree), "--no-progress", "--query", "report"],
                           env={"COLUMNS": "200"})
    assert result.exit_code == 0, result.output
    assert "2 found" in result.output
    assert "image.png" not in result.output


def test_query_respects_limit(runner, report_tree):
    result = runner.invoke(cli, [str(report_tree), "--no-progress", "-q", "e", "--limit", "1"],
                           env={"COLUMNS": "200"})
    assert result.exit_code == 0, result.output
    assert "1 found" in result.output


def test_query_without_matches(runner, report_tree):
    result = runner.invoke(cli, [str(report_tree), "--no-progress", "-q", "nothing"])
    assert result.exit_code == 0
    assert "No matches found." in result.output


def test_stats(runner, report_tree):
    result = runner.invoke(cli, [str(report_tree), "--no-progress", "--stats"])
    assert result.exit_code == 0, result.output
    assert "Files: 3" in result.output


def test_root_defaults_to_current_directory(runner, report_tree, monkeypatch):
    monkeypatch.chdir(report_tree)
    result = runner.invoke(cli, ["--no-progress", "--stats"])
    assert result.exit_code == 0, result.output
    assert "Files: 3" in result.output


def test_unresolvable_working_directory_is_fatal(runner, monkeypatch):
    def gone():
        raise FileNotFoundError(2, "No such file or directory")

    indexed = []
    monkeypatch.setattr(cli_module.os, "getcwd", gone)
    monkeypatch.setattr(cli_module, "build_index", lambda *args, **kwargs: indexed.append(args))
    result = runner.invoke(cli, ["--no-progress"])
    assert result.exit_code == 1
    assert indexed == []


def test_missing_root_indexes_nothing(runner, temp_dir):
    result = runner.invoke(cli, [str(temp_dir / "missing"), "--no-progress", "--stats"])
    assert result.exit_code == 0, result.output
    assert "Files: 0" in result.output


def test_missing_root_query_finds_nothing(runner, temp_dir):
    result = runner.invoke(cli, [str(temp_dir / "missing"), "--no-progress", "-q", "x"])
    assert result.exit_code == 0, result.output
    assert "No matches found." in result.output


def test_interactive_mode_needs_a_terminal(runner, report_tree):
    result = runner.invoke(cli, [str(report_tree), "--no-progress"])
    assert result.exit_code == 1


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output
