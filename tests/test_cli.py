"""Tests for the patternkit CLI."""

import json
import logging

import pytest
from typer.testing import CliRunner

from patternkit._version import __version__
from patternkit.cli.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger = logging.getLogger("patternkit")
    logger.handlers = []
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


def _run(source, *args):
    return runner.invoke(app, ["-s", str(source), *args])


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert f"patternkit {__version__}" in result.stdout


def test_info(library_dir):
    result = _run(library_dir, "info")
    assert result.exit_code == 0
    assert "Collections: 1" in result.stdout
    assert "Components:  3" in result.stdout
    assert "Variants:    4" in result.stdout


def test_list(library_dir):
    result = _run(library_dir, "list")
    assert result.exit_code == 0
    for handle in ("@button", "@input", "@card"):
        assert handle in result.stdout


def test_list_by_tag(library_dir):
    result = _run(library_dir, "list", "--tag", "actions")
    assert result.exit_code == 0
    assert "@button" in result.stdout
    assert "@card" not in result.stdout

    result = _run(library_dir, "list", "--tag", "nothing")
    assert result.exit_code == 0
    assert "No components found" in result.stdout


def test_show_variant(library_dir):
    result = _run(library_dir, "show", "@button:large")
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["handle"] == "large"
    assert data["fullHandle"] == "@button:large"
    assert data["isDefault"] is False


def test_show_by_path(library_dir):
    result = _run(library_dir, "show", "forms/input")
    assert result.exit_code == 0
    assert json.loads(result.stdout)["handle"] == "input"


def test_context(library_dir):
    result = _run(library_dir, "context", "@card")
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"size": "lg"}


@pytest.mark.parametrize("ref", ["@nope", "@button:huge"])
def test_unknown_reference_exits_with_error(library_dir, ref):
    result = _run(library_dir, "show", ref)
    assert result.exit_code == 1


def test_missing_source_directory(tmp_path):
    result = _run(tmp_path / "missing", "info")
    assert result.exit_code == 1


def test_new(library_dir):
    result = _run(library_dir, "new", "forms/select", "--label", "Select box")
    assert result.exit_code == 0
    assert "Created" in result.stdout
    assert (library_dir / "forms" / "select" / "select.hbs").exists()

    listed = _run(library_dir, "list")
    assert "@select" in listed.stdout

    again = _run(library_dir, "new", "forms/select")
    assert again.exit_code == 1


def test_invalid_settings_file(library_dir, tmp_path):
    settings = tmp_path / "broken.yaml"
    settings.write_text("splitter: [1, 2\n")
    result = runner.invoke(app, ["-s", str(library_dir), "-c", str(settings), "info"])
    assert result.exit_code == 1
