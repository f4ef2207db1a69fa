"""Tests for the stylescope command-line interface."""

import json

import pytest
from typer.testing import CliRunner

from stylescope.config import PROJECT_CONFIG_FILENAME
from stylescope.main import app

runner = CliRunner()


@pytest.fixture
def stylesheet(write_file):
    """Create a stylesheet with two classes."""
    return write_file("src/button.css", ".root { color: red }\n.label { composes: root; }\n")


def test_help():
    """Test that the CLI help command works."""
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "Resolve CSS Modules stylesheets" in result.stdout


def test_tokens_help():
    """Test that the tokens command help works."""
    result = runner.invoke(app, ["tokens", "--help"])
    assert result.exit_code == 0
    assert "--pattern" in result.stdout


def test_tokens_prints_json(tmp_path, stylesheet):
    """Test printing the token map to stdout."""
    result = runner.invoke(
        app,
        ["tokens", str(stylesheet), "--pattern", "[name]__[local]", "--context", str(tmp_path)],
    )

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {
        "root": "button__root",
        "label": "button__label button__root",
    }


def test_tokens_writes_output_file(tmp_path, stylesheet):
    """Test writing the token map to a file."""
    output = tmp_path / "tokens.json"

    result = runner.invoke(
        app,
        [
            "tokens",
            str(stylesheet),
            "--pattern",
            "[local]",
            "--context",
            str(tmp_path),
            "--output",
            str(output),
        ],
    )

    assert result.exit_code == 0
    assert json.loads(output.read_text()) == {"root": "root", "label": "label root"}


def test_tokens_reads_project_config(tmp_path, write_file, stylesheet):
    """Test that the project config supplies the naming pattern."""
    write_file(PROJECT_CONFIG_FILENAME, "generate_scoped_name: '[name]--[local]'\n")

    result = runner.invoke(app, ["tokens", str(stylesheet), "--context", str(tmp_path)])

    assert result.exit_code == 0
    assert json.loads(result.stdout)["root"] == "button--root"


def test_pattern_overrides_project_config(tmp_path, write_file, stylesheet):
    """Test that command line flags win over the config file."""
    config = write_file("config/custom.yaml", "generate_scoped_name: '[name]--[local]'\n")

    result = runner.invoke(
        app,
        [
            "tokens",
            str(stylesheet),
            "--config",
            str(config),
            "--pattern",
            "[folder]_[local]",
            "--context",
            str(tmp_path),
        ],
    )

    assert result.exit_code == 0
    assert json.loads(result.stdout)["root"] == "src_root"


def test_tokens_missing_file(tmp_path):
    """Test that a missing stylesheet exits with status 1."""
    result = runner.invoke(app, ["tokens", str(tmp_path / "missing.css")])
    assert result.exit_code == 1


def test_tokens_transform_error(tmp_path, write_file):
    """Test that malformed stylesheets exit with status 1."""
    path = write_file("broken.css", ".a { composes: missing; }\n")

    result = runner.invoke(app, ["tokens", str(path), "--context", str(tmp_path)])

    assert result.exit_code == 1


def test_plugins_lists_registry():
    """Test listing the registered syntaxes and plugins."""
    result = runner.invoke(app, ["plugins"])

    assert result.exit_code == 0
    assert "scss" in result.stdout
    assert "modules-scope" in result.stdout
    assert "discard-comments" in result.stdout


@pytest.mark.parametrize("pattern", ["[md9:hash:hex:8]", "[hash:base65:8]"])
def test_tokens_unsupported_hash_pattern(tmp_path, stylesheet, pattern):
    """Test that naming patterns with unknown hashes exit with status 1."""
    result = runner.invoke(
        app, ["tokens", str(stylesheet), "--pattern", pattern, "--context", str(tmp_path)]
    )

    assert result.exit_code == 1
