"""Integration tests for the `voices` and `tokenize` commands."""

from pathlib import Path

from typer.testing import CliRunner

from latentvoice.cli import app


def test_voices_command_lists_catalog() -> None:
    """Without assets, every published voice should be listed."""

    result = CliRunner().invoke(app, ["voices"])

    assert result.exit_code == 0, result.output
    lines = result.output.strip().splitlines()
    assert len(lines) == 10
    assert lines[0].startswith("M1 Minjun (male): ")
    assert lines[-1].startswith("F5 Haeun (female): ")


def test_voices_command_marks_installed_styles(asset_dir: Path) -> None:
    """With assets, voices should be marked installed or missing."""

    result = CliRunner().invoke(app, ["voices", "--assets", str(asset_dir)])

    assert result.exit_code == 0, result.output
    assert "M1 Minjun (male) [installed]" in result.output
    assert "F1 Seoyeon (female) [installed]" in result.output
    assert "M2 Seojun (male) [missing]" in result.output


def test_tokenize_command_prints_token_ids(asset_dir: Path) -> None:
    """Tokenize should print wrapped codepoint ids and their count."""

    result = CliRunner().invoke(app, ["tokenize", "Hi", "--assets", str(asset_dir), "--lang", "en"])

    assert result.exit_code == 0, result.output
    assert "60 101 110 62 72 105 60 47 101 110 62" in result.output
    assert "Tokens: 11" in result.output


def test_tokenize_command_reports_invalid_table(asset_dir: Path) -> None:
    """A malformed index table should fail at the format stage."""

    (asset_dir / "onnx" / "unicode_indexer.json").write_text("{}", encoding="utf-8")

    result = CliRunner().invoke(app, ["tokenize", "Hi", "--assets", str(asset_dir)])

    assert result.exit_code == 1
    assert "tokenize failed at stage `format`" in result.output
