"""Synthesize command integration tests over stubbed inference stages."""

from pathlib import Path
import struct

from typer.testing import CliRunner

from latentvoice.audio.wav import wav_duration_seconds
from latentvoice.cli import app


def test_synthesize_command_writes_wav_and_reports_summary(
    stub_engine, asset_dir: Path, tmp_path: Path
) -> None:
    """Synthesize should run every stage, write a WAV, and print a summary."""

    runner = CliRunner()
    out_path = tmp_path / "out" / "hello.wav"

    result = runner.invoke(
        app,
        [
            "synthesize",
            "Hello there.",
            "--assets",
            str(asset_dir),
            "--out",
            str(out_path),
            "--lang",
            "en",
            "--voice",
            "F1",
            "--steps",
            "3",
            "--seed",
            "11",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Backend: CPUExecutionProvider" in result.output
    assert "[progress] command=synthesize stage=loading" in result.output
    assert "stage=generating  80.0% Generating speech... (3/3)" in result.output
    assert "stage=complete 100.0% Done." in result.output
    assert f"Audio: {out_path}" in result.output
    assert "Sample rate: 1000 Hz" in result.output
    assert "Chunks: 1" in result.output
    assert len(stub_engine.sessions["vector_estimator"].calls) == 3

    payload = out_path.read_bytes()
    assert len(payload) == 44 + 60 * 2
    assert struct.unpack("<I", payload[24:28])[0] == 1000
    assert wav_duration_seconds(payload) == 0.06


def test_synthesize_command_applies_yaml_config(
    stub_engine, asset_dir: Path, tmp_path: Path
) -> None:
    """YAML values should drive the run and CLI flags should override them."""

    config_path = tmp_path / "latentvoice.yaml"
    config_path.write_text(
        "\n".join(
            [
                f"assets_dir: {asset_dir.as_posix()}",
                f"output_path: {(tmp_path / 'from_config.wav').as_posix()}",
                "language: en",
                "voice: M1",
                "total_steps: 2",
                "speed: 2",
                "providers: [CUDAExecutionProvider]",
            ]
        ),
        encoding="utf-8",
    )
    runner = CliRunner()

    result = runner.invoke(
        app, ["synthesize", "Hi", "--config", str(config_path), "--steps", "4"]
    )

    assert result.exit_code == 0, result.output
    assert (tmp_path / "from_config.wav").exists()
    assert "Backend: CUDAExecutionProvider" in result.output
    assert stub_engine.requested_providers[0] == ["CUDAExecutionProvider"]
    assert len(stub_engine.sessions["vector_estimator"].calls) == 4
    assert stub_engine.sessions["vocoder"].calls[0]["latent"].shape == (1, 6, 3)


def test_synthesize_command_joins_long_text_chunks(
    stub_engine, asset_dir: Path, tmp_path: Path
) -> None:
    """Long text should be synthesized per chunk and joined with silence."""

    out_path = tmp_path / "long.wav"
    runner = CliRunner()

    result = runner.invoke(
        app,
        [
            "synthesize",
            "First sentence here. Second sentence here.",
            "--assets",
            str(asset_dir),
            "--out",
            str(out_path),
            "--lang",
            "en",
            "--steps",
            "1",
            "--max-chunk-chars",
            "25",
            "--silence",
            "0.5",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Chunks: 2" in result.output
    assert "[2/2] Converting latent to audio..." in result.output
    assert len(stub_engine.sessions["vocoder"].calls) == 2
    assert len(out_path.read_bytes()) == 44 + (60 + 500 + 60) * 2


def test_synthesize_command_zero_chunk_size_keeps_text_whole(
    stub_engine, asset_dir: Path, tmp_path: Path
) -> None:
    """`--max-chunk-chars 0` should disable chunking instead of failing."""

    result = CliRunner().invoke(
        app,
        [
            "synthesize",
            "First sentence here. Second sentence here.",
            "--assets",
            str(asset_dir),
            "--out",
            str(tmp_path / "whole.wav"),
            "--lang",
            "en",
            "--steps",
            "1",
            "--max-chunk-chars",
            "0",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Chunks: 1" in result.output
    assert len(stub_engine.sessions["vocoder"].calls) == 1
