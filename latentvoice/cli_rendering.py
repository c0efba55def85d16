"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
progress lines, synthesis summaries, and voice listings.
"""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer

from .audio.wav import format_duration
from .errors import LatentVoiceError
from .models.datatypes import SynthesisProgress, SynthesisResult
from .tts.voices import VoiceProfile


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, LatentVoiceError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


class ProgressPrinter:
    """Render one deterministic line per progress checkpoint."""

    def __init__(self, command_name: str) -> None:
        """Initialize progress printer metadata for a command invocation."""

        self._command_name = command_name

    def __call__(self, progress: SynthesisProgress) -> None:
        typer.echo(
            f"[progress] command={self._command_name} stage={progress.stage} "
            f"{progress.progress:5.1f}% {progress.message}"
        )


def echo_synthesis_summary(result: SynthesisResult, output_path: Path) -> None:
    """Print output path, duration, and sample rate of a finished run."""

    typer.echo(f"Audio: {output_path}")
    typer.echo(f"Duration: {format_duration(result.duration_seconds)} ({result.duration_seconds:.2f}s)")
    typer.echo(f"Sample rate: {result.sample_rate} Hz")
    typer.echo(f"Chunks: {result.chunk_count}")


def echo_voice_list(profiles: tuple[VoiceProfile, ...], installed: set[str] | None) -> None:
    """Print compact voice rows, marking which style files are installed."""

    for profile in profiles:
        marker = ""
        if installed is not None:
            marker = " [installed]" if profile.style_id in installed else " [missing]"
        typer.echo(
            f"{profile.style_id} {profile.name} ({profile.gender}){marker}: {profile.description}"
        )
