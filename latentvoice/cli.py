"""Command-line interface for latentvoice.

Responsibilities:
- Expose user-facing commands for synthesis, voice listing, and tokenization.
- Convert CLI arguments into `SynthesisConfig` and run the pipeline.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from .audio.noise import GaussianNoiseSampler
from .audio.wav import write_wav
from .cli_rendering import (
    ProgressPrinter,
    echo_synthesis_summary,
    echo_voice_list,
    exit_with_command_error,
)
from .config import ConfigLoader, SynthesisConfig
from .errors import ConfigurationError
from .io.assets import AssetLayout
from .models.datatypes import SynthesisRequest
from .pipeline import SynthesisPipeline
from .telemetry.logger import RunLogger
from .text.normalizer import TextNormalizer
from .text.tokenizer import UnicodeTokenizer, load_unicode_index_table
from .tts.voices import VOICE_CATALOG, load_voice_style

app = typer.Typer(
    name="latentvoice",
    no_args_is_help=True,
    help="latentvoice CLI.",
)


def _load_config(config_file: Path | None) -> SynthesisConfig:
    """Load a YAML config file when requested and map failures to config errors."""

    if config_file is None:
        return SynthesisConfig()

    try:
        return ConfigLoader.from_yaml(config_file)
    except FileNotFoundError as exc:
        raise ConfigurationError(
            f"Config file not found: `{config_file}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise ConfigurationError(
            f"Invalid config file `{config_file}`: {exc}",
            hint="Fix config schema/values and rerun.",
        ) from exc


def _resolve_config(config_file: Path | None, **overrides: object) -> SynthesisConfig:
    """Apply explicit CLI overrides on top of YAML (or default) config values."""

    base = _load_config(config_file)
    try:
        return base.with_overrides(**overrides)
    except ValueError as exc:
        raise ConfigurationError(str(exc), hint="Adjust the command options and rerun.") from exc


@app.command("synthesize")
def synthesize_command(
    text: Annotated[str, typer.Argument(help="Text to synthesize.")],
    assets: Annotated[
        Path | None,
        typer.Option("--assets", help="Model asset directory with `onnx/` and `voice_styles/`."),
    ] = None,
    out: Annotated[
        Path | None, typer.Option("--out", help="Output WAV path.")
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to YAML config file with command defaults."),
    ] = None,
    lang: Annotated[
        str | None, typer.Option("--lang", help="Language code: en, ko, es, pt, fr.")
    ] = None,
    voice: Annotated[
        str | None, typer.Option("--voice", help="Voice style id, e.g. `M1` or `F2`.")
    ] = None,
    steps: Annotated[
        int | None, typer.Option("--steps", help="Denoising steps (higher is slower, cleaner).")
    ] = None,
    speed: Annotated[
        float | None, typer.Option("--speed", help="Speech speed multiplier.")
    ] = None,
    silence: Annotated[
        float | None,
        typer.Option("--silence", help="Seconds of silence between long-text chunks."),
    ] = None,
    max_chunk_chars: Annotated[
        int | None,
        typer.Option(
            "--max-chunk-chars",
            help="Maximum characters per synthesized chunk; 0 disables chunking.",
        ),
    ] = None,
    seed: Annotated[
        int | None, typer.Option("--seed", help="Noise seed for reproducible output.")
    ] = None,
    provider: Annotated[
        list[str] | None,
        typer.Option("--provider", help="Preferred onnxruntime execution provider (repeatable)."),
    ] = None,
) -> None:
    """Synthesize text into a mono 16-bit WAV file."""

    try:
        config = _resolve_config(
            config_file,
            assets_dir=assets,
            output_path=out,
            language=lang,
            voice=voice,
            total_steps=steps,
            speed=speed,
            silence_seconds=silence,
            max_chunk_chars=max_chunk_chars,
            seed=seed,
            providers=tuple(provider) if provider else None,
        )
        layout = AssetLayout(config.assets_dir)
        style_path = layout.voice_style_path(config.voice)
        if not style_path.is_file():
            raise ConfigurationError(
                f"Voice style not found: `{style_path}`.",
                hint="Run `latentvoice voices --assets <dir>` to list installed voices.",
            )
        voice_style = load_voice_style(style_path)

        progress = ProgressPrinter(command_name="synthesize")
        pipeline = SynthesisPipeline(
            noise_sampler=GaussianNoiseSampler(config.seed),
            normalization_form=config.normalization_form,
            max_chunk_chars=config.max_chunk_chars,
            run_logger=RunLogger(),
        )
        backend = pipeline.load(config.assets_dir, providers=config.providers, on_progress=progress)
        typer.echo(f"Backend: {backend}")
        result = pipeline.synthesize(
            SynthesisRequest(
                text=text,
                language=config.language,
                voice=voice_style,
                total_steps=config.total_steps,
                speed=config.speed,
                silence_seconds=config.silence_seconds,
            ),
            on_progress=progress,
        )
        output_path = write_wav(config.output_path, result.audio, result.sample_rate)
    except Exception as exc:
        exit_with_command_error("synthesize", exc)

    echo_synthesis_summary(result, output_path)


@app.command("voices")
def voices_command(
    assets: Annotated[
        Path | None,
        typer.Option("--assets", help="Model asset directory to check for style files."),
    ] = None,
) -> None:
    """List the published voices and, with `--assets`, which are installed."""

    installed = set(AssetLayout(assets).available_voice_ids()) if assets is not None else None
    echo_voice_list(VOICE_CATALOG, installed)


@app.command("tokenize")
def tokenize_command(
    text: Annotated[str, typer.Argument(help="Text to tokenize.")],
    assets: Annotated[
        Path, typer.Option("--assets", help="Model asset directory with `onnx/unicode_indexer.json`.")
    ] = Path("assets"),
    lang: Annotated[str, typer.Option("--lang", help="Language code for the wrapper markers.")] = "ko",
    normalization_form: Annotated[
        str, typer.Option("--form", help="Unicode decomposition form: NFD or NFKD.")
    ] = "NFD",
) -> None:
    """Print the token ids the pipeline would feed to the models."""

    try:
        table = load_unicode_index_table(AssetLayout(assets).unicode_indexer_path)
        tokenizer = UnicodeTokenizer(table, TextNormalizer(form=normalization_form.upper()))
        tokens = tokenizer.tokenize(text, lang)
    except Exception as exc:
        exit_with_command_error("tokenize", exc)

    typer.echo(" ".join(str(token) for token in tokens))
    typer.echo(f"Tokens: {len(tokens)}")


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
